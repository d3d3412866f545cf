#!/usr/bin/env python3
# Audit of dist/: hamburger menu DOM contract + linked local assets exist.
from __future__ import annotations
import pathlib, re, sys
from typing import List, Tuple

from bs4 import BeautifulSoup

ROOT = pathlib.Path(__file__).resolve().parents[1]
DIST = ROOT / "dist"
REPORT = ROOT / "audit" / "report.md"

REQUIRED_LINKS = ("#services", "#process", "#about")


def check_contract(html_text: str) -> List[str]:
    """Problems with the menu markup as shipped (before any script runs)."""
    soup = BeautifulSoup(html_text or "", "lxml")
    problems: List[str] = []

    toggle = soup.select_one(".menu-toggle")
    if toggle is None:
        problems.append("missing .menu-toggle")
    else:
        if toggle.get("aria-label") != "Toggle menu":
            problems.append(f".menu-toggle aria-label={toggle.get('aria-label')!r}, expected 'Toggle menu'")
        if toggle.get("aria-expanded") != "false":
            problems.append(f".menu-toggle aria-expanded={toggle.get('aria-expanded')!r}, expected 'false'")
        bars = toggle.find_all("span", recursive=False)
        if len(bars) != 3:
            problems.append(f".menu-toggle has {len(bars)} bars, expected 3")

    nav = soup.select_one(".nav")
    if nav is None:
        problems.append("missing .nav")
    else:
        if "active" in (nav.get("class") or []):
            problems.append(".nav is active on load")
        for href in REQUIRED_LINKS:
            if nav.select_one(f'.nav-link[href="{href}"]') is None:
                problems.append(f'missing .nav-link[href="{href}"]')
        if nav.select_one(".nav-cta") is None:
            problems.append("missing .nav-cta")

    body = soup.body
    if body is not None and "menu-open" in (body.get("class") or []):
        problems.append("body has menu-open on load")
    return problems


def extract_assets(html_text: str) -> set:
    srcs = re.findall(r'src="([^"]+)"', html_text)
    hrefs = re.findall(r'<link[^>]+href="([^"]+)"', html_text)
    return set(srcs + hrefs)


def missing_assets(dist: pathlib.Path) -> List[Tuple[str, str]]:
    missing = []
    for p in dist.rglob("*.html"):
        txt = p.read_text("utf-8", errors="ignore")
        for url in extract_assets(txt):
            if url.startswith(("http://", "https://", "//", "data:", "#")):
                continue
            path = url.split("#", 1)[0].split("?", 1)[0].lstrip("/")
            if not (p.parent / path).exists() and not (dist / path).exists():
                missing.append((str(p.relative_to(dist)), url))
    return missing


def run(dist: pathlib.Path = DIST, report: pathlib.Path = REPORT) -> List[str]:
    index = dist / "index.html"
    if not index.exists():
        problems = [f"{index} not found"]
    else:
        problems = check_contract(index.read_text("utf-8"))
    problems += [f"{pg} -> {url} (missing asset)" for pg, url in missing_assets(dist)]

    report.parent.mkdir(parents=True, exist_ok=True)
    report.write_text("# Audit report\n\n"
                      f"- pages: {len(list(dist.rglob('*.html')))}\n"
                      f"- problems: {len(problems)}\n\n" +
                      "\n".join(f"- {x}" for x in problems), "utf-8")
    for x in problems:
        print(f"[audit] ❌ {x}", file=sys.stderr)
    return problems


def main() -> int:
    dist = pathlib.Path(sys.argv[1]) if len(sys.argv) > 1 else DIST
    problems = run(dist)
    print(f"[audit] done: {len(problems)} problem(s)")
    return 1 if problems else 0


if __name__ == "__main__":
    raise SystemExit(main())
