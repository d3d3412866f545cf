#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Northwind • Static Builder

Renders the one-page marketing site that hosts the hamburger menu:
- config: site.yml (+ ENV override: SITE_URL, MENU_BREAKPOINT, DIST_DIR)
- nav: tools/menu_builder.py (data/nav.* override or site.yml navigation)
- copy assets/ → dist/assets
- render Jinja (templates/page.html) + markdown sections
- 404.html
- contract audit of dist/index.html (tools/audit.py); problems → exit 1

USAGE:
  python tools/build.py
"""
from __future__ import annotations
import sys, shutil
from datetime import datetime, timezone
from pathlib import Path
from typing import Any, Dict, List

from jinja2 import Environment, FileSystemLoader, select_autoescape
from markdown import markdown

sys.path.insert(0, str(Path(__file__).resolve().parent))
import audit  # tools/audit.py
import menu_builder  # tools/menu_builder.py
from site_config import load_config


def write_text(p: Path, s: str):
    p.parent.mkdir(parents=True, exist_ok=True)
    p.write_text(s, "utf-8")

def md_to_html(md: str) -> str:
    if not md: return ""
    return markdown(md, extensions=["extra","sane_lists"])

def make_env(templates: Path) -> Environment:
    return Environment(
        loader=FileSystemLoader(str(templates)),
        autoescape=select_autoescape(["html"])
    )

def sections_ctx(cfg: Dict[str, Any]) -> List[Dict[str, Any]]:
    out = []
    for s in cfg.get("sections") or []:
        sid = str(s.get("id") or "").strip()
        if not sid:
            print(f"[build] WARNING: section without id skipped: {s.get('title')!r}", file=sys.stderr)
            continue
        out.append({"id": sid, "title": s.get("title") or sid.title(), "html": md_to_html(s.get("body_md", ""))})
    return out

def write_404_page(out: Path, brand: str):
    write_text(out/"404.html", f"<!DOCTYPE html><title>404</title><h1>404</h1><p>Page not found. <a href='/'>Back to {brand}</a>.</p>")

def render_page(cfg: Dict[str, Any], nav_items: List[Dict[str, Any]]) -> str:
    root = Path(cfg.get("root", "."))
    env = make_env(root / cfg["paths"]["templates"])
    site = cfg["site"]
    ctx = {
        "site": site,
        "nav_html": menu_builder.render_nav_html(nav_items),
        "cta": cfg.get("cta") or {},
        "sections": sections_ctx(cfg),
        "canonical": (site.get("url") + "/") if site.get("url") else "",
        "year": datetime.now(timezone.utc).year,
    }
    return env.get_template("page.html").render(**ctx)

def build_site(cfg: Dict[str, Any], out: "Path|None" = None) -> Path:
    root = Path(cfg.get("root", "."))
    out = Path(out) if out else root / cfg["paths"]["out"]
    out.mkdir(parents=True, exist_ok=True)

    assets = root / cfg["paths"]["assets"]
    if assets.exists():
        shutil.copytree(assets, out / "assets", dirs_exist_ok=True)

    nav_items = menu_builder.load_nav(cfg)
    write_text(out/"index.html", render_page(cfg, nav_items))
    write_404_page(out, cfg["site"].get("brand") or "home")

    problems = audit.run(out, out/"_reports"/"audit.md")
    if problems:
        print(f"[build] contract audit failed: {len(problems)} problem(s)", file=sys.stderr)
        raise SystemExit(1)
    print(f"[build] OK nav_items={len(nav_items)} sections={len(cfg.get('sections') or [])} breakpoint={cfg['site']['breakpoint']}px -> {out}")
    return out

def main() -> int:
    build_site(load_config())
    return 0


if __name__=="__main__":
    raise SystemExit(main())
