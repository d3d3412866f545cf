#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Menu Builder for the hamburger navigation.
- Reads data/nav.xlsx OR nav.json OR nav.csv (first sheet), else site.yml `navigation`.
- Expected columns: label, href, order, enabled
- Produces the ordered item list and pre-rendered <li> markup for .nav-list.
- Labels must be unique; duplicates emit a warning and are ignored.
"""
from __future__ import annotations
import csv, json
from pathlib import Path
from typing import Dict, List, Any, Optional

from slugify import slugify

SAFE_PROTOCOLS = ("http://", "https://", "/", "#", "mailto:", "tel:")
COLUMNS = ["label", "href", "order", "enabled"]


def _to_bool(v: Any) -> bool:
    if isinstance(v, bool): return v
    if v is None: return True  # missing column/cell means enabled
    s = str(v).strip().lower()
    if s == "": return True
    return s in {"1","true","t","yes","y","on"}

def _to_int(v: Any, default: int) -> int:
    try:
        return int(float(str(v).strip()))
    except (TypeError, ValueError):
        return default

def _sanitize_label(s: Any) -> str:
    return (str(s or "").strip())[:120]

def _sanitize_href(href: Any, label: str) -> str:
    h = str(href or "").strip()
    if not h or not h.startswith(SAFE_PROTOCOLS):
        return f"#{slugify(label) or 'item'}"
    return h

def _key(k: Any) -> str:
    return str(k or "").strip().lower()

def _load_json(p: Path) -> List[Dict[str, Any]]:
    data = json.loads(p.read_text(encoding="utf-8-sig"))
    # either a bare list or {"navigation": [...]}
    if isinstance(data, dict):
        data = data.get("navigation", [])
    return [{_key(k): v for k, v in row.items()} for row in data if isinstance(row, dict)]

def _load_csv(p: Path) -> List[Dict[str, Any]]:
    rows = []
    # utf-8-sig: Excel exports start with a BOM
    with p.open("r", encoding="utf-8-sig", newline="") as f:
        reader = csv.DictReader(f)
        fields = {_key(k) for k in reader.fieldnames or []}
        for r in ("label", "href"):
            if r not in fields:
                raise SystemExit(f"[menu_builder] missing column '{r}' in {p.name}")
        for row in reader:
            rows.append({_key(k): v for k, v in row.items()})
    return rows

def _load_xlsx(p: Path) -> List[Dict[str, Any]]:
    import openpyxl
    wb = openpyxl.load_workbook(p, read_only=True, data_only=True)
    ws = wb.worksheets[0]
    headers = [_key(c.value) for c in next(ws.iter_rows(min_row=1, max_row=1))]
    idx = {h:i for i,h in enumerate(headers)}
    for r in ("label", "href"):
        if r not in idx:
            raise SystemExit(f"[menu_builder] missing column '{r}' in {p.name}")
    rows = []
    for row in ws.iter_rows(min_row=2, values_only=True):
        if not any(c is not None for c in row):
            continue
        rows.append({h: (row[idx[h]] if idx[h] < len(row) else None) for h in COLUMNS if h in idx})
    wb.close()
    return rows


def find_source(data_dir: Path) -> Optional[Path]:
    """First existing nav override file, XLSX > JSON > CSV."""
    for name in ("nav.xlsx", "nav.json", "nav.csv"):
        p = Path(data_dir) / name
        if p.exists():
            return p
    return None


def normalize(raw: List[Dict[str, Any]]) -> List[Dict[str, Any]]:
    """Sanitize, drop disabled/duplicate rows and sort by (order, label)."""
    norm: List[Dict[str, Any]] = []
    seen = set()
    for r in raw:
        label = _sanitize_label(r.get("label"))
        if not label:
            continue
        if not _to_bool(r.get("enabled")):
            continue
        if label in seen:
            print(f"[menu_builder] WARNING: duplicate label '{label}' — skipping")
            continue
        seen.add(label)
        norm.append({
            "label": label,
            "href": _sanitize_href(r.get("href"), label),
            "order": _to_int(r.get("order"), 999),
        })
    norm.sort(key=lambda r: (r["order"], r["label"].lower()))
    return norm


def load_nav(cfg: Dict[str, Any], data_dir: "Path|None" = None) -> List[Dict[str, Any]]:
    data_dir = Path(data_dir) if data_dir else Path(cfg.get("root", ".")) / "data"
    src = find_source(data_dir)
    if not src:
        return normalize(cfg.get("navigation") or [])
    print(f"[menu_builder] Using nav source: {src}")
    ext = src.suffix.lower()
    if ext == ".json":
        raw = _load_json(src)
    elif ext == ".csv":
        raw = _load_csv(src)
    else:
        raw = _load_xlsx(src)
    return normalize(raw)


def escape_html(s: str) -> str:
    return (s.replace("&","&amp;").replace("<","&lt;").replace(">","&gt;")
             .replace('"',"&quot;").replace("'","&#39;"))

def render_nav_html(items: List[Dict[str, Any]]) -> str:
    """Render <li> items for <ul class='nav-list'>"""
    li = []
    for it in items:
        label = escape_html(it["label"])
        href = escape_html(it.get("href", "#"))
        li.append(f'        <li><a class="nav-link" href="{href}">{label}</a></li>')
    return "\n".join(li)
