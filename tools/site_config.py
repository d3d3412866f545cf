#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Site config loader.

Reads site.yml (site, paths, navigation, cta, sections, harness) and applies
environment overrides:
  SITE_URL         – canonical base URL written into <head>
  MENU_BREAKPOINT  – mobile/desktop breakpoint in px
  DIST_DIR         – output directory of the build
  MENU_BASE_URL    – run the browser suite against an already deployed page
  BROWSER          – chromium | firefox | webkit
  HEADLESS         – 0/false to watch the browser
  SLOW_MO          – ms delay between driver actions
"""
from __future__ import annotations
import copy, os, sys, pathlib
from typing import Any, Dict

import yaml

ROOT = pathlib.Path(__file__).resolve().parents[1]
CONFIG_PATH = ROOT / "site.yml"

DEFAULTS: Dict[str, Any] = {
    "site": {"brand": "", "title": "", "description": "", "lang": "en", "breakpoint": 768},
    "paths": {"templates": "templates", "assets": "assets", "out": "dist"},
    "navigation": [],
    "cta": {"label": "", "href": ""},
    "sections": [],
    "harness": {
        "viewports": {
            "mobile": {"width": 375, "height": 667},
            "desktop": {"width": 1280, "height": 800},
        },
        "close_timeout_ms": 500,
        "settle_ms": 300,
        "poll_interval_ms": 25,
        "scroll_tolerance_px": 5,
    },
}


def read_yaml(path: "str|pathlib.Path") -> Dict[str, Any]:
    p = pathlib.Path(path)
    raw = p.read_text("utf-8")
    # BOM/CRLF/TAB would otherwise trip the YAML parser
    if raw.startswith("\ufeff"):
        raw = raw.lstrip("\ufeff")
    raw = raw.replace("\r\n", "\n").replace("\r", "\n")
    raw = raw.replace("\t", "  ")
    try:
        return yaml.safe_load(raw) or {}
    except yaml.YAMLError as e:
        print(f"[config] Parse error in {p.name}:", e, file=sys.stderr)
        mark = getattr(e, "problem_mark", None)
        if mark:
            err_line = mark.line + 1
            start = max(1, err_line - 3)
            end = err_line + 3
            lines = raw.split("\n")
            for i in range(start, min(end, len(lines)) + 1):
                prefix = ">>" if i == err_line else "  "
                print(f"{prefix} {i:4d}: {lines[i-1]}", file=sys.stderr)
        raise


def _env(name: str, default: Any) -> Any:
    v = os.getenv(name)
    return default if v is None or str(v).strip() == "" else v


def _truthy(v: Any) -> bool:
    if isinstance(v, bool):
        return v
    return str(v).strip().lower() in {"1", "true", "yes", "y", "on"}


def _merge(base: Dict[str, Any], over: Dict[str, Any]) -> Dict[str, Any]:
    out = dict(base)
    for k, v in (over or {}).items():
        if isinstance(v, dict) and isinstance(out.get(k), dict):
            out[k] = _merge(out[k], v)
        else:
            out[k] = v
    return out


def load_config(path: "str|pathlib.Path|None" = None) -> Dict[str, Any]:
    """Config from site.yml merged over DEFAULTS, with env overrides applied."""
    p = pathlib.Path(path) if path else CONFIG_PATH
    cfg = _merge(copy.deepcopy(DEFAULTS), read_yaml(p) if p.exists() else {})
    cfg["site"]["url"] = (_env("SITE_URL", cfg["site"].get("url", "")) or "").rstrip("/")
    cfg["site"]["breakpoint"] = int(_env("MENU_BREAKPOINT", cfg["site"]["breakpoint"]))
    cfg["paths"]["out"] = _env("DIST_DIR", cfg["paths"]["out"])
    cfg["root"] = p.resolve().parent
    return cfg


def runtime() -> Dict[str, Any]:
    """Browser/driver options for the test session."""
    return {
        "base_url": (_env("MENU_BASE_URL", "") or "").rstrip("/"),
        "browser": str(_env("BROWSER", "chromium")).lower(),
        "headless": _truthy(_env("HEADLESS", True)),
        "slow_mo": int(_env("SLOW_MO", 0)),
    }
