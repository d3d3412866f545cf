#!/usr/bin/env python3
# -*- coding: utf-8 -*-
"""
Browser harness for the hamburger menu.

- selectors/markers of the widget (.menu-toggle, .nav, .nav-link, .nav-cta, active, menu-open)
- canonical viewports (mobile 375x667, desktop 1280x800)
- poll_until(): bounded polling, the only way to wait for "eventually" states
- MenuProbe: page object over a Playwright Page
- errors: ActionFailed (driver could not act), PollTimeout (never satisfied)
"""
from __future__ import annotations
import re, time
from dataclasses import dataclass
from typing import Any, Callable, Dict, List, Optional, Tuple

from playwright.sync_api import Error as PlaywrightError, Locator, Page

TOGGLE = ".menu-toggle"
NAV = ".nav"
NAV_LINK = ".nav-link"
CTA = ".nav-cta"
ACTIVE = "active"
BODY_LOCK = "menu-open"
TOGGLE_LABEL = "Toggle menu"

ACTIVE_RE = re.compile(rf"(^|\s){ACTIVE}(\s|$)")
BODY_LOCK_RE = re.compile(rf"(^|\s){BODY_LOCK}(\s|$)")

LINK_HREFS = ("#services", "#process", "#about")

def link(href: str) -> str:
    return f'{NAV_LINK}[href="{href}"]'

# keyboard order once the panel is open, starting from the toggle
TAB_ORDER = tuple(link(h) for h in LINK_HREFS) + (CTA,)


@dataclass(frozen=True)
class Viewport:
    width: int
    height: int

    def as_dict(self) -> Dict[str, int]:
        return {"width": self.width, "height": self.height}

MOBILE = Viewport(375, 667)
DESKTOP = Viewport(1280, 800)

def viewports(cfg: Dict[str, Any]) -> Tuple[Viewport, Viewport]:
    """(mobile, desktop) from site.yml harness.viewports."""
    vp = (cfg.get("harness") or {}).get("viewports") or {}
    m, d = vp.get("mobile") or {}, vp.get("desktop") or {}
    return (Viewport(int(m.get("width", MOBILE.width)), int(m.get("height", MOBILE.height))),
            Viewport(int(d.get("width", DESKTOP.width)), int(d.get("height", DESKTOP.height))))


class HarnessError(Exception):
    pass

class ActionFailed(HarnessError):
    """The driver could not perform an input (element missing, not interactable)."""

_NOTHING = object()

class PollTimeout(HarnessError, AssertionError):
    """A polled condition never held within its budget."""

    def __init__(self, what: str, timeout_ms: float, last: Any = _NOTHING, observations: int = 0):
        self.what = what
        self.timeout_ms = timeout_ms
        self.last = None if last is _NOTHING else last
        self.observations = observations
        if observations == 0:
            msg = f"{what}: no observation within {timeout_ms:g}ms"
        else:
            msg = f"{what}: not satisfied within {timeout_ms:g}ms ({observations} observations, last={self.last!r})"
        super().__init__(msg)


def poll_until(probe: Callable[[], Any], predicate: Callable[[Any], bool], timeout_ms: float = 500,
               interval_ms: float = 25, what: str = "condition",
               clock: Callable[[], float] = time.monotonic,
               sleep: Callable[[float], None] = time.sleep) -> Any:
    """Re-evaluate probe() until predicate(value) holds; returns that value.

    The probe runs at least once, and once more after the deadline passes.
    """
    deadline = clock() + timeout_ms / 1000.0
    last: Any = _NOTHING
    n = 0
    while True:
        expired = clock() >= deadline
        last = probe()
        n += 1
        if predicate(last):
            return last
        if expired:
            raise PollTimeout(what, timeout_ms, last, n)
        sleep(max(0.0, min(interval_ms / 1000.0, deadline - clock())))


def assert_scroll_close(before: float, after: float, tolerance: float = 5) -> None:
    if abs(after - before) > tolerance:
        raise AssertionError(f"scroll offset moved: before={before} after={after} (tolerance ±{tolerance}px)")


@dataclass(frozen=True)
class MenuSnapshot:
    is_open: bool
    aria_expanded: Optional[str]
    body_locked: bool

    @property
    def consistent(self) -> bool:
        return self.aria_expanded == ("true" if self.is_open else "false") and self.body_locked == self.is_open


_SNAPSHOT_JS = """([nav, toggle, active, lock]) => {
  const n = document.querySelector(nav);
  const t = document.querySelector(toggle);
  return {
    open: !!n && n.classList.contains(active),
    expanded: t ? t.getAttribute('aria-expanded') : null,
    locked: document.body.classList.contains(lock),
  };
}"""

_RECORD_JS = """() => {
  window.__menuEvents = [];
  document.addEventListener('menu:change', (e) => window.__menuEvents.push(e.detail));
}"""


class MenuProbe:
    """Page object: drives the menu and reads back its observable state."""

    def __init__(self, page: Page, base_url: str = "", close_timeout_ms: int = 500,
                 settle_ms: int = 300, poll_interval_ms: int = 25):
        self.page = page
        self.base_url = base_url.rstrip("/")
        self.close_timeout_ms = close_timeout_ms
        self.settle_ms = settle_ms
        self.poll_interval_ms = poll_interval_ms

    @classmethod
    def from_config(cls, page: Page, base_url: str, cfg: Dict[str, Any]) -> "MenuProbe":
        h = cfg.get("harness") or {}
        return cls(page, base_url,
                   close_timeout_ms=int(h.get("close_timeout_ms", 500)),
                   settle_ms=int(h.get("settle_ms", 300)),
                   poll_interval_ms=int(h.get("poll_interval_ms", 25)))

    # --- locators ---------------------------------------------------------
    @property
    def toggle_button(self) -> Locator:
        return self.page.locator(TOGGLE)

    @property
    def nav(self) -> Locator:
        return self.page.locator(NAV)

    @property
    def body(self) -> Locator:
        return self.page.locator("body")

    @property
    def cta(self) -> Locator:
        return self.page.locator(CTA)

    @property
    def bars(self) -> Locator:
        return self.toggle_button.locator("span")

    def link(self, href: str) -> Locator:
        return self.page.locator(link(href))

    # --- actions ----------------------------------------------------------
    def _act(self, what: str, fn: Callable[[], Any]) -> Any:
        try:
            return fn()
        except PlaywrightError as e:
            raise ActionFailed(f"{what}: {e.message}") from e

    def goto(self, path: str = "/") -> "MenuProbe":
        self._act(f"goto {path}", lambda: self.page.goto(self.base_url + path))
        return self

    def use_viewport(self, vp: Viewport) -> "MenuProbe":
        self._act(f"resize to {vp.width}x{vp.height}", lambda: self.page.set_viewport_size(vp.as_dict()))
        return self

    def toggle(self, times: int = 1, gap_ms: int = 0) -> None:
        for i in range(times):
            if i and gap_ms:
                self.page.wait_for_timeout(gap_ms)
            self._act("click .menu-toggle", self.toggle_button.click)

    def tap(self) -> None:
        self._act("tap .menu-toggle", self.toggle_button.tap)

    def tap_center(self) -> None:
        box = self._act("bounding box of .menu-toggle", self.toggle_button.bounding_box)
        if not box:
            raise ActionFailed(".menu-toggle has no bounding box (not rendered)")
        self._act("touchscreen tap", lambda: self.page.touchscreen.tap(box["x"] + box["width"] / 2,
                                                                       box["y"] + box["height"] / 2))

    def open(self) -> MenuSnapshot:
        if not self.snapshot().is_open:
            self.toggle()
        return poll_until(self.snapshot, lambda s: s.is_open, self.close_timeout_ms,
                          self.poll_interval_ms, "menu open", sleep=self._sleep)

    def close(self) -> MenuSnapshot:
        if self.snapshot().is_open:
            self.toggle()
        return self.wait_closed()

    def press(self, key: str) -> None:
        self._act(f"press {key}", lambda: self.page.keyboard.press(key))

    def click_backdrop(self, x: int = 10, y: int = 10) -> None:
        self._act(f"click .nav at ({x},{y})", lambda: self.nav.click(position={"x": x, "y": y}))

    def settle(self) -> None:
        self.page.wait_for_timeout(self.settle_ms)

    # --- observations -----------------------------------------------------
    def snapshot(self) -> MenuSnapshot:
        d = self.page.evaluate(_SNAPSHOT_JS, [NAV, TOGGLE, ACTIVE, BODY_LOCK])
        return MenuSnapshot(is_open=bool(d["open"]), aria_expanded=d["expanded"], body_locked=bool(d["locked"]))

    def wait_closed(self, timeout_ms: Optional[int] = None) -> MenuSnapshot:
        return poll_until(self.snapshot, lambda s: not s.is_open,
                          self.close_timeout_ms if timeout_ms is None else timeout_ms,
                          self.poll_interval_ms, "menu closed", sleep=self._sleep)

    def scroll_to(self, y: int) -> None:
        self.page.evaluate("(y) => window.scrollTo(0, y)", y)

    def scroll_y(self) -> float:
        return self.page.evaluate("() => window.pageYOffset")

    def record_events(self) -> None:
        self.page.evaluate(_RECORD_JS)

    def events(self) -> List[Dict[str, Any]]:
        return self.page.evaluate("() => window.__menuEvents || []")

    def _sleep(self, seconds: float) -> None:
        self.page.wait_for_timeout(seconds * 1000)
