import sys
from pathlib import Path

import pytest

sys.path.append(str(Path(__file__).resolve().parents[1]))
from tools.menu_probe import (
    DESKTOP, MOBILE, TAB_ORDER, ActionFailed, MenuProbe, MenuSnapshot, PollTimeout, Viewport,
    assert_scroll_close, link, poll_until, viewports,
)


class FakeClock:
    def __init__(self):
        self.now = 0.0
        self.sleeps = []

    def __call__(self):
        return self.now

    def sleep(self, seconds):
        self.sleeps.append(seconds)
        self.now += seconds


def test_poll_until_returns_first_match():
    clock = FakeClock()
    values = iter([1, 2, 3])
    got = poll_until(lambda: next(values), lambda v: v >= 2, 500, 25, clock=clock, sleep=clock.sleep)
    assert got == 2
    assert clock.sleeps == [0.025]


def test_poll_until_times_out_with_last_value():
    clock = FakeClock()
    with pytest.raises(PollTimeout) as exc:
        poll_until(lambda: "closed", lambda v: v == "open", 100, 25, what="menu open",
                   clock=clock, sleep=clock.sleep)
    err = exc.value
    assert isinstance(err, AssertionError)
    assert err.last == "closed"
    assert err.observations >= 2
    assert clock.now == pytest.approx(0.1)
    assert "menu open" in str(err) and "last='closed'" in str(err)


def test_poll_until_probes_once_more_at_deadline():
    clock = FakeClock()
    got = poll_until(lambda: clock.now >= 0.05, bool, 50, 40, clock=clock, sleep=clock.sleep)
    assert got is True
    # second sleep is clipped to the deadline
    assert clock.sleeps == pytest.approx([0.04, 0.01])


def test_poll_timeout_without_observations():
    err = PollTimeout("menu closed", 500)
    assert "no observation within 500ms" in str(err)
    assert err.last is None


def test_scroll_tolerance():
    assert_scroll_close(500, 504.5)
    with pytest.raises(AssertionError, match="before=500 after=510"):
        assert_scroll_close(500, 510)
    assert_scroll_close(500, 510, tolerance=10)


def test_snapshot_consistency():
    assert MenuSnapshot(False, "false", False).consistent
    assert MenuSnapshot(True, "true", True).consistent
    assert not MenuSnapshot(True, "false", True).consistent
    assert not MenuSnapshot(False, "false", True).consistent


def test_viewports_from_config():
    assert viewports({}) == (MOBILE, DESKTOP)
    cfg = {"harness": {"viewports": {"mobile": {"width": 390, "height": 844}}}}
    assert viewports(cfg) == (Viewport(390, 844), DESKTOP)
    assert MOBILE.as_dict() == {"width": 375, "height": 667}


def test_tab_order_selectors():
    assert TAB_ORDER == (
        '.nav-link[href="#services"]',
        '.nav-link[href="#process"]',
        '.nav-link[href="#about"]',
        ".nav-cta",
    )
    assert link("#about") == '.nav-link[href="#about"]'


def test_driver_errors_become_action_failures():
    from playwright.sync_api import Error

    def boom():
        raise Error("element is not visible")

    with pytest.raises(ActionFailed, match="click .menu-toggle: element is not visible"):
        MenuProbe(page=None)._act("click .menu-toggle", boom)
