import subprocess
import sys
from pathlib import Path

import pytest
from playwright.sync_api import sync_playwright

ROOT = Path(__file__).resolve().parents[1]
sys.path.append(str(ROOT))

from tools import serve
from tools.menu_probe import MenuProbe, viewports
from tools.site_config import load_config, runtime


@pytest.fixture(scope="session")
def cfg():
    return load_config()


@pytest.fixture(scope="session", autouse=True)
def build_site():
    """Build dist/ from site.yml once per session, unless MENU_BASE_URL points at a deployed page."""
    if runtime()["base_url"]:
        return
    subprocess.run([sys.executable, "tools/build.py"], check=True, cwd=ROOT)


@pytest.fixture(scope="session")
def site_url(build_site, cfg):
    base = runtime()["base_url"]
    if base:
        yield base
        return
    server, url = serve.start(ROOT / cfg["paths"]["out"])
    yield url
    serve.stop(server)


@pytest.fixture(scope="session")
def browser():
    rt = runtime()
    with sync_playwright() as p:
        b = getattr(p, rt["browser"]).launch(headless=rt["headless"], slow_mo=rt["slow_mo"])
        yield b
        b.close()


@pytest.fixture
def context(browser, request):
    """Fresh, isolated context per scenario; `touch` marker enables a touchscreen."""
    has_touch = request.node.get_closest_marker("touch") is not None
    ctx = browser.new_context(has_touch=has_touch)
    yield ctx
    ctx.close()


@pytest.fixture
def page(context):
    return context.new_page()


@pytest.fixture
def menu(page, site_url, cfg):
    """Probe on a freshly loaded root page (viewport not set yet)."""
    return MenuProbe.from_config(page, site_url, cfg).goto("/")


@pytest.fixture(scope="session")
def mobile(cfg):
    return viewports(cfg)[0]


@pytest.fixture(scope="session")
def desktop(cfg):
    return viewports(cfg)[1]


@pytest.fixture
def mobile_menu(menu, mobile):
    return menu.use_viewport(mobile)
