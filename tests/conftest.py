"""Shared fixtures: a throwaway deployment directory and a wired-up app."""

from pathlib import Path

import pytest

from termfolio.config import SiteConfig
from termfolio.site import create_app
from termfolio.testing import TestClient

INDEX_HTML = "<!doctype html><title>~/portfolio</title><main id='terminal'></main>\n" * 8
APP_JS = "export function boot() { console.log('booting'); }\n" * 8
MAIN_CSS = "body { background: #0d0d0d; color: #33ff66; }\n" * 8
LOGO_PNG = b"\x89PNG\r\n\x1a\n" + bytes(range(64))
ICON_SVG = '<svg xmlns="http://www.w3.org/2000/svg"><circle r="4"/></svg>\n'


@pytest.fixture
def site_files() -> dict[str, bytes]:
    """Raw bytes of the served files, keyed by URL path."""
    return {
        "/index.html": INDEX_HTML.encode(),
        "/js/app.js": APP_JS.encode(),
        "/css/main.css": MAIN_CSS.encode(),
        "/assets/logo.png": LOGO_PNG,
    }


@pytest.fixture
def site_root(tmp_path: Path) -> Path:
    """A deployment directory with one file of each interesting kind."""
    root = tmp_path / "site"
    (root / "js").mkdir(parents=True)
    (root / "css").mkdir()
    (root / "assets").mkdir()
    (root / "index.html").write_text(INDEX_HTML, encoding="utf-8")
    (root / "robots.txt").write_text("User-agent: *\nAllow: /\n", encoding="utf-8")
    (root / "sitemap.xml").write_text("<urlset></urlset>\n", encoding="utf-8")
    (root / "js" / "app.js").write_text(APP_JS, encoding="utf-8")
    (root / "css" / "main.css").write_text(MAIN_CSS, encoding="utf-8")
    (root / "assets" / "logo.png").write_bytes(LOGO_PNG)
    (root / "assets" / "icon.svg").write_text(ICON_SVG, encoding="utf-8")
    (root / ".env").write_text("SECRET=hunter2\n", encoding="utf-8")
    (root / "server.py").write_text("print('not for you')\n", encoding="utf-8")
    return root


@pytest.fixture
def config(site_root: Path) -> SiteConfig:
    return SiteConfig(root=site_root)


@pytest.fixture
def app(config: SiteConfig):
    return create_app(config)


@pytest.fixture
async def client(app):
    async with TestClient(app) as test_client:
        yield test_client
