"""Tests for termfolio.config: SiteConfig defaults and env overrides."""

from pathlib import Path

import pytest

from termfolio.config import SiteConfig
from termfolio.errors import ConfigurationError


class TestSiteConfig:
    def test_defaults(self, tmp_path: Path) -> None:
        config = SiteConfig(root=tmp_path)
        assert config.host == "127.0.0.1"
        assert config.port == 8081
        assert config.max_url_length == 2048
        assert config.max_body_bytes == 1024
        assert config.allowed_dirs == ("/js/", "/css/", "/assets/")
        assert config.allowed_files == ("/index.html", "/robots.txt", "/sitemap.xml")

    def test_state_paths_under_root(self, tmp_path: Path) -> None:
        config = SiteConfig(root=tmp_path)
        assert config.counter_path == tmp_path.resolve() / "visitors.json"
        assert config.guestbook_path == tmp_path.resolve() / "guestbook.json"

    def test_root_resolved(self, tmp_path: Path) -> None:
        (tmp_path / "a").mkdir()
        config = SiteConfig(root=tmp_path / "a" / "..")
        assert config.root == tmp_path.resolve()

    def test_frozen(self, tmp_path: Path) -> None:
        config = SiteConfig(root=tmp_path)
        with pytest.raises(AttributeError):
            config.port = 9000  # type: ignore[misc]


class TestFromEnv:
    def test_no_environment_needed(self, monkeypatch: pytest.MonkeyPatch) -> None:
        names = (
            "ROOT",
            "HOST",
            "PORT",
            "SITE_ORIGIN",
            "IDENTITY_SALT",
            "DEBUG",
            "TRUSTED_PROXY_HOPS",
        )
        for name in names:
            monkeypatch.delenv(f"TERMFOLIO_{name}", raising=False)
        config = SiteConfig.from_env()
        assert config.port == 8081
        assert config.trusted_proxy_hops == 1
        assert config.root == Path.cwd().resolve()

    def test_environment_overrides(
        self, tmp_path: Path, monkeypatch: pytest.MonkeyPatch
    ) -> None:
        monkeypatch.setenv("TERMFOLIO_ROOT", str(tmp_path))
        monkeypatch.setenv("TERMFOLIO_PORT", "9090")
        monkeypatch.setenv("TERMFOLIO_SITE_ORIGIN", "https://example.dev")
        monkeypatch.setenv("TERMFOLIO_IDENTITY_SALT", "pepper")
        monkeypatch.setenv("TERMFOLIO_DEBUG", "yes")
        monkeypatch.setenv("TERMFOLIO_TRUSTED_PROXY_HOPS", "2")
        config = SiteConfig.from_env()
        assert config.root == tmp_path.resolve()
        assert config.port == 9090
        assert config.site_origin == "https://example.dev"
        assert config.identity_salt == "pepper"
        assert config.debug is True
        assert config.trusted_proxy_hops == 2

    def test_explicit_overrides_win(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("TERMFOLIO_PORT", "9090")
        config = SiteConfig.from_env(port=7000, host=None)
        assert config.port == 7000
        assert config.host == "127.0.0.1"

    def test_bad_port(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("TERMFOLIO_PORT", "eighty")
        with pytest.raises(ConfigurationError, match="TERMFOLIO_PORT"):
            SiteConfig.from_env()

    def test_bad_proxy_hops(self, monkeypatch: pytest.MonkeyPatch) -> None:
        monkeypatch.setenv("TERMFOLIO_TRUSTED_PROXY_HOPS", "one")
        with pytest.raises(ConfigurationError, match="TERMFOLIO_TRUSTED_PROXY_HOPS"):
            SiteConfig.from_env()
