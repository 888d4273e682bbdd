"""Site configuration.

SiteConfig is a frozen dataclass, immutable after creation, IDE-autocompletable,
no string-key dict lookups.
"""

from __future__ import annotations

import os
from dataclasses import dataclass, field
from pathlib import Path

from termfolio.errors import ConfigurationError

DEFAULT_CSP = (
    "default-src 'self'; "
    "script-src 'self' https://cdn.jsdelivr.net; "
    "style-src 'self' 'unsafe-inline' https://fonts.googleapis.com; "
    "font-src 'self' https://fonts.gstatic.com; "
    "img-src 'self' data:; "
    "connect-src 'self'; "
    "base-uri 'self'; frame-ancestors 'none'; object-src 'none'"
)


def _env_flag(value: str) -> bool:
    return value.strip().lower() in {"1", "true", "yes", "on"}


@dataclass(frozen=True, slots=True)
class SiteConfig:
    """Site configuration. Immutable after creation.

    All fields have sensible defaults. Override what you need::

        config = SiteConfig(root=Path("/srv/site"), port=9000)

    ``counter_path`` and ``guestbook_path`` default to ``visitors.json``
    and ``guestbook.json`` inside ``root``.
    """

    # Server
    host: str = "127.0.0.1"
    port: int = 8081
    debug: bool = False
    log_level: str = "info"
    keep_alive_timeout: float = 15.0
    request_timeout: float = 30.0

    # Deployment layout
    root: Path = field(default_factory=Path.cwd)
    counter_file: str = "visitors.json"
    guestbook_file: str = "guestbook.json"

    # Static allowlist
    allowed_dirs: tuple[str, ...] = ("/js/", "/css/", "/assets/")
    allowed_files: tuple[str, ...] = ("/index.html", "/robots.txt", "/sitemap.xml")
    index_file: str = "/index.html"

    # Request limits
    max_url_length: int = 2048
    max_body_bytes: int = 1024

    # Guestbook
    site_origin: str = "http://127.0.0.1:8081"
    identity_salt: str = "termfolio-guestbook-v1"
    # Reverse proxies in front of the server that append to X-Forwarded-For
    trusted_proxy_hops: int = 1
    max_entries: int = 500
    public_entries: int = 50
    max_name_length: int = 20
    max_message_length: int = 100

    # Rate limiting
    rate_limit_requests: int = 5
    rate_limit_window: float = 60.0
    rate_limit_sweep_interval: float = 300.0

    # Visitor cookie
    visited_cookie: str = "visited"
    visited_cookie_max_age: int = 86400

    # Response headers
    content_security_policy: str = DEFAULT_CSP

    def __post_init__(self) -> None:
        object.__setattr__(self, "root", Path(self.root).resolve())

    @property
    def counter_path(self) -> Path:
        return self.root / self.counter_file

    @property
    def guestbook_path(self) -> Path:
        return self.root / self.guestbook_file

    @classmethod
    def from_env(cls, **overrides: object) -> SiteConfig:
        """Build a config from optional ``TERMFOLIO_*`` environment variables.

        Nothing is required; unset variables keep the defaults. Explicit
        keyword *overrides* win over the environment.
        """
        values: dict[str, object] = {}
        if root := os.getenv("TERMFOLIO_ROOT"):
            values["root"] = Path(root)
        if host := os.getenv("TERMFOLIO_HOST"):
            values["host"] = host
        if port := os.getenv("TERMFOLIO_PORT"):
            try:
                values["port"] = int(port)
            except ValueError as exc:
                msg = f"TERMFOLIO_PORT must be an integer, got {port!r}"
                raise ConfigurationError(msg) from exc
        if origin := os.getenv("TERMFOLIO_SITE_ORIGIN"):
            values["site_origin"] = origin
        if salt := os.getenv("TERMFOLIO_IDENTITY_SALT"):
            values["identity_salt"] = salt
        if hops := os.getenv("TERMFOLIO_TRUSTED_PROXY_HOPS"):
            try:
                values["trusted_proxy_hops"] = int(hops)
            except ValueError as exc:
                msg = f"TERMFOLIO_TRUSTED_PROXY_HOPS must be an integer, got {hops!r}"
                raise ConfigurationError(msg) from exc
        if debug := os.getenv("TERMFOLIO_DEBUG"):
            values["debug"] = _env_flag(debug)
        values.update({k: v for k, v in overrides.items() if v is not None})
        return cls(**values)  # type: ignore[arg-type]
