"""Termfolio: server core for a terminal-styled portfolio site.

Serves an allow-listed set of static files and a small JSON API
(visitor counter, guestbook) backed by atomically written JSON files.

Basic usage::

    from pathlib import Path

    from termfolio import SiteConfig, create_app

    app = create_app(SiteConfig(root=Path("/srv/site")))
    app.run()

Or from the shell (``pip install termfolio[serve]``)::

    termfolio serve --root /srv/site
"""

__version__ = "0.1.0"
__all__ = [
    "App",
    "ConfigurationError",
    "HTTPError",
    "Request",
    "Response",
    "SiteConfig",
    "TermfolioError",
    "create_app",
]


def __getattr__(name: str) -> object:
    """Lazy imports for public API.

    Keeps ``import termfolio`` fast while providing a clean top-level API.
    """
    if name == "App":
        from termfolio.app import App

        return App

    if name == "SiteConfig":
        from termfolio.config import SiteConfig

        return SiteConfig

    if name == "create_app":
        from termfolio.site import create_app

        return create_app

    if name == "Request":
        from termfolio.http.request import Request

        return Request

    if name == "Response":
        from termfolio.http.response import Response

        return Response

    if name in ("ConfigurationError", "HTTPError", "TermfolioError"):
        from termfolio import errors as _errors

        return getattr(_errors, name)

    msg = f"module {__name__!r} has no attribute {name!r}"
    raise AttributeError(msg)
