"""Development server with hot reload.

Starts a pounce ASGI server with the live termfolio App object.
Uses single-worker mode with reload enabled for development.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from termfolio.app import App


def run_dev_server(
    app: App,
    host: str,
    port: int,
    *,
    reload: bool = True,
    reload_dirs: tuple[str, ...] = (),
) -> None:
    """Start a pounce dev server with the given App.

    Args:
        app: ASGI callable (termfolio App instance).
        host: Bind host address.
        port: Bind port number.
        reload: Restart on file changes (default True).
        reload_dirs: Extra directories to watch alongside cwd, usually
            the site root so front-end edits trigger a restart.
    """
    from pounce.config import ServerConfig
    from pounce.server import Server

    config = ServerConfig(
        host=host,
        port=port,
        workers=1,
        reload=reload,
        reload_include=(".html", ".css", ".js"),
        reload_dirs=reload_dirs,
    )
    server = Server(config, app)
    server.run()
