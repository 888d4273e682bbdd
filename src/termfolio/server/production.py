"""Production server on pounce.

The stores and the rate limiter are process-local state mutated on one
event loop, so the server always runs a single worker.
"""

from __future__ import annotations

from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from termfolio.app import App


def run_production_server(
    app: App,
    host: str = "127.0.0.1",
    port: int = 8081,
    *,
    log_level: str = "info",
    keep_alive_timeout: float = 15.0,
    request_timeout: float = 30.0,
    max_connections: int = 1000,
) -> None:
    """Run the site in production mode.

    Args:
        app: termfolio App instance.
        host: Bind address (default: loopback, behind the reverse proxy).
        port: Bind port (default: 8081).
        log_level: Log level (debug, info, warning, error, critical).
        keep_alive_timeout: Keep-alive connection timeout (seconds).
        request_timeout: Individual request timeout (seconds).
        max_connections: Maximum concurrent connections.

    Example:
        >>> from termfolio.site import create_app
        >>> from termfolio.server.production import run_production_server
        >>> run_production_server(create_app(), port=8081)
    """
    from pounce.config import ServerConfig
    from pounce.server import Server

    config = ServerConfig(
        host=host,
        port=port,
        workers=1,
        log_level=log_level,
        max_connections=max_connections,
        keep_alive_timeout=keep_alive_timeout,
        request_timeout=request_timeout,
        health_check_path=None,
    )
    server = Server(config, app)
    server.run()
