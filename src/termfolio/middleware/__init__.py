"""Middleware: Protocol-based, no inheritance required.

A middleware is any callable matching:
    async def mw(request: Request, next: Next) -> Response

Built-in middleware:
    StaticFiles -- Serve allow-listed files from the project root
"""

from termfolio.middleware.protocol import Middleware, Next
from termfolio.middleware.static import StaticFiles

__all__ = [
    "Middleware",
    "Next",
    "StaticFiles",
]
