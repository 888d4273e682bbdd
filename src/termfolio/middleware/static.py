"""Static file serving middleware.

Serves allow-listed files from the project root: a fixed set of
directories (``/js/``, ``/css/``, ``/assets/``) plus a short list of
bare files. ``/`` maps to the entry document.

Paths outside the allowlist fall through to the next handler, which is
the router; the router answers them with 404 (or 405 for API paths).
"""

import logging
from pathlib import Path, PurePosixPath

import anyio

from termfolio.errors import Forbidden, NotFound
from termfolio.http.encoding import accepts_gzip, gzip_bytes, is_compressible
from termfolio.http.request import Request
from termfolio.http.response import Response
from termfolio.middleware.protocol import Next

logger = logging.getLogger("termfolio.static")

MIME_TYPES: dict[str, str] = {
    ".html": "text/html; charset=utf-8",
    ".css": "text/css; charset=utf-8",
    ".js": "application/javascript; charset=utf-8",
    ".json": "application/json; charset=utf-8",
    ".png": "image/png",
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".gif": "image/gif",
    ".svg": "image/svg+xml",
    ".ico": "image/x-icon",
    ".webp": "image/webp",
    ".woff": "font/woff",
    ".woff2": "font/woff2",
    ".xml": "application/xml; charset=utf-8",
    ".txt": "text/plain; charset=utf-8",
}
DEFAULT_MIME_TYPE = "application/octet-stream"

IMMUTABLE_CACHE = "public, max-age=2592000, immutable"  # 30 days
SHORT_CACHE = "public, max-age=3600"  # 1 hour
NO_CACHE = "no-cache"


def content_type_for(path: str) -> str:
    """Look up the content type for *path* by extension."""
    return MIME_TYPES.get(PurePosixPath(path).suffix.lower(), DEFAULT_MIME_TYPE)


def cache_control_for(path: str, immutable_dir: str = "/assets/") -> str:
    """Pick the cache lifetime tier for a URL path."""
    if path.startswith(immutable_dir):
        return IMMUTABLE_CACHE
    if PurePosixPath(path).suffix.lower() in (".js", ".css"):
        return SHORT_CACHE
    return NO_CACHE


class StaticFiles:
    """Middleware that serves allow-listed files from a directory.

    Security: the request path is already normalized by the URL guard
    before it reaches here, so ``..`` cannot reach an allow-listed
    prefix. The final path is still resolved (following symlinks) and
    must stay inside the root, else 403.

    Usage::

        app.add_middleware(StaticFiles(
            root="/srv/site",
            allowed_dirs=("/js/", "/css/", "/assets/"),
            allowed_files=("/index.html", "/robots.txt"),
        ))
    """

    __slots__ = ("_allowed_dirs", "_allowed_files", "_immutable_dir", "_index", "_root")

    def __init__(
        self,
        root: str | Path,
        *,
        allowed_dirs: tuple[str, ...] = ("/js/", "/css/", "/assets/"),
        allowed_files: tuple[str, ...] = ("/index.html", "/robots.txt", "/sitemap.xml"),
        index: str = "/index.html",
        immutable_dir: str = "/assets/",
    ) -> None:
        self._root = Path(root).resolve()
        self._allowed_dirs = allowed_dirs
        self._allowed_files = frozenset(allowed_files)
        self._index = index
        self._immutable_dir = immutable_dir

    def is_allowed(self, path: str) -> bool:
        """True if *path* is an allow-listed file or lies in an allowed directory."""
        return path in self._allowed_files or any(
            path.startswith(prefix) for prefix in self._allowed_dirs
        )

    async def __call__(self, request: Request, next: Next) -> Response:
        """Serve an allow-listed file or fall through."""
        if request.method not in ("GET", "HEAD"):
            return await next(request)

        path = self._index if request.path == "/" else request.path
        if not self.is_allowed(path):
            return await next(request)

        file_path = (self._root / path.lstrip("/")).resolve()
        if not file_path.is_relative_to(self._root):
            logger.warning("Blocked path outside root: %s", request.path)
            raise Forbidden()

        try:
            body = await anyio.Path(file_path).read_bytes()
        except OSError as exc:
            # Missing, directory, permission: all look the same to the client.
            logger.debug("Static read failed for %s: %s", path, exc)
            raise NotFound() from exc

        return self._build_response(request, path, body)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _build_response(self, request: Request, path: str, body: bytes) -> Response:
        content_type = content_type_for(path)
        response = Response(body=body, content_type=content_type).with_header(
            "Cache-Control", cache_control_for(path, self._immutable_dir)
        )
        if not is_compressible(content_type):
            return response

        response = response.with_header("Vary", "Accept-Encoding")
        if accepts_gzip(request.headers):
            response = response.with_body(gzip_bytes(body)).with_header(
                "Content-Encoding", "gzip"
            )
        return response
