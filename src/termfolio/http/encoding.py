"""Content-encoding negotiation and gzip compression for static assets."""

import gzip

from termfolio.http.headers import Headers

GZIP_TOKENS: frozenset[str] = frozenset({"gzip", "x-gzip", "*"})

COMPRESSIBLE_TYPES: frozenset[str] = frozenset(
    {
        "text/html",
        "text/css",
        "text/plain",
        "application/javascript",
        "application/json",
        "application/xml",
        "image/svg+xml",
    }
)


def _quality(params: list[str]) -> float:
    for param in params:
        name, _, value = param.partition("=")
        if name.strip().lower() == "q":
            try:
                return float(value.strip())
            except ValueError:
                return 0.0
    return 1.0


def accepts_gzip(headers: Headers) -> bool:
    """True if ``Accept-Encoding`` offers a gzip-compatible coding with q > 0."""
    for token in headers.get_tokens("accept-encoding"):
        coding, *params = token.split(";")
        if coding.strip().lower() in GZIP_TOKENS and _quality(params) > 0:
            return True
    return False


def is_compressible(content_type: str) -> bool:
    """True for textual types worth compressing (markup, script, JSON, SVG, XML)."""
    return content_type.split(";", 1)[0].strip().lower() in COMPRESSIBLE_TYPES


def gzip_bytes(data: bytes) -> bytes:
    """Compress *data*; ``mtime=0`` keeps output stable across requests."""
    return gzip.compress(data, compresslevel=6, mtime=0)
