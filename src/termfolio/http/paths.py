"""Request target decoding and normalization.

The URL guard runs these on the raw ASGI path before any routing or
allowlist decision is made.
"""

import posixpath
import re
from urllib.parse import unquote_to_bytes

from termfolio.errors import BadRequest

# A "%" not followed by two hex digits is a malformed escape.
_BAD_ESCAPE_RE = re.compile(rb"%(?![0-9A-Fa-f]{2})")


def decode_path(raw_path: bytes) -> str:
    """Percent-decode the target bytes and read them as UTF-8.

    Escaped and literal bytes are treated alike, so ``/caf%C3%A9`` and
    the raw bytes ``/caf\\xc3\\xa9`` both give ``/café``. Raises
    ``BadRequest`` for malformed escapes, invalid UTF-8, or a decoded
    NUL byte.
    """
    if _BAD_ESCAPE_RE.search(raw_path):
        raise BadRequest()
    try:
        decoded = unquote_to_bytes(raw_path).decode("utf-8", errors="strict")
    except UnicodeDecodeError as exc:
        raise BadRequest() from exc
    if "\x00" in decoded:
        raise BadRequest()
    return decoded


def normalize_path(path: str) -> str:
    """Collapse ``.``/``..`` segments and repeated slashes.

    The result is always absolute and never climbs above ``/``::

        normalize_path("/js/../../../etc/passwd")  # "/etc/passwd"
        normalize_path("//css/./main.css")         # "/css/main.css"
    """
    collapsed = "/" + path.lstrip("/")
    normalized = posixpath.normpath(collapsed)
    # normpath keeps a leading "//" (POSIX allows it); the router does not.
    return "/" + normalized.lstrip("/")
