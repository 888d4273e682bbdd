"""ASGI response sending: one ``http.response.start`` and one body message."""

from termfolio._internal.asgi import Send
from termfolio.http.response import Response

# 1xx, 204 and 304 responses never carry a message body.
_NO_BODY_STATUSES = frozenset({204, 304})


def _body_allowed(status: int) -> bool:
    return status >= 200 and status not in _NO_BODY_STATUSES


def encode_headers(response: Response, content_length: int) -> list[tuple[bytes, bytes]]:
    """Lower-cased latin-1 header pairs, Set-Cookie and Content-Length included."""
    pairs = [("content-type", response.content_type), *response.headers]
    pairs.extend(("set-cookie", cookie.to_header_value()) for cookie in response.cookies)
    pairs.append(("content-length", str(content_length)))
    return [(name.lower().encode("latin-1"), value.encode("latin-1")) for name, value in pairs]


async def send_response(response: Response, send: Send, *, head: bool = False) -> None:
    """Translate a Response into ASGI send() calls.

    For HEAD requests the headers (including ``Content-Length``) describe
    the body that a GET would return, but no body bytes are sent.
    """
    body = response.body_bytes if _body_allowed(response.status) else b""
    await send(
        {
            "type": "http.response.start",
            "status": response.status,
            "headers": encode_headers(response, len(body)),
        }
    )
    await send({"type": "http.response.body", "body": b"" if head else body})
