"""Immutable HTTP request.

Frozen metadata with async body access. ``path`` is the decoded,
normalized path the router and static resolver see; ``raw_path`` keeps
the undecoded target bytes for the URL guard.
"""

from __future__ import annotations

import json as json_module
from collections.abc import AsyncGenerator, Mapping
from dataclasses import dataclass, field
from typing import Any

from termfolio._internal.asgi import Receive, Scope
from termfolio.errors import PayloadTooLarge
from termfolio.http.cookies import parse_cookies
from termfolio.http.headers import Headers


@dataclass(frozen=True, slots=True)
class Request:
    """An immutable HTTP request.

    Metadata (method, path, headers, etc.) is frozen at creation.
    Body is accessed asynchronously via ``.body()`` and ``.json()``.
    """

    method: str
    path: str
    raw_path: bytes
    query_string: bytes
    headers: Headers
    client: tuple[str, int] | None
    cookies: Mapping[str, str]

    # Private: ASGI receive callable for body streaming
    _receive: Receive

    # Private: mutable cache for the body
    # (dict contents are mutable even though the field reference is frozen)
    _cache: dict[str, Any] = field(default_factory=dict, repr=False, compare=False)

    # -- Computed properties --

    @property
    def content_type(self) -> str | None:
        """The Content-Type header value."""
        return self.headers.get("content-type")

    @property
    def content_length(self) -> int | None:
        """The Content-Length header as int."""
        value = self.headers.get("content-length")
        if value is None:
            return None
        try:
            return int(value)
        except ValueError:
            return None

    @property
    def target_length(self) -> int:
        """Length of the request target (raw path plus query string)."""
        length = len(self.raw_path)
        if self.query_string:
            length += 1 + len(self.query_string)
        return length

    @property
    def is_api(self) -> bool:
        """True for the JSON API namespace."""
        return self.path == "/api" or self.path.startswith("/api/")

    # -- Async body access --

    async def body(self, *, limit: int | None = None) -> bytes:
        """Read the full request body.

        With *limit*, a declared ``Content-Length`` above the ceiling is
        rejected before reading, and the stream is abandoned as soon as
        the received bytes exceed it. Both raise ``PayloadTooLarge``.

        Result is cached; the ASGI receive is consumed once.
        """
        if "_body" in self._cache:
            return self._cache["_body"]
        if limit is not None:
            declared = self.content_length
            if declared is not None and declared > limit:
                raise PayloadTooLarge()
        chunks: list[bytes] = []
        received = 0
        async for chunk in self.stream():
            received += len(chunk)
            if limit is not None and received > limit:
                raise PayloadTooLarge()
            chunks.append(chunk)
        result = b"".join(chunks)
        self._cache["_body"] = result
        return result

    async def stream(self) -> AsyncGenerator[bytes]:
        """Stream the request body in chunks."""
        while True:
            message = await self._receive()
            if message.get("type") == "http.disconnect":
                break
            body = message.get("body", b"")
            if body:
                yield body
            if not message.get("more_body", False):
                break

    async def json(self, *, limit: int | None = None) -> Any:
        """Parse the body as JSON.

        Raises ``ValueError`` (``json.JSONDecodeError`` or
        ``UnicodeDecodeError``) for malformed payloads.
        """
        raw = await self.body(limit=limit)
        return json_module.loads(raw.decode("utf-8"))

    # -- Factory --

    @classmethod
    def from_asgi(cls, scope: Scope, receive: Receive) -> Request:
        """Create a Request from an ASGI scope and receive callable.

        ``path`` starts as the server-decoded path; the URL guard replaces
        it with the normalized form.
        """
        headers = Headers(tuple(scope.get("headers", ())))
        client = scope.get("client")
        raw_path = scope.get("raw_path") or scope["path"].encode("utf-8")
        return cls(
            method=scope["method"],
            path=scope["path"],
            raw_path=raw_path,
            query_string=scope.get("query_string", b""),
            headers=headers,
            client=tuple(client) if client else None,
            cookies=parse_cookies(headers.get("cookie", "")),
            _receive=receive,
        )
