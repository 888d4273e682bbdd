"""Async test client for termfolio applications.

Uses the same Request and Response types as production.
No wrapper translation layer.
"""

from __future__ import annotations

import json as json_module
from typing import Any
from urllib.parse import unquote_to_bytes

from termfolio.app import App
from termfolio.http.response import Response


class TestClient:
    __test__ = False  # Tell pytest this is not a test class
    """Async test client for termfolio applications.

    Returns the same ``Response`` type used in production. Sends requests
    through the ASGI interface directly, no HTTP involved.

    Usage::

        async with TestClient(app) as client:
            response = await client.get("/api/visitors")
            assert response.status == 200

    Entering the context runs the startup hooks (store load, sweeper);
    leaving it runs the shutdown hooks (sweeper stop, flush).
    """

    __slots__ = ("app", "client")

    def __init__(self, app: App, *, client: tuple[str, int] = ("127.0.0.1", 0)) -> None:
        self.app = app
        self.client = client

    async def __aenter__(self) -> TestClient:
        await self.app.startup()
        return self

    async def __aexit__(self, *args: object) -> None:
        await self.app.shutdown()

    async def get(self, path: str | bytes, *, headers: dict[str, str] | None = None) -> Response:
        """Send a GET request."""
        return await self.request("GET", path, headers=headers)

    async def head(self, path: str | bytes, *, headers: dict[str, str] | None = None) -> Response:
        """Send a HEAD request."""
        return await self.request("HEAD", path, headers=headers)

    async def post(
        self,
        path: str,
        *,
        headers: dict[str, str] | None = None,
        body: bytes | None = None,
        json: Any = None,
    ) -> Response:
        """Send a POST request. *json* is serialized and wins over *body*."""
        extra_headers: dict[str, str] = {}
        request_body = body or b""

        if json is not None:
            request_body = json_module.dumps(json).encode("utf-8")
            extra_headers["content-type"] = "application/json"

        merged = {**extra_headers, **(headers or {})}
        return await self.request("POST", path, headers=merged, body=request_body)

    async def request(
        self,
        method: str,
        path: str | bytes,
        *,
        headers: dict[str, str] | None = None,
        body: bytes | None = None,
        chunk_size: int | None = None,
    ) -> Response:
        """Send an arbitrary request through the ASGI app.

        *path* is the raw request target, percent escapes included. A
        ``str`` target is sent as UTF-8; pass ``bytes`` to send the target
        exactly as given.
        With *chunk_size*, the body is delivered in several
        ``http.request`` messages.
        """
        target = path if isinstance(path, bytes) else path.encode("utf-8")
        raw_path, _, query_string = target.partition(b"?")

        # Build raw ASGI headers
        raw_headers: list[tuple[bytes, bytes]] = []
        for name, value in (headers or {}).items():
            raw_headers.append((name.lower().encode("latin-1"), value.encode("latin-1")))

        # Servers decode "path" and keep the undecoded target in "raw_path"
        scope: dict[str, Any] = {
            "type": "http",
            "asgi": {"version": "3.0"},
            "http_version": "1.1",
            "method": method.upper(),
            "path": unquote_to_bytes(raw_path).decode("utf-8", errors="replace"),
            "raw_path": raw_path,
            "query_string": query_string,
            "root_path": "",
            "headers": raw_headers,
            "server": ("testserver", 80),
            "client": self.client,
        }

        request_body = body or b""
        size = chunk_size or max(len(request_body), 1)
        chunks = [request_body[i : i + size] for i in range(0, len(request_body), size)] or [b""]
        messages: list[dict[str, Any]] = [
            {"type": "http.request", "body": chunk, "more_body": index < len(chunks) - 1}
            for index, chunk in enumerate(chunks)
        ]

        async def receive() -> dict[str, Any]:
            if messages:
                return messages.pop(0)
            return {"type": "http.disconnect"}

        # Capture response via send
        response_status = 200
        response_headers: list[tuple[bytes, bytes]] = []
        response_body_parts: list[bytes] = []

        async def send(message: dict[str, Any]) -> None:
            nonlocal response_status, response_headers
            if message["type"] == "http.response.start":
                response_status = message["status"]
                response_headers = list(message.get("headers", []))
            elif message["type"] == "http.response.body":
                response_body_parts.append(message.get("body", b""))

        await self.app(scope, receive, send)

        # Build a Response from captured data; Content-Length stays in
        # headers so HEAD responses can be checked against GET.
        body_bytes = b"".join(response_body_parts)
        content_type = "text/plain; charset=utf-8"
        extra_headers: list[tuple[str, str]] = []
        for name_b, value_b in response_headers:
            name_str = name_b.decode("latin-1")
            value_str = value_b.decode("latin-1")
            if name_str == "content-type":
                content_type = value_str
            else:
                extra_headers.append((name_str, value_str))

        return Response(
            body=body_bytes,
            status=response_status,
            content_type=content_type,
            headers=tuple(extra_headers),
        )
