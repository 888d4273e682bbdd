"""Tests for termfolio.app: registration, freezing, providers, lifespan."""

import asyncio
from pathlib import Path
from typing import Any

import pytest

from termfolio.app import App
from termfolio.config import SiteConfig
from termfolio.http.request import Request
from termfolio.http.response import Response
from termfolio.security.rate_limit import RateLimitEntry, SubmissionRateLimiter
from termfolio.site import create_app
from termfolio.testing import TestClient


class Greeter:
    def __init__(self, greeting: str) -> None:
        self.greeting = greeting


class TestAppRegistration:
    def test_route_decorator(self) -> None:
        app = App()

        @app.route("/api/ping")
        def ping() -> Response:
            return Response("pong")

        assert len(app.routes) == 1
        assert app.routes[0].path == "/api/ping"
        assert app.routes[0].methods == frozenset({"GET"})

    def test_route_with_methods(self) -> None:
        app = App()

        @app.route("/api/items", methods=["get", "POST"])
        def items() -> Response:
            return Response("items")

        assert app.routes[0].methods == frozenset({"GET", "POST"})

    def test_cannot_register_after_compile(self) -> None:
        app = App()
        app._compile_once()
        with pytest.raises(RuntimeError, match="already serving"):
            app.route("/late")(lambda: Response(""))
        with pytest.raises(RuntimeError):
            app.provide(Greeter, lambda: Greeter("hi"))
        with pytest.raises(RuntimeError):
            app.on_shutdown(lambda: None)

    def test_compiled_once(self) -> None:
        app = App()

        @app.route("/")
        def index() -> Response:
            return Response("home")

        router, middleware = app._compile_once()
        assert app._compile_once()[0] is router
        assert middleware == ()
        assert router.match("HEAD", "/").route.handler is index


class TestDispatch:
    async def test_request_and_provider_injection(self) -> None:
        app = App()
        app.provide(Greeter, lambda: Greeter("hello"))

        @app.route("/api/greet")
        async def greet(request: Request, greeter: Greeter) -> Response:
            return Response.json({"text": f"{greeter.greeting} {request.method}"})

        async with TestClient(app) as client:
            response = await client.get("/api/greet")
        assert response.json_body() == {"text": "hello GET"}

    async def test_sync_handler(self) -> None:
        app = App()

        @app.route("/plain")
        def plain() -> Response:
            return Response("sync ok")

        async with TestClient(app) as client:
            response = await client.get("/plain")
        assert response.text == "sync ok"

    async def test_middleware_order(self) -> None:
        app = App()
        seen: list[str] = []

        async def outer(request: Request, next: Any) -> Response:
            seen.append("outer")
            response = await next(request)
            return response.with_header("X-Outer", "1")

        async def inner(request: Request, next: Any) -> Response:
            seen.append("inner")
            return await next(request)

        app.add_middleware(outer)
        app.add_middleware(inner)

        @app.route("/")
        def index() -> Response:
            return Response("home")

        async with TestClient(app) as client:
            response = await client.get("/")
        assert seen == ["outer", "inner"]
        assert response.header("x-outer") == "1"


async def _lifespan(app: App, *messages: str) -> list[dict]:
    incoming = [{"type": message} for message in messages]
    sent: list[dict] = []

    async def receive() -> dict:
        return incoming.pop(0)

    async def send(message: dict) -> None:
        sent.append(message)

    await app({"type": "lifespan"}, receive, send)
    return sent


class TestLifespan:
    async def test_startup_and_shutdown(self) -> None:
        app = App()
        calls: list[str] = []
        app.on_startup(lambda: calls.append("sync-start"))

        @app.on_shutdown
        async def stop() -> None:
            calls.append("async-stop")

        sent = await _lifespan(app, "lifespan.startup", "lifespan.shutdown")
        assert [m["type"] for m in sent] == [
            "lifespan.startup.complete",
            "lifespan.shutdown.complete",
        ]
        assert calls == ["sync-start", "async-stop"]

    async def test_startup_failure_reported(self) -> None:
        app = App()

        @app.on_startup
        def broken() -> None:
            raise RuntimeError("no disk")

        sent = await _lifespan(app, "lifespan.startup")
        assert sent == [{"type": "lifespan.startup.failed", "message": "no disk"}]

    async def test_failing_shutdown_hook_does_not_skip_flush(self) -> None:
        app = App()
        calls: list[str] = []

        @app.on_shutdown
        def broken() -> None:
            raise RuntimeError("boom")

        app.on_shutdown(lambda: calls.append("flushed"))
        sent = await _lifespan(app, "lifespan.startup", "lifespan.shutdown")
        assert calls == ["flushed"]
        assert sent[-1] == {"type": "lifespan.shutdown.complete"}


class TestSite:
    async def test_lifespan_round_trip(self, config: SiteConfig, site_root: Path) -> None:
        (site_root / "visitors.json").write_text('{"count": 5}')
        app = create_app(config)
        sent = await _lifespan(app, "lifespan.startup", "lifespan.shutdown")
        assert [m["type"] for m in sent] == [
            "lifespan.startup.complete",
            "lifespan.shutdown.complete",
        ]
        assert (site_root / "visitors.json").read_text() == '{"count": 5}'

    async def test_sweeper_runs_until_shutdown(self, site_root: Path) -> None:
        limiter = SubmissionRateLimiter()
        config = SiteConfig(root=site_root, rate_limit_sweep_interval=0.01)
        app = create_app(config, limiter=limiter)
        async with TestClient(app) as client:
            await client.post("/api/guestbook", json={"message": "hi"})
            limiter._entries["stale"] = RateLimitEntry(count=1, window_reset_at=0.0)
            assert len(limiter) == 2
            await asyncio.sleep(0.05)
            assert len(limiter) == 1
