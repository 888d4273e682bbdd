"""The termfolio ASGI application.

An ``App`` collects routes, middleware, providers and lifecycle hooks,
then compiles them into a router and a middleware chain the first time
it serves. From then on it is read-only.
"""

import logging
import threading
from collections.abc import Callable
from typing import Any, TypeAlias

from termfolio._internal.asgi import Receive, Scope, Send
from termfolio._internal.invoke import invoke
from termfolio._internal.types import Handler, Hook
from termfolio.config import SiteConfig
from termfolio.middleware.protocol import Middleware
from termfolio.routing.route import Route
from termfolio.routing.router import Router
from termfolio.server.handler import handle_request
from termfolio.server.security_headers import SecurityHeadersConfig

logger = logging.getLogger("termfolio.server")

Compiled: TypeAlias = tuple[Router, tuple[Middleware, ...]]


class App:
    """Routes plus the pipeline that serves them.

    Registration is single-threaded setup work. Compilation happens once,
    under a lock, on whichever comes first: lifespan startup, the first
    HTTP request, or ``run()``.
    """

    __slots__ = (
        "_compile_lock",
        "_compiled",
        "_hooks",
        "_middleware",
        "_providers",
        "_routes",
        "_security_headers",
        "config",
    )

    def __init__(self, config: SiteConfig | None = None) -> None:
        self.config: SiteConfig = config or SiteConfig()
        self._routes: list[Route] = []
        self._middleware: list[Middleware] = []
        self._providers: dict[type, Callable[..., Any]] = {}
        self._hooks: dict[str, list[Hook]] = {"startup": [], "shutdown": []}
        self._security_headers = SecurityHeadersConfig(
            content_security_policy=self.config.content_security_policy
        )
        self._compiled: Compiled | None = None
        self._compile_lock = threading.Lock()

    @property
    def routes(self) -> tuple[Route, ...]:
        """Registered routes, in registration order."""
        return tuple(self._routes)

    # -- Setup --

    def route(
        self,
        path: str,
        *,
        methods: list[str] | None = None,
        name: str | None = None,
    ) -> Callable[[Handler], Handler]:
        """Decorator that serves the wrapped handler at the static *path*.

        *methods* defaults to GET. The router answers HEAD wherever GET
        is allowed, so HEAD never needs listing.
        """
        allowed = frozenset(method.upper() for method in (methods or ("GET",)))

        def register(func: Handler) -> Handler:
            self._require_setup()
            self._routes.append(Route(path=path, handler=func, methods=allowed, name=name))
            return func

        return register

    def provide(self, annotation: type, factory: Callable[..., Any]) -> None:
        """Inject ``factory()`` into handler parameters annotated *annotation*::

            app.provide(GuestbookStore, lambda: store)

            async def list_entries(store: GuestbookStore) -> Response: ...
        """
        self._require_setup()
        self._providers[annotation] = factory

    def add_middleware(self, middleware: Middleware) -> None:
        """Append *middleware*; the first one added runs outermost."""
        self._require_setup()
        self._middleware.append(middleware)

    def on_startup(self, func: Hook) -> Hook:
        """Run *func* (sync or async) once before HTTP traffic is served."""
        return self._add_hook("startup", func)

    def on_shutdown(self, func: Hook) -> Hook:
        """Run *func* (sync or async) once the server stops taking requests."""
        return self._add_hook("shutdown", func)

    def _add_hook(self, phase: str, func: Hook) -> Hook:
        self._require_setup()
        self._hooks[phase].append(func)
        return func

    def _require_setup(self) -> None:
        if self._compiled is not None:
            msg = (
                "App is already serving; register routes, middleware, providers "
                "and hooks before it starts."
            )
            raise RuntimeError(msg)

    # -- Serving --

    def run(self, host: str | None = None, port: int | None = None) -> None:
        """Serve with pounce on *host*:*port* (config values by default).

        ``config.debug`` selects the reloading dev server, which watches
        the site root. Otherwise one production worker runs with the
        configured timeouts.
        """
        self._compile_once()
        host = host or self.config.host
        port = port or self.config.port

        if not self.config.debug:
            from termfolio.server.production import run_production_server

            run_production_server(
                self,
                host=host,
                port=port,
                log_level=self.config.log_level,
                keep_alive_timeout=self.config.keep_alive_timeout,
                request_timeout=self.config.request_timeout,
            )
            return

        from termfolio.server.dev import run_dev_server

        run_dev_server(self, host, port, reload=True, reload_dirs=(str(self.config.root),))

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        """ASGI 3.0 entry point."""
        if scope["type"] == "lifespan":
            await self._serve_lifespan(receive, send)
            return

        router, middleware = self._compile_once()
        await handle_request(
            scope,
            receive,
            send,
            router=router,
            middleware=middleware,
            providers=self._providers or None,
            security_headers=self._security_headers,
            max_url_length=self.config.max_url_length,
            debug=self.config.debug,
        )

    async def startup(self) -> None:
        """Compile, then run the startup hooks. The first failure propagates."""
        self._compile_once()
        for hook in self._hooks["startup"]:
            await invoke(hook)

    async def shutdown(self) -> None:
        """Run every shutdown hook, logging failures instead of stopping.

        Later hooks flush pending writes, so one broken hook must not
        skip them.
        """
        for hook in self._hooks["shutdown"]:
            try:
                await invoke(hook)
            except Exception:
                logger.exception("Shutdown hook %s failed", getattr(hook, "__qualname__", hook))

    async def _serve_lifespan(self, receive: Receive, send: Send) -> None:
        while True:
            event = (await receive())["type"]
            if event == "lifespan.startup":
                try:
                    await self.startup()
                except Exception as exc:
                    logger.exception("Startup failed")
                    await send({"type": "lifespan.startup.failed", "message": str(exc)})
                    return
                await send({"type": "lifespan.startup.complete"})
            elif event == "lifespan.shutdown":
                await self.shutdown()
                await send({"type": "lifespan.shutdown.complete"})
                return

    # -- Compilation --

    def _compile_once(self) -> Compiled:
        compiled = self._compiled
        if compiled is not None:
            return compiled
        with self._compile_lock:
            if self._compiled is None:
                self._compiled = self._compile()
            return self._compiled

    def _compile(self) -> Compiled:
        router = Router()
        for route in self._routes:
            router.add(route)
        router.compile()
        middleware = tuple(self._middleware)
        logger.debug("App compiled: %d routes, %d middleware", len(router.routes), len(middleware))
        return router, middleware
