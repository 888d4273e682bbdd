"""Site assembly: wires stores, limiter, static files and API routes.

``create_app()`` is the one place the pieces meet::

    from termfolio.site import create_app

    app = create_app(SiteConfig(root=Path("/srv/site")))
    app.run()
"""

import asyncio
import contextlib
import logging

import anyio

from termfolio.api.guestbook import list_entries, sign_guestbook
from termfolio.api.visitors import count_visit
from termfolio.app import App
from termfolio.config import SiteConfig
from termfolio.middleware.static import StaticFiles
from termfolio.security.rate_limit import RateLimitConfig, SubmissionRateLimiter
from termfolio.stores.counter import VisitorCounter
from termfolio.stores.guestbook import GuestbookStore

logger = logging.getLogger("termfolio.server")


async def sweep_forever(limiter: SubmissionRateLimiter, interval: float) -> None:
    """Drop expired rate-limit entries every *interval* seconds until cancelled."""
    while True:
        await anyio.sleep(interval)
        limiter.sweep()


def create_app(
    config: SiteConfig | None = None,
    *,
    limiter: SubmissionRateLimiter | None = None,
) -> App:
    """Build the site application.

    Stores are loaded at lifespan startup. Shutdown stops the sweeper
    and waits for pending saves.
    """
    config = config or SiteConfig()
    app = App(config)

    counter = VisitorCounter(config.counter_path)
    guestbook = GuestbookStore(config.guestbook_path, max_entries=config.max_entries)
    if limiter is None:
        limiter = SubmissionRateLimiter(
            RateLimitConfig(
                requests=config.rate_limit_requests,
                window_seconds=config.rate_limit_window,
            )
        )

    app.provide(SiteConfig, lambda: config)
    app.provide(VisitorCounter, lambda: counter)
    app.provide(GuestbookStore, lambda: guestbook)
    app.provide(SubmissionRateLimiter, lambda: limiter)

    app.add_middleware(
        StaticFiles(
            config.root,
            allowed_dirs=config.allowed_dirs,
            allowed_files=config.allowed_files,
            index=config.index_file,
        )
    )

    app.route("/api/visitors", name="visitors")(count_visit)
    app.route("/api/guestbook", name="guestbook-list")(list_entries)
    app.route("/api/guestbook", methods=["POST"], name="guestbook-sign")(sign_guestbook)

    sweeper: list[asyncio.Task[None]] = []

    @app.on_startup
    async def load_state() -> None:
        counter.load()
        guestbook.load()
        logger.info("Serving %s", config.root)

    @app.on_startup
    async def start_sweeper() -> None:
        task = asyncio.get_running_loop().create_task(
            sweep_forever(limiter, config.rate_limit_sweep_interval)
        )
        sweeper.append(task)

    @app.on_shutdown
    async def stop_sweeper() -> None:
        while sweeper:
            task = sweeper.pop()
            task.cancel()
            with contextlib.suppress(asyncio.CancelledError):
                await task

    @app.on_shutdown
    async def flush_stores() -> None:
        await counter.flush()
        await guestbook.flush()

    return app
