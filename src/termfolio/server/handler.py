"""ASGI handler: translates ASGI scope/messages to termfolio types.

The only component that touches raw ASGI directly. Converts scope dicts
to typed Request objects, guards the request target, dispatches through
middleware and routing, and sends the Response back through ASGI send().
"""

import inspect
from collections.abc import Callable
from dataclasses import replace
from typing import Any

from termfolio._internal.asgi import Receive, Scope, Send
from termfolio._internal.invoke import invoke
from termfolio.errors import HTTPError, URITooLong
from termfolio.http.paths import decode_path, normalize_path
from termfolio.http.request import Request
from termfolio.http.response import Response
from termfolio.middleware.protocol import Next
from termfolio.routing.route import RouteMatch
from termfolio.routing.router import Router
from termfolio.server.errors import render_http_error, render_internal_error
from termfolio.server.security_headers import SecurityHeadersConfig, apply_security_headers
from termfolio.server.sender import send_response


def guard_request(request: Request, *, max_url_length: int) -> Request:
    """Reject oversized targets, then decode and normalize the path.

    Raises ``URITooLong`` before any parsing, ``BadRequest`` if the path
    cannot be decoded.
    """
    if request.target_length > max_url_length:
        raise URITooLong()
    path = normalize_path(decode_path(request.raw_path))
    return replace(request, path=path)


async def handle_request(
    scope: Scope,
    receive: Receive,
    send: Send,
    *,
    router: Router,
    middleware: tuple[Callable[..., Any], ...],
    providers: dict[type, Callable[..., Any]] | None = None,
    security_headers: SecurityHeadersConfig,
    max_url_length: int = 2048,
    debug: bool = False,
) -> None:
    """Process a single HTTP request through the full pipeline."""
    if scope["type"] != "http":
        return

    request = Request.from_asgi(scope, receive)

    try:
        request = guard_request(request, max_url_length=max_url_length)

        # Build the innermost handler (router dispatch)
        async def dispatch(req: Request) -> Response:
            match = router.match(req.method, req.path)
            return await _invoke_handler(match, req, providers=providers)

        # Wrap middleware around the dispatch
        handler: Next = dispatch
        for mw in reversed(middleware):
            outer = handler

            async def make_next(req: Request, _mw: Any = mw, _next: Next = outer) -> Response:
                return await _mw(req, _next)

            handler = make_next

        response = await handler(request)

    except HTTPError as exc:
        response = render_http_error(exc, request)
    except Exception as exc:
        response = render_internal_error(exc, request, debug=debug)

    response = apply_security_headers(response, security_headers)
    await send_response(response, send, head=request.method == "HEAD")


async def _invoke_handler(
    match: RouteMatch,
    request: Request,
    *,
    providers: dict[type, Callable[..., Any]] | None = None,
) -> Response:
    """Call the matched route handler with its resolved arguments."""
    handler = match.route.handler
    kwargs = _build_handler_kwargs(handler, request, providers)
    result = await invoke(handler, **kwargs)
    if not isinstance(result, Response):
        msg = f"Route handler {handler.__qualname__} returned {type(result).__name__}, not Response"
        raise TypeError(msg)
    return result


def _build_handler_kwargs(
    handler: Callable[..., Any],
    request: Request,
    providers: dict[type, Callable[..., Any]] | None = None,
) -> dict[str, Any]:
    """Inspect handler signature and build kwargs.

    Resolution order:
    1. ``request`` parameter (by name or ``Request`` annotation)
    2. Service providers (by type annotation via ``app.provide()``)
    """
    sig = inspect.signature(handler, eval_str=True)
    kwargs: dict[str, Any] = {}

    for name, param in sig.parameters.items():
        if name == "request" or param.annotation is Request:
            kwargs[name] = request
        elif (
            providers
            and param.annotation is not inspect.Parameter.empty
            and param.annotation in providers
        ):
            kwargs[name] = providers[param.annotation]()

    return kwargs
