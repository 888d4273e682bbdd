"""Error rendering for termfolio requests.

Maps HTTPError exceptions and unexpected failures to Responses. API
paths get ``{"error": ...}`` JSON; everything else gets the bare
status phrase as plain text. Neither ever includes paths or tracebacks.
"""

import logging
from http import HTTPStatus

from termfolio.errors import HTTPError
from termfolio.http.request import Request
from termfolio.http.response import Response

logger = logging.getLogger("termfolio.server")


def _phrase(status: int) -> str:
    try:
        return HTTPStatus(status).phrase
    except ValueError:
        return "Error"


def render_http_error(exc: HTTPError, request: Request) -> Response:
    """Map an HTTPError to a Response."""
    logger.debug("%d %s %s: %s", exc.status, request.method, request.path, exc.detail)

    if request.is_api:
        response = Response.json({"error": exc.detail or _phrase(exc.status)}, status=exc.status)
        response = response.with_header("Cache-Control", "no-store")
    else:
        response = Response(body=_phrase(exc.status), status=exc.status)

    for name, value in exc.headers:
        response = response.with_header(name, value)
    return response


def render_internal_error(exc: Exception, request: Request, *, debug: bool = False) -> Response:
    """Handle unexpected exceptions as 500 errors."""
    logger.exception("500 %s %s", request.method, request.path)

    if request.is_api:
        detail = f"{type(exc).__name__}: {exc}" if debug else "Internal server error"
        return Response.json({"error": detail}, status=500).with_header("Cache-Control", "no-store")
    return Response(body="Internal Server Error", status=500)
