"""``GET /api/visitors``: unique visitor count."""

from termfolio.config import SiteConfig
from termfolio.http.request import Request
from termfolio.http.response import Response
from termfolio.stores.counter import VisitorCounter


async def count_visit(request: Request, counter: VisitorCounter, config: SiteConfig) -> Response:
    """Return ``{"count": n}``, counting the caller once per cookie lifetime."""
    visit = counter.increment_if_first_visit(config.visited_cookie in request.cookies)
    response = Response.json({"count": visit.count}).with_header("Cache-Control", "no-store")
    if visit.first_visit:
        response = response.with_cookie(
            config.visited_cookie,
            "1",
            max_age=config.visited_cookie_max_age,
            secure=True,
            httponly=True,
            samesite="Lax",
        )
    return response
