"""``/api/guestbook``: list and sign.

Submission checks run in a fixed order: origin, rate limit, body size,
JSON shape, field validation, duplicate identity, capacity. The first
failure decides the response.
"""

import logging

from termfolio.config import SiteConfig
from termfolio.errors import (
    BadRequest,
    Conflict,
    DuplicateEntryError,
    GuestbookFullError,
    TooManyRequests,
)
from termfolio.http.request import Request
from termfolio.http.response import Response
from termfolio.security.identity import client_identity
from termfolio.security.rate_limit import SubmissionRateLimiter
from termfolio.stores.guestbook import GuestbookStore
from termfolio.validation import parse_submission

logger = logging.getLogger("termfolio.server")


async def list_entries(store: GuestbookStore, config: SiteConfig) -> Response:
    """Newest public entries, newest first."""
    entries = store.list_public(config.public_entries)
    return Response.json({"entries": entries}).with_header("Cache-Control", "no-store")


async def sign_guestbook(
    request: Request,
    store: GuestbookStore,
    limiter: SubmissionRateLimiter,
    config: SiteConfig,
) -> Response:
    """Validate and append one signature. ``201`` on success."""
    origin = request.headers.get("origin")
    if origin is not None and origin != config.site_origin:
        logger.info("Rejected guestbook post from origin %s", origin)
        raise BadRequest("Invalid origin")

    identity = client_identity(
        request, config.identity_salt, trusted_hops=config.trusted_proxy_hops
    )
    allowed, retry_after = limiter.hit(identity)
    if not allowed:
        raise TooManyRequests(retry_after, "Too many submissions, try again later")

    try:
        payload = await request.json(limit=config.max_body_bytes)
    except ValueError as exc:
        raise BadRequest("Invalid JSON") from exc

    submission = parse_submission(
        payload,
        max_name=config.max_name_length,
        max_message=config.max_message_length,
    )

    try:
        entry = store.add(submission.name, submission.message, identity)
    except DuplicateEntryError as exc:
        raise Conflict("You have already signed the guestbook") from exc
    except GuestbookFullError as exc:
        raise Conflict("Guestbook is full") from exc

    return Response.json({"success": True, "entry": entry.public()}, status=201)
