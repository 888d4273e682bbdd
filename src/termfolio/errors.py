"""termfolio exception hierarchy.

Shared across the router, handlers, middleware and stores so every
module raises and catches the same types.
"""

from dataclasses import dataclass


class TermfolioError(Exception):
    """Base for all termfolio-specific errors."""


class ConfigurationError(TermfolioError):
    """Raised when site configuration is invalid."""


class DuplicateEntryError(TermfolioError):
    """The client identity already has a guestbook entry."""


class GuestbookFullError(TermfolioError):
    """The guestbook has reached its entry cap."""


@dataclass(frozen=True, slots=True)
class HTTPError(TermfolioError):
    """An error that maps directly to an HTTP status code.

    Raised by the URL guard, router, middleware, or handlers. The ASGI
    handler catches these and renders JSON for API paths, plain text
    for everything else.
    """

    status: int
    detail: str = ""
    headers: tuple[tuple[str, str], ...] = ()

    def __str__(self) -> str:
        if self.detail:
            return f"{self.status}: {self.detail}"
        return str(self.status)


class BadRequest(HTTPError):  # noqa: N818
    """400: malformed URL, body, or input that failed validation."""

    def __init__(self, detail: str = "Bad Request") -> None:
        super().__init__(status=400, detail=detail)


class Forbidden(HTTPError):  # noqa: N818
    """403: resolved path escapes the project root."""

    def __init__(self, detail: str = "Forbidden") -> None:
        super().__init__(status=403, detail=detail)


class NotFound(HTTPError):  # noqa: N818
    """404: no route or allow-listed file matched the request path."""

    def __init__(self, detail: str = "Not Found") -> None:
        super().__init__(status=404, detail=detail)


class MethodNotAllowed(HTTPError):  # noqa: N818
    """405: route exists but not for this HTTP method.

    Includes an ``Allow`` header listing the valid methods.
    """

    def __init__(self, allowed: frozenset[str], detail: str = "") -> None:
        allow_value = ", ".join(sorted(allowed))
        super().__init__(
            status=405,
            detail=detail or "Method Not Allowed",
            headers=(("Allow", allow_value),),
        )


class Conflict(HTTPError):  # noqa: N818
    """409: duplicate signature or guestbook at capacity."""

    def __init__(self, detail: str = "Conflict") -> None:
        super().__init__(status=409, detail=detail)


class PayloadTooLarge(HTTPError):  # noqa: N818
    """413: request body exceeded the configured ceiling.

    The unread remainder of the body is still on the wire, so the
    connection is closed after the response.
    """

    def __init__(self, detail: str = "Payload Too Large") -> None:
        super().__init__(status=413, detail=detail, headers=(("Connection", "close"),))


class URITooLong(HTTPError):  # noqa: N818
    """414: request target longer than the configured limit."""

    def __init__(self, detail: str = "URI Too Long") -> None:
        super().__init__(status=414, detail=detail)


class TooManyRequests(HTTPError):  # noqa: N818
    """429: client exceeded the submission rate limit."""

    def __init__(self, retry_after: int, detail: str = "Too Many Requests") -> None:
        super().__init__(
            status=429,
            detail=detail,
            headers=(("Retry-After", str(retry_after)),),
        )
