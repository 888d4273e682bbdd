"""Guestbook input validation: composable rules, then HTML escaping.

Each rule is a callable with the signature::

    def rule(value: str) -> str | None:
        '''Return error message, or None if valid.'''

Lengths are checked on the raw trimmed text. Escaping runs afterwards,
so an entity-heavy payload can't slip past the limit, and nothing
unescaped is ever stored.
"""

import html
from collections.abc import Callable, Mapping
from dataclasses import dataclass
from typing import Any, TypeAlias

from termfolio.errors import BadRequest

# Type alias for a validator function
Validator: TypeAlias = Callable[[str], str | None]

DEFAULT_NAME = "Anonymous"


def required(value: str) -> str | None:
    """Field must be non-empty after trimming."""
    if not value.strip():
        return "Message is required"
    return None


def max_length(n: int) -> Validator:
    """String must be at most *n* characters."""

    def check(value: str) -> str | None:
        if len(value) > n:
            return f"Message must be at most {n} characters"
        return None

    return check


def escape_html(value: str) -> str:
    """Escape ``& < > " '`` for safe interpolation into HTML."""
    return html.escape(value, quote=True)


def run_rules(value: str, rules: list[Validator]) -> str:
    """Apply *rules* in order; raise ``BadRequest`` with the first error."""
    for rule in rules:
        error = rule(value)
        if error is not None:
            raise BadRequest(error)
    return value


@dataclass(frozen=True, slots=True)
class GuestbookSubmission:
    """A validated, escaped guestbook submission."""

    name: str
    message: str


def clean_message(raw: Any, *, limit: int = 100) -> str:
    """Trim, length-check, then escape the message."""
    if not isinstance(raw, str):
        raise BadRequest("Message is required")
    message = run_rules(raw.strip(), [required, max_length(limit)])
    return escape_html(message)


def clean_name(raw: Any, *, limit: int = 20) -> str:
    """Trim, default, truncate, then escape the display name."""
    if raw is None:
        raw = ""
    if not isinstance(raw, str):
        raise BadRequest("Name must be a string")
    name = raw.strip()[:limit].strip() or DEFAULT_NAME
    return escape_html(name)


def parse_submission(
    payload: Any,
    *,
    max_name: int = 20,
    max_message: int = 100,
) -> GuestbookSubmission:
    """Validate a decoded JSON body into a ``GuestbookSubmission``.

    Raises ``BadRequest`` if the payload is not an object or a field
    fails validation.
    """
    if not isinstance(payload, Mapping):
        raise BadRequest("Invalid JSON")
    message = clean_message(payload.get("message"), limit=max_message)
    name = clean_name(payload.get("name"), limit=max_name)
    return GuestbookSubmission(name=name, message=message)
