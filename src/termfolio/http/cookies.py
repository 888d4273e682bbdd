"""Cookies: the ``Cookie`` request header and ``Set-Cookie`` directives.

The site only ever reads and writes one cookie (the visited marker), so
both sides stay deliberately small.
"""

from dataclasses import dataclass

SAMESITE_VALUES = frozenset({"Strict", "Lax", "None"})


def parse_cookies(header: str) -> dict[str, str]:
    """Parse a ``Cookie`` header value into a name-value dict.

    Pairs without ``=`` or with an empty name are ignored. Double-quoted
    values are unquoted. When a name repeats, the first value wins
    (browsers send the most specific path first).
    """
    cookies: dict[str, str] = {}
    for pair in header.split(";") if header else ():
        name, sep, value = pair.partition("=")
        name = name.strip()
        if not sep or not name or name in cookies:
            continue
        value = value.strip()
        if len(value) >= 2 and value[0] == value[-1] == '"':
            value = value[1:-1]
        cookies[name] = value
    return cookies


@dataclass(frozen=True, slots=True)
class SetCookie:
    """A ``Set-Cookie`` directive attached to a Response.

    ``samesite`` must be ``Strict``, ``Lax`` or ``None``; browsers drop
    ``SameSite=None`` cookies that are not also ``Secure``.
    """

    name: str
    value: str
    max_age: int | None = None
    path: str = "/"
    domain: str | None = None
    secure: bool = False
    httponly: bool = True
    samesite: str = "Lax"

    def __post_init__(self) -> None:
        if self.samesite not in SAMESITE_VALUES:
            msg = f"SameSite must be one of {sorted(SAMESITE_VALUES)}, got {self.samesite!r}"
            raise ValueError(msg)
        if self.samesite == "None" and not self.secure:
            msg = "SameSite=None cookies must also be Secure"
            raise ValueError(msg)

    def to_header_value(self) -> str:
        """Serialize in the attribute order browsers and proxies expect."""
        attributes = [
            f"Max-Age={self.max_age}" if self.max_age is not None else "",
            f"Path={self.path}" if self.path else "",
            f"Domain={self.domain}" if self.domain else "",
            "Secure" if self.secure else "",
            "HttpOnly" if self.httponly else "",
            f"SameSite={self.samesite}",
        ]
        return "; ".join([f"{self.name}={self.value}", *filter(None, attributes)])
