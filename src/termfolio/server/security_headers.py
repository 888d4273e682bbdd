"""Fixed security headers attached to every response.

Applied by the request handler after error rendering, so 4xx and 5xx
responses carry the same set as successful ones.
"""

from dataclasses import dataclass

from termfolio.config import DEFAULT_CSP
from termfolio.http.response import Response


@dataclass(frozen=True, slots=True)
class SecurityHeadersConfig:
    """Configuration for security headers.

    All values are applied as-is. Use standard header values.
    """

    x_frame_options: str = "DENY"
    x_content_type_options: str = "nosniff"
    referrer_policy: str = "strict-origin-when-cross-origin"
    content_security_policy: str = DEFAULT_CSP
    strict_transport_security: str = "max-age=31536000; includeSubDomains"
    permissions_policy: str = "camera=(), microphone=(), geolocation=()"

    def as_headers(self) -> tuple[tuple[str, str], ...]:
        return (
            ("X-Content-Type-Options", self.x_content_type_options),
            ("X-Frame-Options", self.x_frame_options),
            ("Referrer-Policy", self.referrer_policy),
            ("Strict-Transport-Security", self.strict_transport_security),
            ("Content-Security-Policy", self.content_security_policy),
            ("Permissions-Policy", self.permissions_policy),
        )


def apply_security_headers(response: Response, config: SecurityHeadersConfig) -> Response:
    """Return *response* with the security header set added."""
    return response.with_headers(dict(config.as_headers()))
