"""Security primitives: client identity hashing and submission rate limiting.

Applications call these from handlers::

    from termfolio.security import SubmissionRateLimiter, client_identity
"""

from termfolio.security.identity import client_identity, client_ip, hash_identity
from termfolio.security.rate_limit import RateLimitConfig, SubmissionRateLimiter

__all__ = [
    "RateLimitConfig",
    "SubmissionRateLimiter",
    "client_identity",
    "client_ip",
    "hash_identity",
]
