"""Client identity: salted one-way hash of the requester's IP address.

The hash is used for duplicate suppression and rate limiting. The raw
address is never stored or compared.
"""

import hashlib

from termfolio.http.request import Request

FORWARDED_HEADER = "x-forwarded-for"


def client_ip(request: Request, *, trusted_hops: int = 1) -> str:
    """Return the client address.

    Each trusted reverse proxy appends the peer it saw to
    ``X-Forwarded-For``, so only the rightmost *trusted_hops* entries are
    real. The address is the entry ``trusted_hops`` from the right;
    anything further left was written by the client and is ignored.

    With ``trusted_hops=0``, or when the header carries fewer entries
    than there are trusted proxies, the socket peer address is used.
    """
    if trusted_hops > 0:
        forwarded = request.headers.get_tokens(FORWARDED_HEADER)
        if len(forwarded) >= trusted_hops:
            return forwarded[-trusted_hops]
    if request.client:
        return request.client[0]
    return "unknown"


def hash_identity(ip: str, salt: str) -> str:
    """SHA-256 hex digest of *salt* and *ip*."""
    return hashlib.sha256(f"{salt}:{ip}".encode()).hexdigest()


def client_identity(request: Request, salt: str, *, trusted_hops: int = 1) -> str:
    """Identity hash for the client behind *request*."""
    return hash_identity(client_ip(request, trusted_hops=trusted_hops), salt)
