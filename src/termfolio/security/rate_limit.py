"""Submission rate limiting.

A small in-memory fixed-window limiter keyed by client identity.
State lives for the process lifetime and is swept periodically so
one-off clients don't accumulate.
"""

import logging
import math
import threading
import time
from collections.abc import Callable
from dataclasses import dataclass

logger = logging.getLogger("termfolio.security")


@dataclass(frozen=True, slots=True)
class RateLimitConfig:
    """Rate limit policy: *requests* allowed per *window_seconds*."""

    requests: int = 5
    window_seconds: float = 60.0


@dataclass(slots=True)
class RateLimitEntry:
    """Submissions counted in the current window for one identity."""

    count: int
    window_reset_at: float


class SubmissionRateLimiter:
    """Fixed-window limiter: the (requests + 1)th hit inside a window is rejected.

    ``clock`` defaults to ``time.monotonic`` and can be swapped in tests.
    """

    __slots__ = ("_clock", "_config", "_entries", "_lock")

    def __init__(
        self,
        config: RateLimitConfig | None = None,
        *,
        clock: Callable[[], float] = time.monotonic,
    ) -> None:
        self._config = config or RateLimitConfig()
        self._clock = clock
        self._lock = threading.Lock()
        self._entries: dict[str, RateLimitEntry] = {}

    def __len__(self) -> int:
        return len(self._entries)

    def hit(self, key: str) -> tuple[bool, int]:
        """Count a submission for *key*.

        Returns ``(allowed, retry_after_seconds)``.
        """
        cfg = self._config
        now = self._clock()
        with self._lock:
            entry = self._entries.get(key)
            if entry is None or now >= entry.window_reset_at:
                entry = RateLimitEntry(count=0, window_reset_at=now + cfg.window_seconds)
                self._entries[key] = entry

            entry.count += 1
            if entry.count > cfg.requests:
                return False, max(1, math.ceil(entry.window_reset_at - now))
            return True, 0

    def sweep(self) -> int:
        """Drop entries whose window has expired. Returns the number removed."""
        now = self._clock()
        with self._lock:
            expired = [key for key, entry in self._entries.items() if now >= entry.window_reset_at]
            for key in expired:
                del self._entries[key]
        if expired:
            logger.debug("Swept %d expired rate-limit entries", len(expired))
        return len(expired)
