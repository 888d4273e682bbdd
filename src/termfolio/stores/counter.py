"""Persistent visitor counter.

A single monotonically increasing integer stored as ``{"count": n}``.
"""

import logging
from dataclasses import dataclass
from pathlib import Path
from typing import Any

from termfolio.stores.persist import JSONFileStore

logger = logging.getLogger("termfolio.stores")


@dataclass(frozen=True, slots=True)
class Visit:
    """Outcome of a counter hit.

    ``first_visit`` tells the caller to set the visited marker cookie.
    """

    count: int
    first_visit: bool


class VisitorCounter(JSONFileStore):
    """Visitor count, loaded once and saved after every increment."""

    def __init__(self, path: str | Path) -> None:
        super().__init__(path)
        self._count = 0

    @property
    def count(self) -> int:
        return self._count

    def load(self) -> int:
        """Load the stored count. Missing or corrupt state starts at 0."""
        data = self.read_json()
        count = _parse_count(data)
        if count is None:
            if data is not None:
                logger.warning("Ignoring unusable counter state in %s", self.path)
            count = 0
        self._count = count
        logger.info("Visitor counter loaded: %d", self._count)
        return self._count

    def increment_if_first_visit(self, cookie_present: bool) -> Visit:
        """Count a visit unless the client already carries the marker cookie.

        The increment happens in memory before the save is scheduled,
        so concurrent requests never lose an increment.
        """
        if cookie_present:
            return Visit(count=self._count, first_visit=False)
        self._count += 1
        self.schedule_save()
        return Visit(count=self._count, first_visit=True)

    def _snapshot(self) -> dict[str, int]:
        return {"count": self._count}


def _parse_count(data: Any) -> int | None:
    if not isinstance(data, dict):
        return None
    count = data.get("count")
    # bool is an int subclass; "true" is not a count.
    if isinstance(count, bool):
        return None
    # Other JSON writers may store 12 as 12.0.
    if isinstance(count, float) and count.is_integer():
        count = int(count)
    if not isinstance(count, int) or count < 0:
        return None
    return count
