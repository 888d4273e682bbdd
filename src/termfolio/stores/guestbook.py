"""Persistent guestbook.

Append-only list of short signed messages stored as ``{"entries": [...]}``.
One entry per client identity, capped in total.
"""

from __future__ import annotations

import logging
from dataclasses import dataclass
from datetime import date
from pathlib import Path
from typing import Any

from termfolio.errors import DuplicateEntryError, GuestbookFullError
from termfolio.stores.persist import JSONFileStore

logger = logging.getLogger("termfolio.stores")

IDENTITY_KEY = "clientIdentityHash"


@dataclass(frozen=True, slots=True)
class GuestbookEntry:
    """A stored signature. ``identity_hash`` never leaves the server."""

    name: str
    message: str
    date: str
    identity_hash: str

    def public(self) -> dict[str, str]:
        """The client-facing shape: name, message, date."""
        return {"name": self.name, "message": self.message, "date": self.date}

    def to_json(self) -> dict[str, str]:
        return {**self.public(), IDENTITY_KEY: self.identity_hash}

    @classmethod
    def from_json(cls, raw: Any) -> GuestbookEntry | None:
        """Parse one stored entry; ``None`` if it is malformed."""
        if not isinstance(raw, dict):
            return None
        fields = (raw.get("name"), raw.get("message"), raw.get("date"), raw.get(IDENTITY_KEY))
        if not all(isinstance(value, str) for value in fields):
            return None
        name, message, entry_date, identity_hash = fields
        return cls(name=name, message=message, date=entry_date, identity_hash=identity_hash)


class GuestbookStore(JSONFileStore):
    """Guestbook entries with an identity index for O(1) duplicate checks."""

    def __init__(self, path: str | Path, *, max_entries: int = 500) -> None:
        super().__init__(path)
        self.max_entries = max_entries
        self._entries: list[GuestbookEntry] = []
        self._identities: set[str] = set()

    def __len__(self) -> int:
        return len(self._entries)

    @property
    def is_full(self) -> bool:
        return len(self._entries) >= self.max_entries

    def load(self) -> int:
        """Load stored entries. Missing or corrupt state starts empty."""
        data = self.read_json()
        raw_entries = data.get("entries") if isinstance(data, dict) else None
        if data is not None and not isinstance(raw_entries, list):
            logger.warning("Ignoring unusable guestbook state in %s", self.path)
            raw_entries = None

        self._entries = []
        self._identities = set()
        for index, raw in enumerate(raw_entries or ()):
            entry = GuestbookEntry.from_json(raw)
            if entry is None:
                logger.warning("Skipping malformed guestbook entry #%d", index)
                continue
            self._entries.append(entry)
            self._identities.add(entry.identity_hash)
        logger.info("Guestbook loaded: %d entries", len(self._entries))
        return len(self._entries)

    def has_signed(self, identity_hash: str) -> bool:
        return identity_hash in self._identities

    def list_public(self, limit: int = 50) -> list[dict[str, str]]:
        """Newest *limit* entries, newest first, without identity hashes."""
        if limit <= 0:
            return []
        return [entry.public() for entry in reversed(self._entries[-limit:])]

    def add(
        self,
        name: str,
        message: str,
        identity_hash: str,
        *,
        today: date | None = None,
    ) -> GuestbookEntry:
        """Append a sanitized entry and schedule a save.

        Raises ``DuplicateEntryError`` if *identity_hash* already signed,
        then ``GuestbookFullError`` if the cap is reached.
        """
        if self.has_signed(identity_hash):
            raise DuplicateEntryError(identity_hash)
        if self.is_full:
            raise GuestbookFullError(self.max_entries)

        entry = GuestbookEntry(
            name=name,
            message=message,
            date=(today or date.today()).isoformat(),
            identity_hash=identity_hash,
        )
        self._entries.append(entry)
        self._identities.add(identity_hash)
        self.schedule_save()
        return entry

    def _snapshot(self) -> dict[str, list[dict[str, str]]]:
        return {"entries": [entry.to_json() for entry in self._entries]}
