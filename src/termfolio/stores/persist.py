"""Atomic JSON persistence shared by the stores.

Writes go to a temp file in the target's directory, are fsynced, then
renamed over the canonical file with ``os.replace``. A crash before the
rename leaves the previous file untouched.

Saves run as background asyncio tasks; the blocking write happens in a
worker thread via ``anyio.to_thread``. One lock per store serializes
writes, and each write snapshots the state when it acquires the lock,
so the last write to finish always carries the latest state. At most
one save waits behind the one in progress.
"""

import asyncio
import contextlib
import json
import logging
import os
import tempfile
from pathlib import Path
from typing import Any

import anyio

logger = logging.getLogger("termfolio.stores")


def atomic_write_json(path: Path, data: Any) -> None:
    """Serialize *data* to *path* via temp file + rename."""
    path.parent.mkdir(parents=True, exist_ok=True)
    fd, tmp_name = tempfile.mkstemp(prefix=f".{path.name}.", suffix=".tmp", dir=path.parent)
    try:
        with os.fdopen(fd, "w", encoding="utf-8") as fh:
            json.dump(data, fh, ensure_ascii=False)
            fh.flush()
            os.fsync(fh.fileno())
        os.replace(tmp_name, path)
    except BaseException:
        with contextlib.suppress(OSError):
            os.unlink(tmp_name)
        raise


class JSONFileStore:
    """Base for a store backed by one JSON file.

    Subclasses implement ``_snapshot()`` (the JSON-ready state) and call
    ``schedule_save()`` after every mutation.
    """

    def __init__(self, path: str | Path) -> None:
        self._path = Path(path)
        self._write_lock: anyio.Lock | None = None  # Created lazily on first save
        self._pending: set[asyncio.Task[bool]] = set()
        self._queued: asyncio.Task[bool] | None = None

    @property
    def path(self) -> Path:
        return self._path

    def _snapshot(self) -> Any:
        raise NotImplementedError

    def read_json(self) -> Any | None:
        """Read and parse the backing file. ``None`` if missing or unreadable."""
        try:
            raw = self._path.read_text(encoding="utf-8")
        except FileNotFoundError:
            logger.info("No state file at %s, starting empty", self._path)
            return None
        except OSError as exc:
            logger.warning("Could not read %s: %s", self._path, exc)
            return None
        try:
            return json.loads(raw)
        except ValueError as exc:
            logger.warning("Corrupt JSON in %s: %s", self._path, exc)
            return None

    def schedule_save(self) -> asyncio.Task[bool]:
        """Start a background save and return its task.

        A save that has not yet taken its snapshot will write the latest
        state anyway, so while one is queued no new task is started and
        the queued one is returned. The caller doesn't have to await it;
        ``flush()`` does.
        """
        if self._queued is not None:
            return self._queued
        task = asyncio.get_running_loop().create_task(self.save())
        self._queued = task
        self._pending.add(task)
        task.add_done_callback(self._save_done)
        return task

    def _save_done(self, task: asyncio.Task[bool]) -> None:
        self._pending.discard(task)
        if self._queued is task:
            self._queued = None

    async def save(self) -> bool:
        """Write the current state. Failures are logged and reported as ``False``."""
        if self._write_lock is None:
            self._write_lock = anyio.Lock()
        async with self._write_lock:
            # From here on, changes need a new save.
            if self._queued is asyncio.current_task():
                self._queued = None
            data = self._snapshot()
            try:
                await anyio.to_thread.run_sync(atomic_write_json, self._path, data)
            except (OSError, TypeError, ValueError):
                logger.exception("Failed to save %s", self._path)
                return False
        return True

    @property
    def pending_saves(self) -> int:
        return len(self._pending)

    async def flush(self) -> None:
        """Wait for every scheduled save to finish."""
        while self._pending:
            await asyncio.gather(*tuple(self._pending))
