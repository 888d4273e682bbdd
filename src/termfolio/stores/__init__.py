"""Flat-file JSON stores for the visitor counter and the guestbook.

Each store is loaded once at startup, mutated in memory, and saved in
the background with an atomic temp-file + rename::

    counter = VisitorCounter(config.counter_path)
    counter.load()
    visit = counter.increment_if_first_visit(cookie_present=False)
    await counter.flush()
"""

from termfolio.stores.counter import Visit, VisitorCounter
from termfolio.stores.guestbook import GuestbookEntry, GuestbookStore
from termfolio.stores.persist import JSONFileStore, atomic_write_json

__all__ = [
    "GuestbookEntry",
    "GuestbookStore",
    "JSONFileStore",
    "Visit",
    "VisitorCounter",
    "atomic_write_json",
]
