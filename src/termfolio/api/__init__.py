"""JSON API handlers.

Handlers return ``Response`` objects directly and receive their stores
through provider injection (``app.provide``).
"""

from termfolio.api.guestbook import list_entries, sign_guestbook
from termfolio.api.visitors import count_visit

__all__ = ["count_visit", "list_entries", "sign_guestbook"]
