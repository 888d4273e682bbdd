"""Test utilities for termfolio applications::

    from termfolio.testing import TestClient
"""

from termfolio.testing.client import TestClient

__all__ = ["TestClient"]
