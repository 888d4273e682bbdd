"""Shared type aliases used across termfolio modules."""

from collections.abc import Callable
from typing import Any, TypeAlias

# Route handler: function with variable signature
Handler: TypeAlias = Callable[..., Any]

# Lifecycle hook: sync or async, no arguments
Hook: TypeAlias = Callable[[], Any]
