"""Routers and route collections."""

from .collection import RouterCollection
from .router import Router

__all__ = [
    "Router",
    "RouterCollection",
]
