"""Ordered middleware collection bound to one attachment target."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from pathlib import Path

from ..origin import Origin
from .middleware import Middleware
from .static import StaticMiddleware
from .upload import UploadMiddleware

logger = logging.getLogger("dualserve.middlewares")


class MiddlewareCollection:
    """
    Ordered list of middleware connected to an origin in insertion order.

    connect() is not idempotent: each call registers every entry again, so
    owners call it once per pipeline. The ``connected`` flag lets them check.
    """

    def __init__(self, origin: Origin) -> None:
        """
        Initialize the collection.

        Args:
            origin: Attachment target the middleware is connected to
        """
        self._origin = origin
        self._middlewares: list[Middleware] = []
        self._connected = False

    @property
    def origin(self) -> Origin:
        """Attachment target of the collection."""
        return self._origin

    @property
    def middlewares(self) -> tuple[Middleware, ...]:
        """Snapshot of the current entries, in execution order."""
        return tuple(self._middlewares)

    @property
    def connected(self) -> bool:
        """Whether the entries have been registered with the origin."""
        return self._connected

    def __iter__(self) -> Iterator[Middleware]:
        return iter(self.middlewares)

    def __len__(self) -> int:
        return len(self._middlewares)

    def set(self, *middlewares: Middleware) -> None:
        """Replace the whole sequence; previous entries are discarded."""
        self._middlewares = list(middlewares)

    def add(self, *middlewares: Middleware) -> None:
        """Append middleware after the existing entries."""
        self._middlewares.extend(middlewares)

    def add_static(self, path: str | Path) -> None:
        """
        Append middleware serving static files (css, js, ...).

        Args:
            path: Folder containing the static files
        """
        self.add(StaticMiddleware(path))

    def add_upload(self, dest: str | Path, field_name: str) -> None:
        """
        Append middleware storing the file sent in a form field.

        Args:
            dest: Folder to store uploaded files in
            field_name: Form field containing the file
        """
        self.add(UploadMiddleware(dest, field_name))

    def connect(self) -> None:
        """Register every entry with the origin, in order."""
        for middleware in self._middlewares:
            self._origin.use(middleware.callback)
        self._connected = True
        logger.debug(f"connected {len(self._middlewares)} middleware")

    def reset(self) -> None:
        """Forget the connection after the origin's pipeline was rebuilt."""
        self._connected = False
