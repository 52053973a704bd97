"""Collection of direct routes and sub-routers bound to one attachment target."""

from __future__ import annotations

import logging
from collections.abc import Mapping
from types import MappingProxyType
from typing import TYPE_CHECKING

from ..middlewares.middleware import Middleware
from ..origin import Method, Origin

if TYPE_CHECKING:
    from .router import Router

logger = logging.getLogger("dualserve.routers")


class RouterCollection:
    """
    Registry of routes and child routers of one origin.

    Registration order is matching order: the first registered route or
    router matching a request handles it.
    """

    def __init__(self, origin: Origin) -> None:
        """
        Initialize the collection.

        Args:
            origin: Parent of every route and router of the collection
        """
        self._origin = origin
        self._routes: dict[tuple[Method, str], tuple[Middleware, ...]] = {}
        self._routers: dict[str, Router] = {}

    @property
    def origin(self) -> Origin:
        """Attachment target of the collection."""
        return self._origin

    @property
    def routes(self) -> Mapping[tuple[Method, str], tuple[Middleware, ...]]:
        """Direct routes keyed by (method, path)."""
        return MappingProxyType(self._routes)

    @property
    def routers(self) -> Mapping[str, Router]:
        """Connected child routers keyed by mount path."""
        return MappingProxyType(self._routers)

    def add_route(self, method: Method | str, path: str, *middlewares: Middleware) -> None:
        """
        Add a route.

        Args:
            method: GET, POST or ANY (case-insensitive, "all" = ANY)
            path: Path relative to the origin
            *middlewares: Middleware to run, in order, for matching requests

        Raises:
            RouteError: If the method is not supported
        """
        method = Method.parse(method)
        self._origin.route(method, path, [mw.callback for mw in middlewares])
        self._routes[(method, path)] = middlewares
        logger.debug(f"route {method.value} {path} ({len(middlewares)} handlers)")

    def add_router(self, path: str, router: Router) -> None:
        """
        Add a router as child of the origin.

        Args:
            path: Mount path relative to the origin
            router: Child router
        """
        router.connect(path, self._origin)
        self._routers[path] = router
