"""Composable, path-scoped router."""

from __future__ import annotations

import logging

from starlette.applications import Starlette

from ..exceptions import RouterError
from ..middlewares.collection import MiddlewareCollection
from ..origin import Origin, StarletteOrigin
from .collection import RouterCollection

logger = logging.getLogger("dualserve.routers")


class Router:
    """
    Group of middleware, routes and sub-routers mounted under a path.

    A router owns a private pipeline. Routes and sub-routers may be added
    before or after connect(); either way requests reach them only through
    the router's own middleware.

    Example:
        api = Router()
        api.middlewares.add(Middleware(authenticate))
        api.routers.add_route("GET", "/ping", Middleware(ping))
        server.routers.add_router("/api", api)
    """

    def __init__(self) -> None:
        self._origin = StarletteOrigin(Starlette())
        self._middlewares = MiddlewareCollection(self._origin)
        self._routers = RouterCollection(self._origin)
        self._path: str | None = None

    @property
    def origin(self) -> StarletteOrigin:
        """Private pipeline of the router."""
        return self._origin

    @property
    def middlewares(self) -> MiddlewareCollection:
        """Router-local middleware, run before routes and sub-routers."""
        return self._middlewares

    @property
    def routers(self) -> RouterCollection:
        """Direct routes and sub-routers."""
        return self._routers

    @property
    def path(self) -> str | None:
        """Mount path, None until connected."""
        return self._path

    @property
    def is_connected(self) -> bool:
        return self._path is not None

    def connect(self, path: str, parent: Origin) -> None:
        """
        Connect the router to its parent.

        The router's middleware is wired into its pipeline before the
        pipeline is mounted, so no request under ``path`` can bypass it.

        Args:
            path: Path prefix managed by the router
            parent: Origin of the parent (root application or another router)

        Raises:
            RouterError: If the router is already connected
        """
        if self._path is not None:
            raise RouterError("Router is already connected", path=self._path)

        self._middlewares.connect()
        parent.mount(path, self._origin)
        self._path = path
        logger.debug(f"router mounted at {path}")
