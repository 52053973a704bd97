"""
Attachment targets for middleware, routes and sub-pipelines.

Collections and routers never talk to Starlette directly; they go through the
small Origin protocol below, so tests can substitute a recording fake for the
dispatch engine.
"""

from __future__ import annotations

from collections.abc import Awaitable, Callable, Sequence
from enum import Enum
from typing import Any, Protocol

from starlette.applications import Starlette
from starlette.middleware import Middleware as StarletteMiddleware
from starlette.middleware.base import BaseHTTPMiddleware
from starlette.requests import Request
from starlette.responses import PlainTextResponse, Response
from starlette.types import ASGIApp

from .exceptions import RouteError, ServerError

CallNext = Callable[[Request], Awaitable[Response]]
Callback = Callable[[Request, CallNext], Awaitable[Response]]

ANY_METHODS = ["GET", "HEAD", "POST", "PUT", "PATCH", "DELETE", "OPTIONS"]


class Method(str, Enum):
    """HTTP methods accepted by direct routes."""

    GET = "GET"
    POST = "POST"
    ANY = "ANY"

    @classmethod
    def parse(cls, value: Method | str) -> Method:
        """
        Parse a method name (case-insensitive, "all" is an alias of ANY).

        Raises:
            RouteError: If the method is not supported
        """
        if isinstance(value, Method):
            return value
        name = str(value).upper()
        if name == "ALL":
            return cls.ANY
        try:
            return cls(name)
        except ValueError:
            raise RouteError("Unsupported route method", method=value) from None

    @property
    def http_methods(self) -> list[str]:
        """HTTP methods served by a route registered with this method."""
        if self is Method.ANY:
            return list(ANY_METHODS)
        return [self.value]


class Origin(Protocol):
    """Capability a collection or router attaches to."""

    @property
    def asgi(self) -> ASGIApp: ...

    def use(self, callback: Callback) -> None: ...

    def wrap(self, middleware_class: type[Any], **options: Any) -> None: ...

    def route(self, method: Method, path: str, callbacks: Sequence[Callback]) -> None: ...

    def mount(self, path: str, origin: Origin) -> None: ...


def chain(callbacks: Sequence[Callback]) -> Callable[[Request], Awaitable[Response]]:
    """
    Compose processing functions into one Starlette endpoint.

    Callbacks run in order; each one continues the chain by awaiting
    ``call_next(request)``. Falling off the end of the chain yields 404.
    """
    callbacks = tuple(callbacks)

    async def endpoint(request: Request) -> Response:
        async def dispatch(index: int, req: Request) -> Response:
            if index == len(callbacks):
                return PlainTextResponse("Not Found", status_code=404)
            return await callbacks[index](req, lambda r: dispatch(index + 1, r))

        return await dispatch(0, request)

    return endpoint


class StarletteOrigin:
    """
    Origin backed by a Starlette (or FastAPI) application.

    Middleware registered with use() and wrap() executes in registration
    order: the first registered entry is the outermost layer.
    """

    def __init__(self, app: Starlette) -> None:
        self._app = app

    @property
    def app(self) -> Starlette:
        """Underlying Starlette application."""
        return self._app

    @property
    def asgi(self) -> ASGIApp:
        return self._app

    def use(self, callback: Callback) -> None:
        """Append a processing function to the request pipeline."""
        self.wrap(BaseHTTPMiddleware, dispatch=callback)

    def wrap(self, middleware_class: type[Any], **options: Any) -> None:
        """Append an ASGI middleware class to the request pipeline."""
        if self._app.middleware_stack is not None:
            raise ServerError("Cannot add middleware after the pipeline has started")
        self._app.user_middleware.append(StarletteMiddleware(middleware_class, **options))

    def route(self, method: Method, path: str, callbacks: Sequence[Callback]) -> None:
        """Register a direct route whose handlers run as one chain."""
        self._app.router.add_route(
            path,
            chain(callbacks),
            methods=method.http_methods,
            include_in_schema=False,
        )

    def mount(self, path: str, origin: Origin) -> None:
        """Mount another pipeline under a path prefix."""
        self._app.router.mount(path, app=origin.asgi)

    def reset(self) -> None:
        """Discard all registered middleware so the pipeline can be rebuilt."""
        self._app.user_middleware.clear()
        self._app.middleware_stack = None
