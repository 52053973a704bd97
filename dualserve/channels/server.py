"""Realtime server layered over one transport listener."""

from __future__ import annotations

import inspect
import logging
from collections.abc import Callable
from typing import TYPE_CHECKING, Any

import socketio  # type: ignore[import-untyped]

from .target import Target

if TYPE_CHECKING:
    from ..runtime.listener import Listener

logger = logging.getLogger("dualserve.channels")

CONNECT_EVENT = "connect"

EventCallback = Callable[..., Any]
ConnectionMiddleware = Callable[[str, dict[str, Any], Any], Any]


def _fit_args(callback: Callable[..., Any], args: tuple[Any, ...]) -> tuple[Any, ...]:
    """Trim trailing arguments the callback does not accept."""
    try:
        params = inspect.signature(callback).parameters.values()
    except (TypeError, ValueError):
        return args
    if any(p.kind is inspect.Parameter.VAR_POSITIONAL for p in params):
        return args
    positional = [
        p
        for p in params
        if p.kind in (inspect.Parameter.POSITIONAL_ONLY, inspect.Parameter.POSITIONAL_OR_KEYWORD)
    ]
    return args[: len(positional)]


async def _invoke(callback: Callable[..., Any], *args: Any) -> Any:
    """Call a sync or async callback with as many arguments as it takes."""
    result = callback(*_fit_args(callback, args))
    if inspect.isawaitable(result):
        result = await result
    return result


class ChannelServer:
    """
    One Socket.IO server bound to one listener.

    Keeps any number of callbacks per event and registers a single
    dispatcher per event with Socket.IO; each callback receives as many of
    the event arguments as its signature accepts. Connection middleware
    runs, in order, before the ``connect`` callbacks of every new
    connection; a middleware rejects the connection by returning False or
    raising socketio.exceptions.ConnectionRefusedError.
    """

    def __init__(
        self, kind: Target, listener: Listener, options: dict[str, Any] | None = None
    ) -> None:
        """
        Create the Socket.IO server and attach it to the listener.

        Args:
            kind: Transport the server is bound to (PLAIN or ENCRYPTED)
            listener: Listener whose connections the server upgrades
            options: Keyword arguments for socketio.AsyncServer
        """
        self._kind = kind
        self._listener = listener
        self._sio = socketio.AsyncServer(async_mode="asgi", **(options or {}))
        self._middleware: list[ConnectionMiddleware] = []
        self._listeners: dict[str, list[EventCallback]] = {}

        self._sio.on(CONNECT_EVENT, handler=self._on_connect)
        listener.attach(socketio.ASGIApp(self._sio, other_asgi_app=listener.app))

    @property
    def kind(self) -> Target:
        return self._kind

    @property
    def listener(self) -> Listener:
        return self._listener

    @property
    def sio(self) -> socketio.AsyncServer:
        """Underlying Socket.IO server."""
        return self._sio

    def listeners(self, event: str) -> list[EventCallback]:
        """Callbacks currently registered for ``event``."""
        return list(self._listeners.get(event, ()))

    def on(self, event: str, callback: EventCallback) -> None:
        """Register a callback for ``event``."""
        if event not in self._listeners and event != CONNECT_EVENT:
            self._sio.on(event, handler=self._dispatcher(event))
        self._listeners.setdefault(event, []).append(callback)

    def remove_all_listeners(self, event: str) -> None:
        """Drop every callback registered for ``event``."""
        if event in self._listeners:
            self._listeners[event].clear()

    def use(self, middleware: ConnectionMiddleware) -> None:
        """Register a connection-level middleware."""
        self._middleware.append(middleware)

    async def emit(self, event: str, data: Any = None) -> None:
        """Broadcast ``event`` to every connected peer."""
        await self._sio.emit(event, data)

    async def close(self) -> None:
        """Stop upgrading connections of the listener and shut the server down."""
        self._listener.detach()
        await self._sio.shutdown()

    async def _on_connect(self, sid: str, environ: dict[str, Any], auth: Any = None) -> Any:
        for middleware in list(self._middleware):
            if await _invoke(middleware, sid, environ, auth) is False:
                logger.debug(f"connection {sid} rejected by middleware ({self._kind.name})")
                return False

        for callback in self.listeners(CONNECT_EVENT):
            if await _invoke(callback, sid, environ, auth) is False:
                return False
        return None

    def _dispatcher(self, event: str) -> Callable[..., Any]:
        async def dispatch(*args: Any) -> Any:
            result = None
            for callback in self.listeners(event):
                result = await _invoke(callback, *args)
            return result

        return dispatch
