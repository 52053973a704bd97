"""Target-scoped access to the realtime servers of both listeners."""

from __future__ import annotations

import logging
from collections.abc import Iterator
from typing import TYPE_CHECKING, Any

from .server import ChannelServer, ConnectionMiddleware, EventCallback
from .target import Target

if TYPE_CHECKING:
    from ..runtime.listener import Listener

logger = logging.getLogger("dualserve.channels")


class ChannelManager:
    """
    Realtime channel manager.

    Owns one ChannelServer per given listener: zero, one or two. Every
    operation takes a Target and fans out to the matching servers that
    exist; a target whose listener is absent is silently skipped.

    The manager never starts or stops listeners; it only layers realtime
    servers over the ones it is given.

    Example:
        channels.add_global_listener("chat", on_chat, Target.PLAIN)
        await channels.emit("news", {"title": "..."})
    """

    def __init__(
        self,
        http_listener: Listener | None,
        https_listener: Listener | None,
        options: dict[str, Any] | None = None,
        target: Target = Target.BOTH,
    ) -> None:
        """
        Create realtime servers for the given listeners.

        Args:
            http_listener: Plaintext listener, None when disabled
            https_listener: Encrypted listener, None when disabled
            options: Keyword arguments for socketio.AsyncServer
            target: Listeners that get a realtime server (default: BOTH)
        """
        self._options = dict(options or {})
        self._servers: dict[Target, ChannelServer] = {}

        for kind, listener in ((Target.PLAIN, http_listener), (Target.ENCRYPTED, https_listener)):
            if listener is not None and target.matches(kind):
                self._servers[kind] = ChannelServer(kind, listener, self._options)
                logger.info(f"realtime channel attached to {listener.name}")

    @property
    def options(self) -> dict[str, Any]:
        return dict(self._options)

    @property
    def targets(self) -> tuple[Target, ...]:
        """Transports that have a realtime server."""
        return tuple(self._servers)

    def server(self, target: Target) -> ChannelServer | None:
        """Realtime server bound to PLAIN or ENCRYPTED, if any."""
        return self._servers.get(target)

    def _select(self, target: Target) -> Iterator[ChannelServer]:
        matched = False
        for kind, server in self._servers.items():
            if target.matches(kind):
                matched = True
                yield server
        if not matched:
            logger.debug(f"no realtime server for target {target.name}")

    def add_global_listener(
        self, event: str, callback: EventCallback, target: Target = Target.BOTH
    ) -> None:
        """
        Add a listener on the realtime server(s).

        Args:
            event: Event to listen to
            callback: Function called on the event
            target: PLAIN, ENCRYPTED or BOTH
        """
        for server in self._select(target):
            server.on(event, callback)

    def remove_global_listener(self, event: str, target: Target = Target.BOTH) -> None:
        """
        Remove every listener of an event on the realtime server(s).

        Args:
            event: Event whose listeners are removed
            target: PLAIN, ENCRYPTED or BOTH
        """
        for server in self._select(target):
            server.remove_all_listeners(event)

    def add_middleware(
        self, middleware: ConnectionMiddleware, target: Target = Target.BOTH
    ) -> None:
        """
        Add a connection middleware on the realtime server(s).

        Args:
            middleware: Function called with (sid, environ, auth) for every
                new connection, before any listener
            target: PLAIN, ENCRYPTED or BOTH
        """
        for server in self._select(target):
            server.use(middleware)

    async def emit(self, event: str, data: Any = None, target: Target = Target.BOTH) -> None:
        """
        Emit an event to all connected peers.

        Args:
            event: Name of the event
            data: Payload to transmit
            target: PLAIN, ENCRYPTED or BOTH
        """
        for server in self._select(target):
            await server.emit(event, data)

    async def close(self) -> None:
        """Detach every realtime server from its listener and shut it down."""
        servers = list(self._servers.values())
        self._servers.clear()
        for server in servers:
            await server.close()
