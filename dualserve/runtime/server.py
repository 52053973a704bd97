"""Dual-listener web server."""

from __future__ import annotations

import asyncio
import contextlib
import logging
import signal
from collections.abc import Mapping
from types import MappingProxyType
from typing import Any

from fastapi import FastAPI
from starlette.middleware.sessions import SessionMiddleware

from ..channels.manager import ChannelManager
from ..channels.target import Target
from ..config.options import WebServerOptions
from ..exceptions import ConfigError, ListenerError, ServerError
from ..middlewares.builtin import ensure_session_id, parse_body
from ..middlewares.collection import MiddlewareCollection
from ..origin import StarletteOrigin
from ..routers.collection import RouterCollection
from .listener import Listener

logger = logging.getLogger("dualserve.server")


def _coerce_options(options: WebServerOptions | Mapping[str, Any] | None) -> WebServerOptions:
    if isinstance(options, WebServerOptions):
        return options
    return WebServerOptions.from_dict(options)


class WebServer:
    """
    Web server serving one request pipeline over a plaintext listener, an
    encrypted listener, or both, with optional realtime channels.

    Lifecycle:
        Configured --start()--> Running --stop()--> Configured

    Built-in middleware (body parsing, then sessions when enabled) always
    runs before the root middleware collection, which runs before routes
    and routers.

    Example:
        server = WebServer({"http": {"enable": True, "port": 8080}})
        server.middlewares.add(Middleware(tag_request))
        server.routers.add_router("/api", api_router)
        await server.start()
        ...
        await server.stop()
    """

    def __init__(
        self,
        options: WebServerOptions | Mapping[str, Any] | None = None,
        name: str = "dualserve",
    ) -> None:
        """
        Initialize server.

        Args:
            options: Server configuration (dataclass or plain mapping)
            name: Server name (for logging)

        Raises:
            ConfigError: If the options are invalid
        """
        self._name = name
        self._app = FastAPI(title=name, docs_url=None, redoc_url=None, openapi_url=None)
        self._origin = StarletteOrigin(self._app)
        self._middlewares = MiddlewareCollection(self._origin)
        self._routers = RouterCollection(self._origin)

        self._http_listener: Listener | None = None
        self._https_listener: Listener | None = None
        self._channels: ChannelManager | None = None
        self._start_errors: dict[Target, ListenerError] = {}
        self._running = False

        self._options = WebServerOptions()
        self._apply(_coerce_options(options))

    @property
    def name(self) -> str:
        return self._name

    @property
    def options(self) -> WebServerOptions:
        """Current configuration."""
        return self._options

    @property
    def app(self) -> FastAPI:
        """Root application (the request dispatch engine)."""
        return self._app

    @property
    def middlewares(self) -> MiddlewareCollection:
        """Root middleware, run before every route and router."""
        return self._middlewares

    @property
    def routers(self) -> RouterCollection:
        """Root routes and routers."""
        return self._routers

    @property
    def channels(self) -> ChannelManager | None:
        """Realtime channel manager; None unless started with channels enabled."""
        return self._channels

    @property
    def http_listener(self) -> Listener | None:
        return self._http_listener

    @property
    def https_listener(self) -> Listener | None:
        return self._https_listener

    @property
    def is_running(self) -> bool:
        return self._running

    @property
    def start_errors(self) -> Mapping[Target, ListenerError]:
        """Listener failures of the last start(), keyed by PLAIN/ENCRYPTED."""
        return MappingProxyType(self._start_errors)

    async def set_options(self, options: WebServerOptions | Mapping[str, Any]) -> None:
        """
        Reconfigure the server.

        Active listeners are stopped first. The root pipeline is rebuilt,
        so the root middleware collection is connected again on the next
        start(). Routes and routers are kept.

        Raises:
            ConfigError: If the options are invalid
        """
        new_options = _coerce_options(options)
        await self.stop()
        self._apply(new_options)

    def _apply(self, options: WebServerOptions) -> None:
        """Apply configuration while no listener is active."""
        if options.sessions.enable and not options.sessions.pass_phrase:
            raise ConfigError("Sessions require a non-empty pass phrase")

        self._options = options
        self._origin.reset()
        self._middlewares.reset()
        self._activate_body_parsing()
        self._activate_sessions()
        self._create_listeners()

    def _activate_body_parsing(self) -> None:
        self._origin.use(parse_body)

    def _activate_sessions(self) -> None:
        sessions = self._options.sessions
        if not sessions.enable:
            return
        self._origin.wrap(
            SessionMiddleware,
            secret_key=sessions.pass_phrase,
            https_only=self._options.https.enable,
        )
        self._origin.use(ensure_session_id)

    def _create_listeners(self) -> None:
        opts = self._options
        self._http_listener = None
        self._https_listener = None

        if opts.http.enable:
            self._http_listener = Listener(
                "http", self._app, host=opts.host, config=opts.uvicorn
            )
        if opts.https.enable:
            self._https_listener = Listener(
                "https",
                self._app,
                host=opts.host,
                ssl_keyfile=opts.https.private_key,
                ssl_certfile=opts.https.certificate,
                config=opts.uvicorn,
            )

    async def start(self) -> None:
        """
        Start the server.

        Connects the root middleware (once per pipeline), starts the
        enabled listeners, then layers realtime channels over the live
        ones when enabled. A listener that fails to start is logged and
        recorded in start_errors; the other one is unaffected.

        Raises:
            ServerError: If the server is already running
        """
        if self._running:
            raise ServerError("Server is already running", server=self._name)

        if not self._middlewares.connected:
            self._middlewares.connect()

        self._start_errors = {}
        opts = self._options
        await self._start_listener(Target.PLAIN, self._http_listener, opts.http.port)
        await self._start_listener(Target.ENCRYPTED, self._https_listener, opts.https.port)

        http = self._live(self._http_listener)
        https = self._live(self._https_listener)
        if opts.channels.enable and (http or https):
            self._channels = ChannelManager(
                http, https, opts.channels.options, opts.channels.target
            )

        self._running = True
        logger.info(f"server '{self._name}' started")

    @staticmethod
    def _live(listener: Listener | None) -> Listener | None:
        if listener is not None and listener.listening:
            return listener
        return None

    async def _start_listener(self, kind: Target, listener: Listener | None, port: int) -> None:
        if listener is None:
            return
        try:
            if kind is Target.ENCRYPTED and not (
                self._options.https.private_key and self._options.https.certificate
            ):
                raise ListenerError("Missing private key or certificate", listener=listener.name)
            await listener.listen(port)
        except ListenerError as e:
            logger.error(f"{listener.name} listener failed to start: {e}")
            self._start_errors[kind] = e

    async def stop(self) -> None:
        """Close the active listeners. Stopping a stopped server does nothing."""
        if self._channels is not None:
            await self._channels.close()
            self._channels = None

        for listener in (self._http_listener, self._https_listener):
            if listener is not None and listener.listening:
                await listener.close()

        if self._running:
            logger.info(f"server '{self._name}' stopped")
        self._running = False

    async def serve(self) -> None:
        """
        Start, wait for SIGINT/SIGTERM, then stop.

        Raises:
            ServerError: If no listener could be started
        """
        await self.start()

        stop_requested = asyncio.Event()
        loop = asyncio.get_running_loop()
        installed = []
        for sig in (signal.SIGINT, signal.SIGTERM):
            with contextlib.suppress(NotImplementedError):
                loop.add_signal_handler(sig, stop_requested.set)
                installed.append(sig)
        try:
            if not (self._live(self._http_listener) or self._live(self._https_listener)):
                raise ServerError(
                    "No listener is running",
                    server=self._name,
                    errors={k.name: str(e) for k, e in self._start_errors.items()},
                )
            await stop_requested.wait()
        finally:
            for sig in installed:
                loop.remove_signal_handler(sig)
            await self.stop()

    def run(self) -> None:
        """Run the server until interrupted (blocking)."""
        asyncio.run(self.serve())
