"""Transport listener: one uvicorn server bound to one port."""

from __future__ import annotations

import asyncio
import contextlib
import logging
import socket
import ssl
from collections.abc import Generator

import uvicorn
from starlette.types import ASGIApp, Receive, Scope, Send

from ..config.uvicorn import UvicornConfig
from ..exceptions import ListenerError
from .logging import build_uvicorn_log_config

logger = logging.getLogger("dualserve.listener")

STARTUP_POLL_INTERVAL = 0.01


class _EmbeddedServer(uvicorn.Server):
    """uvicorn server that leaves signal handling to its owner."""

    @contextlib.contextmanager
    def capture_signals(self) -> Generator[None, None, None]:
        yield


class Listener:
    """
    Plaintext or TLS listener serving one ASGI application.

    The listener itself is the ASGI entry point handed to uvicorn. It
    forwards to the application, or to a handler attached on top of it
    (a realtime server wrapping the application).

    Example:
        listener = Listener("http", app, host="127.0.0.1")
        await listener.listen(8080)
        ...
        await listener.close()
    """

    def __init__(
        self,
        name: str,
        app: ASGIApp,
        host: str = "0.0.0.0",
        ssl_keyfile: str | None = None,
        ssl_certfile: str | None = None,
        config: UvicornConfig | None = None,
    ) -> None:
        """
        Initialize listener.

        Args:
            name: Listener name (for logging)
            app: Application serving requests
            host: Bind address
            ssl_keyfile: PEM private key (TLS listener only)
            ssl_certfile: PEM certificate (TLS listener only)
            config: uvicorn tuning
        """
        self._name = name
        self._app = app
        self._handler: ASGIApp = app
        self._host = host
        self._ssl_keyfile = ssl_keyfile
        self._ssl_certfile = ssl_certfile
        self._config = config or UvicornConfig()
        self._server: _EmbeddedServer | None = None
        self._task: asyncio.Task[None] | None = None
        self._port: int | None = None

    async def __call__(self, scope: Scope, receive: Receive, send: Send) -> None:
        await self._handler(scope, receive, send)

    @property
    def name(self) -> str:
        return self._name

    @property
    def app(self) -> ASGIApp:
        """Application served when nothing is attached."""
        return self._app

    @property
    def host(self) -> str:
        return self._host

    @property
    def port(self) -> int | None:
        """Bound port while listening (resolves port 0), else None."""
        return self._port

    @property
    def is_tls(self) -> bool:
        return self._ssl_keyfile is not None or self._ssl_certfile is not None

    @property
    def listening(self) -> bool:
        return self._server is not None

    @property
    def handler(self) -> ASGIApp:
        """ASGI handler currently receiving connections."""
        return self._handler

    def attach(self, handler: ASGIApp) -> None:
        """Route incoming connections through ``handler`` instead of the app."""
        self._handler = handler

    def detach(self) -> None:
        """Route incoming connections straight to the app again."""
        self._handler = self._app

    def _build_config(self, port: int) -> uvicorn.Config:
        """Build and load uvicorn configuration (loads TLS material)."""
        config = uvicorn.Config(
            self,
            host=self._host,
            port=port,
            interface="asgi3",
            lifespan="off",
            ssl_keyfile=self._ssl_keyfile,
            ssl_certfile=self._ssl_certfile,
            log_config=build_uvicorn_log_config(self._config),
            **self._config.to_uvicorn_kwargs(),
        )
        try:
            config.load()
        except (OSError, ssl.SSLError) as e:
            raise ListenerError(
                "Cannot load TLS material", listener=self._name, error=str(e)
            ) from e
        return config

    def _bind(self, port: int) -> socket.socket:
        """Bind the listening socket."""
        try:
            family = socket.AF_INET6 if ":" in self._host else socket.AF_INET
            sock = socket.create_server(
                (self._host, port), family=family, backlog=self._config.backlog
            )
        except OSError as e:
            raise ListenerError(
                "Cannot bind port", listener=self._name, port=port, error=str(e)
            ) from e
        sock.setblocking(False)
        return sock

    async def listen(self, port: int) -> None:
        """
        Start accepting connections on ``port``.

        Returns once the listener serves requests. Calling it on a
        listening listener does nothing.

        Raises:
            ListenerError: If TLS material cannot be loaded or the port
                cannot be bound
        """
        if self._server is not None:
            return

        config = self._build_config(port)
        sock = self._bind(port)
        server = _EmbeddedServer(config)
        task = asyncio.create_task(server.serve(sockets=[sock]))

        while not server.started:
            if task.done():
                sock.close()
                task.result()
                raise ListenerError("Listener exited during startup", listener=self._name)
            await asyncio.sleep(STARTUP_POLL_INTERVAL)

        self._server = server
        self._task = task
        self._port = sock.getsockname()[1]
        scheme = "https" if self.is_tls else "http"
        logger.info(f"{self._name} listening on {scheme}://{self._host}:{self._port}")

    async def close(self) -> None:
        """Stop accepting connections. Closing a closed listener does nothing."""
        if self._server is None or self._task is None:
            return

        self._server.should_exit = True
        try:
            await self._task
        finally:
            logger.info(f"{self._name} closed (port={self._port})")
            self._server = None
            self._task = None
            self._port = None
            self.detach()
