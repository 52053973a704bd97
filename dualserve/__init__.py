"""
dualserve: dual-protocol web server scaffold.

Composes an ordered middleware pipeline and nested routers over a plaintext
listener, an encrypted listener, or both, with optional Socket.IO channels
sharing the same listeners.

Example:
    from dualserve import Middleware, Router, WebServer

    async def ping(request, call_next):
        return PlainTextResponse("pong")

    server = WebServer({"http": {"enable": True, "port": 8080}})
    api = Router()
    api.routers.add_route("GET", "/ping", Middleware(ping))
    server.routers.add_router("/api", api)
    server.run()
"""

from importlib.metadata import PackageNotFoundError, version

try:
    __version__ = version("dualserve")
except PackageNotFoundError:
    __version__ = "0.1.0-dev"

from .channels import ChannelManager, ChannelServer, Target
from .config import (
    ChannelOptions,
    HttpOptions,
    HttpsOptions,
    SessionOptions,
    UvicornConfig,
    WebServerOptions,
    load_options,
)
from .exceptions import (
    ConfigError,
    DualServeError,
    ListenerError,
    RouteError,
    RouterError,
    ServerError,
)
from .middlewares import (
    Middleware,
    MiddlewareCollection,
    StaticMiddleware,
    UploadedFile,
    UploadMiddleware,
)
from .origin import Method, Origin, StarletteOrigin
from .routers import Router, RouterCollection
from .runtime import Listener, WebServer

__all__ = [
    "__version__",
    # Server
    "WebServer",
    "Listener",
    # Pipeline
    "Middleware",
    "MiddlewareCollection",
    "StaticMiddleware",
    "UploadMiddleware",
    "UploadedFile",
    "Router",
    "RouterCollection",
    "Method",
    "Origin",
    "StarletteOrigin",
    # Realtime
    "ChannelManager",
    "ChannelServer",
    "Target",
    # Config
    "WebServerOptions",
    "HttpOptions",
    "HttpsOptions",
    "SessionOptions",
    "ChannelOptions",
    "UvicornConfig",
    "load_options",
    # Errors
    "DualServeError",
    "ConfigError",
    "ServerError",
    "ListenerError",
    "RouteError",
    "RouterError",
]
