"""Runtime components: transport listeners and the web server."""

from .listener import Listener
from .server import WebServer

__all__ = [
    "Listener",
    "WebServer",
]
