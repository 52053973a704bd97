"""Realtime channel layer (Socket.IO) over the transport listeners."""

from .manager import ChannelManager
from .server import ChannelServer
from .target import Target

__all__ = [
    "ChannelManager",
    "ChannelServer",
    "Target",
]
