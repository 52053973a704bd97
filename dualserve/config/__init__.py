"""Configuration dataclasses and loaders for dualserve."""

from .loader import load_options
from .options import (
    ChannelOptions,
    HttpOptions,
    HttpsOptions,
    SessionOptions,
    WebServerOptions,
)
from .uvicorn import UvicornConfig

__all__ = [
    "ChannelOptions",
    "HttpOptions",
    "HttpsOptions",
    "SessionOptions",
    "UvicornConfig",
    "WebServerOptions",
    "load_options",
]
