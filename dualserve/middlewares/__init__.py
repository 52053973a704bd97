"""Request middleware and ordered middleware collections."""

from .collection import MiddlewareCollection
from .middleware import Middleware
from .static import StaticMiddleware
from .upload import UploadedFile, UploadMiddleware

__all__ = [
    "Middleware",
    "MiddlewareCollection",
    "StaticMiddleware",
    "UploadMiddleware",
    "UploadedFile",
]
