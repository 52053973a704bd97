"""Base unit of request processing."""

from __future__ import annotations

from ..origin import Callback


class Middleware:
    """
    Wraps one processing function for later registration with a pipeline.

    The function receives the request and a ``call_next`` continuation and
    returns a response, either its own or the one produced downstream:

        async def tag(request, call_next):
            request.state.tag = "A"
            return await call_next(request)

        Middleware(tag)
    """

    __slots__ = ("_callback",)

    def __init__(self, callback: Callback) -> None:
        self._callback = callback

    @property
    def callback(self) -> Callback:
        """Function which processes the request."""
        return self._callback

    def __repr__(self) -> str:
        name = getattr(self._callback, "__qualname__", repr(self._callback))
        return f"{type(self).__name__}({name})"
