"""
Unified exception hierarchy for dualserve.

All errors raised by the server scaffold derive from DualServeError, so callers
can catch every scaffold failure with a single except clause while still being
able to single out configuration, lifecycle and routing problems.
"""

from typing import Any


class DualServeError(Exception):
    """
    Base exception for all dualserve errors.

    Example:
        try:
            await server.start()
        except DualServeError as e:
            logger.error(f"Server error: {e}")
    """

    def __init__(self, message: str, **context: Any) -> None:
        """
        Initialize the exception with a message and optional context.

        Args:
            message: Human-readable error message
            **context: Additional context information (stored in self.context)
        """
        super().__init__(message)
        self.message = message
        self.context = context

    def __str__(self) -> str:
        """String representation with context if available."""
        if self.context:
            context_str = ", ".join(f"{k}={v}" for k, v in self.context.items())
            return f"{self.message} ({context_str})"
        return self.message


class ConfigError(DualServeError):
    """
    Configuration-related errors.

    Examples:
        - Unknown option section or key
        - Sessions enabled without a pass phrase
        - Unreadable or malformed YAML options file
    """

    pass


class ServerError(DualServeError):
    """
    Server lifecycle errors.

    Examples:
        - start() called while the server is already running
    """

    pass


class ListenerError(ServerError):
    """
    Transport listener errors.

    Raised when a listener cannot bind its port or load its TLS material.
    Fatal to the failing listener only.
    """

    pass


class RouteError(DualServeError):
    """Raised when a route is registered with an unsupported method."""

    pass


class RouterError(DualServeError):
    """Raised when a router is connected a second time."""

    pass
