"""Uvicorn transport configuration."""

from __future__ import annotations

from dataclasses import dataclass
from typing import Any


@dataclass
class UvicornConfig:
    """
    Uvicorn transport configuration shared by both listeners.

    Attributes:
        timeout_keep_alive: Keep-alive timeout in seconds (default: 5)
        limit_concurrency: Max concurrent connections (None = unlimited)
        limit_max_requests: Max requests before the listener exits (None = unlimited)
        backlog: Socket backlog size (default: 2048)
        log_level: Uvicorn log level (default: "warning")
        access_log: Enable access logging (default: False)
    """

    timeout_keep_alive: int = 5
    limit_concurrency: int | None = None
    limit_max_requests: int | None = None
    backlog: int = 2048
    log_level: str = "warning"
    access_log: bool = False

    def to_uvicorn_kwargs(self) -> dict[str, Any]:
        """
        Convert to uvicorn.Config() kwargs.

        Only includes optional parameters if they are set, to avoid
        overriding uvicorn defaults with None values.

        Returns:
            Dictionary of kwargs for uvicorn.Config()
        """
        kwargs: dict[str, Any] = {
            "timeout_keep_alive": self.timeout_keep_alive,
            "backlog": self.backlog,
            "log_level": self.log_level,
            "access_log": self.access_log,
        }

        if self.limit_concurrency is not None:
            kwargs["limit_concurrency"] = self.limit_concurrency

        if self.limit_max_requests is not None:
            kwargs["limit_max_requests"] = self.limit_max_requests

        return kwargs
