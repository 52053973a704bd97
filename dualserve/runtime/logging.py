"""Logging setup for the server process and its uvicorn listeners."""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Any

from ..config.uvicorn import UvicornConfig

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"


def build_uvicorn_log_config(config: UvicornConfig) -> dict[str, Any]:
    """
    Build uvicorn logging configuration dict.

    Only adjusts the levels of uvicorn's loggers; application loggers and
    root handlers are left untouched.
    """
    access_level = "info" if config.access_log else "warning"
    return {
        "version": 1,
        "disable_existing_loggers": False,
        "handlers": {},
        "loggers": {
            "uvicorn": {"level": config.log_level.upper()},
            "uvicorn.access": {"level": access_level.upper()},
            "uvicorn.error": {"level": config.log_level.upper()},
        },
    }


def configure_logging(
    log_level: str = "INFO",
    log_file: str | None = None,
) -> logging.Logger:
    """
    Configure root logging for a standalone server process.

    Replaces (not appends to) root logger handlers with a console handler,
    or a file handler when ``log_file`` is given.

    Args:
        log_level: Logging level name (default: "INFO")
        log_file: Path to log file (optional, parent directories are created)

    Returns:
        The dualserve package logger
    """
    handler: logging.Handler
    if log_file:
        path = Path(log_file)
        path.parent.mkdir(parents=True, exist_ok=True)
        handler = logging.FileHandler(log_file)
    else:
        handler = logging.StreamHandler()

    handler.setFormatter(logging.Formatter(LOG_FORMAT))
    logging.root.handlers = [handler]
    logging.root.setLevel(getattr(logging, log_level.upper(), logging.INFO))

    return logging.getLogger("dualserve")
