"""
dualserve CLI.

Usage:
    dualserve serve --config server.yaml
    dualserve serve --config server.yaml --static ./public --log-level debug
    dualserve --help
"""

from __future__ import annotations

import argparse
import logging
import sys
from collections.abc import Sequence

from . import __version__
from .config.loader import load_options
from .exceptions import DualServeError
from .runtime.logging import configure_logging
from .runtime.server import WebServer

logger = logging.getLogger("dualserve.cli")


def _build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="dualserve",
        description="Dual-listener web server with realtime channels",
    )
    parser.add_argument("-v", "--version", action="version", version=f"dualserve {__version__}")

    commands = parser.add_subparsers(dest="command", required=True)

    serve = commands.add_parser("serve", help="run a server until interrupted")
    serve.add_argument("-c", "--config", help="YAML options file")
    serve.add_argument(
        "--static",
        action="append",
        default=[],
        metavar="DIR",
        help="serve static files from DIR (repeatable)",
    )
    serve.add_argument("--log-level", default="info", help="logging level (default: info)")
    serve.add_argument("--log-file", help="write logs to this file instead of stderr")
    serve.add_argument(
        "--no-env",
        action="store_true",
        help="ignore DUALSERVE_* environment overrides",
    )
    return parser


def _serve(args: argparse.Namespace) -> int:
    configure_logging(args.log_level, args.log_file)

    options = load_options(args.config, env_prefix=None if args.no_env else "DUALSERVE_")
    server = WebServer(options)
    for directory in args.static:
        server.middlewares.add_static(directory)

    server.run()
    return 0


def main(argv: Sequence[str] | None = None) -> int:
    """Main entry point for the dualserve CLI."""
    args = _build_parser().parse_args(argv)
    try:
        if args.command == "serve":
            return _serve(args)
    except DualServeError as e:
        logger.error(f"{e}")
        print(f"dualserve: {e}", file=sys.stderr)
        return 1
    return 2


if __name__ == "__main__":
    sys.exit(main())
