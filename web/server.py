"""
Command-line entry point: serve the chess API with uvicorn.

Usage:
    chess-api [--host HOST] [--port PORT] [--log-level LEVEL]

Defaults come from web.config (and so from the CHESS_API_* environment
variables); command-line flags win over the environment.
"""

import argparse
import logging

import uvicorn

from web import config
from web.app import app

_log = logging.getLogger(__name__)


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(
        prog="chess-api",
        description="Chess REST API - stateful chess games over HTTP",
    )
    parser.add_argument("--host", default=config.HOST, help="Interface to bind")
    parser.add_argument("--port", type=int, default=config.PORT, help="TCP port")
    parser.add_argument(
        "--log-level",
        default=config.LOG_LEVEL,
        type=str.upper,
        choices=["DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"],
        help="Root log level",
    )
    return parser


def main(argv: list[str] | None = None) -> None:
    args = build_parser().parse_args(argv)
    logging.getLogger().setLevel(args.log_level)

    _log.info("Starting server on http://%s:%d", args.host, args.port)
    # Request lines are logged by the app's own trace middleware.
    uvicorn.run(
        app,
        host=args.host,
        port=args.port,
        log_level=args.log_level.lower(),
        access_log=False,
    )


if __name__ == "__main__":
    main()
