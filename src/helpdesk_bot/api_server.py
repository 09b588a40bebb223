"""API server entry point."""

from __future__ import annotations

import argparse
import logging
import socket
import sys
from typing import Sequence

import uvicorn

from helpdesk_bot.config import settings

DEFAULT_HOST = "::"


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    """Parse command line arguments."""
    parser = argparse.ArgumentParser(
        description="Start the Help Desk Bot API server."
    )
    parser.add_argument(
        "--host",
        default=DEFAULT_HOST,
        help=f"Host interface to bind. Defaults to {DEFAULT_HOST}.",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=settings.port,
        help=f"Port to listen on. Defaults to PORT or {settings.port}.",
    )
    parser.add_argument(
        "--reload",
        action="store_true",
        help="Enable auto-reload for development.",
    )
    parser.add_argument(
        "--log-level",
        default="INFO",
        choices=("DEBUG", "INFO", "WARNING", "ERROR", "CRITICAL"),
        help="Logging level. Defaults to INFO.",
    )
    return parser.parse_args(argv)


def is_port_available(host: str, port: int) -> bool:
    """Check if a port is available for binding."""
    family = socket.AF_INET6 if ":" in host else socket.AF_INET
    with socket.socket(family, socket.SOCK_STREAM) as s:
        try:
            s.bind((host, port))
            return True
        except OSError:
            return False


def main(argv: Sequence[str] | None = None) -> None:
    """Main entry point for the API server."""
    args = parse_args(argv)

    logging.basicConfig(
        level=getattr(logging, args.log_level.upper(), logging.INFO),
        format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
    )

    logger = logging.getLogger(__name__)

    if not is_port_available(args.host, args.port):
        logger.error(f"Port {args.port} is already in use. Use --port to pick another one.")
        sys.exit(1)

    logger.info(f"Starting Help Desk Bot API on [{args.host}]:{args.port}")

    # The bot posts tickets to its own /api/tickets endpoint, so a single
    # worker keeps conversation state and tickets in one process.
    uvicorn.run(
        "helpdesk_bot.api.main:app",
        host=args.host,
        port=args.port,
        reload=args.reload,
        log_level=args.log_level.lower(),
    )


if __name__ == "__main__":
    main(sys.argv[1:])
