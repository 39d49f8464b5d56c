"""Command-line entry point that serves the Flash News API with uvicorn."""

from __future__ import annotations

import argparse
from typing import Sequence

import uvicorn

from .config import settings
from .logging_config import get_logger


UVICORN_APP = "src.flash_news.api.server:app"

logger = get_logger("cli")


def parse_args(argv: Sequence[str] | None = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Start the Flash News FastAPI server.")
    parser.add_argument(
        "--host",
        default=settings.host,
        help=f"Interface to bind (default: {settings.host}).",
    )
    parser.add_argument(
        "--port",
        type=int,
        default=settings.port,
        help=f"Port to listen on (default: {settings.port}).",
    )
    parser.add_argument(
        "--reload",
        action="store_true",
        help="Enable uvicorn auto-reload for local development.",
    )
    return parser.parse_args(argv)


def main(argv: Sequence[str] | None = None) -> int:
    args = parse_args(argv)
    logger.info("server_listening", url=f"http://localhost:{args.port}")
    uvicorn.run(UVICORN_APP, host=args.host, port=args.port, reload=args.reload)
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
