"""Command-line entry point: ``askservice [--host HOST] [--port PORT]``."""

from __future__ import annotations

import argparse
import sys
from typing import Optional, Sequence

import uvicorn

from askservice.apps.api.app import create_app
from askservice.core.settings import ConfigError, get_settings


def _parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="askservice", description="Run the question-answering HTTP service.")
    parser.add_argument("--host", help="bind address (default: server.host from config)")
    parser.add_argument("--port", type=int, help="bind port (default: server.port from config)")
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = _parse_args(argv)
    try:
        settings = get_settings()
    except ConfigError as exc:
        print(f"askservice: configuration error: {exc}", file=sys.stderr)
        return 2

    app = create_app(settings)
    uvicorn.run(
        app,
        host=args.host if args.host is not None else settings.server.host,
        port=args.port if args.port is not None else settings.server.port,
        log_config=None,
    )
    return 0


if __name__ == "__main__":
    sys.exit(main())
