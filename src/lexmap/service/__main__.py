"""Command-line entry point for the lexicon control surface service."""

from __future__ import annotations

import argparse
import importlib
import logging
import os
from typing import Optional

from lexmap.config import load_app_config

from .api import create_app
from .store import LexiconStore

DEFAULT_HOST = "127.0.0.1"
DEFAULT_PORT = 9610


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Lexicon control surface service.")
    parser.add_argument("--host", default=DEFAULT_HOST, help="Interface to bind (default: %(default)s).")
    parser.add_argument("--port", type=int, default=DEFAULT_PORT, help="Port to bind (default: %(default)s).")
    parser.add_argument(
        "--config",
        default=None,
        help="Path to TOML config file (defaults to LEXMAP_CONFIG).",
    )
    parser.add_argument(
        "--reload",
        action="store_true",
        help="Enable auto-reload (development only).",
    )
    parser.add_argument(
        "--log-level",
        default="info",
        help="Uvicorn log level (default: %(default)s).",
    )
    return parser


def main(argv: Optional[list[str]] = None) -> None:
    parser = build_parser()
    args = parser.parse_args(argv)

    config = load_app_config(args.config or os.getenv("LEXMAP_CONFIG"))
    app = create_app(LexiconStore(config))

    log_level = args.log_level.lower()
    logging.getLogger("lexmap").setLevel(log_level.upper())

    uvicorn = importlib.import_module("uvicorn")
    uvicorn.run(
        app,
        host=args.host,
        port=args.port,
        log_level=log_level,
        reload=args.reload,
    )


if __name__ == "__main__":  # pragma: no cover - manual execution entry point
    main()
