"""Uvicorn entrypoint for running the API server."""

from __future__ import annotations

import argparse
import logging

import uvicorn
from dotenv import load_dotenv

from websyncer.config.logging_config import setup_logging
from websyncer.config.settings import get_settings


def build_parser() -> argparse.ArgumentParser:
    parser = argparse.ArgumentParser(description="Run the WebSyncer API server.")
    parser.add_argument("--host", default="127.0.0.1", help="Bind address.")
    parser.add_argument("--port", type=int, default=8787, help="Bind port.")
    parser.add_argument("--reload", action="store_true", help="Enable auto-reload.")
    parser.add_argument("--log-level", default="INFO", help="Logging level.")
    return parser


def main() -> int:
    args = build_parser().parse_args()

    # GEMINI_API_KEY / WHITELIST_IPS may come from a local .env file
    load_dotenv()
    settings = get_settings()
    setup_logging(log_dir=settings.logs_dir, level=args.log_level)
    logger = logging.getLogger(__name__)

    logger.info("Starting API server on %s:%d", args.host, args.port)
    uvicorn.run(
        "websyncer.api.app:create_app",
        factory=True,
        host=args.host,
        port=args.port,
        reload=args.reload,
    )
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
