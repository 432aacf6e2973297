"""CLI for inspecting and sweeping rate counters."""

from __future__ import annotations

import argparse
import logging
from typing import Optional, Sequence

from websyncer.config.logging_config import setup_logging
from websyncer.config.settings import get_settings
from websyncer.storage.counter_store import SqliteCounterStore
from websyncer.storage.schema import initialize_database


def build_parser() -> argparse.ArgumentParser:
    """Build CLI argument parser."""
    parser = argparse.ArgumentParser(description="Inspect or sweep WebSyncer rate counters.")
    sub = parser.add_subparsers(dest="command", required=True)

    inspect = sub.add_parser("inspect", help="List live counters.")
    inspect.add_argument(
        "--prefix",
        default="rl:",
        help="Only show keys starting with this prefix, e.g. rl:short: or rl:daily:<fingerprint>.",
    )
    inspect.add_argument("--limit", type=int, default=100, help="Maximum rows to print.")

    sub.add_parser("purge", help="Delete expired counters.")
    return parser


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = build_parser().parse_args(argv)

    settings = get_settings()
    setup_logging(log_dir=settings.logs_dir)
    initialize_database(settings.db_path, settings.storage)
    logger = logging.getLogger(__name__)

    store = SqliteCounterStore(settings.db_path, storage=settings.storage)

    if args.command == "purge":
        removed = store.purge_expired()
        logger.info("Purge finished")
        print(f"purged={removed}")
        return 0

    entries = store.list_live(prefix=args.prefix, limit=args.limit)
    for entry in entries:
        print(f"{entry.key} value={entry.value} scope={entry.scope} expires={entry.expires_at_iso}")
    print(f"total={len(entries)}")
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
