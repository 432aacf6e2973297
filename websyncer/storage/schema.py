"""
SQLite schema for the counter store.

Tables:
    rate_counters   key/value counters with an absolute expiry time
"""

from __future__ import annotations

import logging
from pathlib import Path
from typing import Optional

from websyncer.config.settings import StorageSettings
from websyncer.storage.connection import get_connection

logger = logging.getLogger(__name__)

# Current schema version. Bump when adding migrations.
SCHEMA_VERSION = 1

# expires_at is a UNIX timestamp (seconds, float)
_RATE_COUNTERS_DDL = """
CREATE TABLE IF NOT EXISTS rate_counters (
    key         TEXT PRIMARY KEY,
    value       TEXT NOT NULL,
    expires_at  REAL NOT NULL
);
"""

_RATE_COUNTERS_INDEXES = [
    "CREATE INDEX IF NOT EXISTS idx_rate_counters_expires_at ON rate_counters(expires_at);",
]


def initialize_database(
    db_path: Optional[Path] = None,
    storage: Optional[StorageSettings] = None,
) -> None:
    """
    Create the counter table and its index if they don't exist.

    Safe to call multiple times.
    """
    conn = get_connection(db_path, storage)

    with conn:
        conn.execute(_RATE_COUNTERS_DDL)
        for idx_sql in _RATE_COUNTERS_INDEXES:
            conn.execute(idx_sql)
        conn.execute(f"PRAGMA user_version={SCHEMA_VERSION}")

    logger.info("Counter schema initialized (version %d)", SCHEMA_VERSION)


def get_schema_version(db_path: Optional[Path] = None) -> int:
    """Return the current schema version of the database."""
    conn = get_connection(db_path)
    row = conn.execute("PRAGMA user_version").fetchone()
    return row[0] if row else 0
