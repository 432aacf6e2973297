"""
SQLite connection factory for the counter store.

One connection per database path, shared across threads
(check_same_thread=False). Statements on a shared connection are
serialized by the store that uses it.
"""

from __future__ import annotations

import logging
import sqlite3
import threading
from pathlib import Path
from typing import Optional

from websyncer.config.settings import StorageSettings, get_settings

logger = logging.getLogger(__name__)

# Module-level lock for connection creation
_lock = threading.Lock()

# Singleton connection per database path
_connections: dict[str, sqlite3.Connection] = {}


def _resolve(db_path: Optional[Path]) -> Path:
    return db_path if db_path is not None else get_settings().db_path


def get_connection(
    db_path: Optional[Path] = None,
    storage: Optional[StorageSettings] = None,
) -> sqlite3.Connection:
    """
    Get the shared SQLite connection for ``db_path``.

    Args:
        db_path: Path to the SQLite database file. If None, uses
                 the default path from settings.
        storage: Journal/busy-timeout settings. Defaults to
                 StorageSettings(). Only applied when the connection
                 is first opened.
    """
    db_path = _resolve(db_path)
    db_key = str(db_path)

    with _lock:
        if db_key in _connections:
            return _connections[db_key]

        db_path.parent.mkdir(parents=True, exist_ok=True)
        storage = storage or StorageSettings()

        logger.info("Opening counter database: %s", db_path)
        conn = sqlite3.connect(db_key, check_same_thread=False, timeout=10.0)
        conn.execute(f"PRAGMA journal_mode={storage.journal_mode}")
        conn.execute(f"PRAGMA busy_timeout={storage.busy_timeout_ms}")
        conn.execute("PRAGMA synchronous=NORMAL")  # Safe with WAL
        conn.row_factory = sqlite3.Row

        _connections[db_key] = conn
        return conn


def close_connection(db_path: Optional[Path] = None) -> None:
    """Close the connection for a given db_path (or the default). Used in tests."""
    db_key = str(_resolve(db_path))

    with _lock:
        conn = _connections.pop(db_key, None)
        if conn is not None:
            conn.close()
            logger.info("Counter database closed: %s", db_key)


def close_all_connections() -> None:
    """Close all open connections. Used during shutdown."""
    with _lock:
        for key, conn in list(_connections.items()):
            conn.close()
            logger.info("Counter database closed: %s", key)
        _connections.clear()
