"""
Key-value counter store with per-entry TTL.

The admission controller only needs two operations: read a counter and
overwrite it with a TTL. There is no atomic increment and no
transaction spanning the read and the write; concurrent admissions may
both read the same value and write the same successor. That undercount
is accepted.

Expired entries read back as absent. Rows are only physically removed
by purge_expired(), which is the store's own housekeeping and never
called from the request path.
"""

from __future__ import annotations

import logging
import sqlite3
import threading
import time
from pathlib import Path
from typing import Callable, Optional, Protocol

from websyncer.config.settings import StorageSettings
from websyncer.storage.connection import get_connection
from websyncer.storage.models import CounterEntry

logger = logging.getLogger(__name__)


class CounterStoreError(RuntimeError):
    """Raised when the backing store cannot be read or written."""


class CounterStore(Protocol):
    """The store vocabulary used by the admission controller."""

    def get(self, key: str) -> Optional[int]:
        ...

    def put(self, key: str, value: int, ttl_seconds: int) -> None:
        ...


def _parse_count(key: str, raw: Optional[str]) -> Optional[int]:
    if raw is None:
        return None
    try:
        return int(raw)
    except ValueError:
        logger.warning("Ignoring non-integer counter value %r for key %s", raw, key)
        return None


class SqliteCounterStore:
    """CounterStore backed by the ``rate_counters`` table."""

    def __init__(
        self,
        db_path: Optional[Path] = None,
        clock: Callable[[], float] = time.time,
        storage: Optional[StorageSettings] = None,
    ) -> None:
        self._db_path = db_path
        self._clock = clock
        self._storage = storage
        # One shared connection; statements from reader and writer threads are serialized
        self._lock = threading.Lock()

    @property
    def _conn(self) -> sqlite3.Connection:
        return get_connection(self._db_path, self._storage)

    def get(self, key: str) -> Optional[int]:
        """Return the live count for ``key``, or None if absent or expired."""
        try:
            with self._lock:
                row = self._conn.execute(
                    "SELECT value FROM rate_counters WHERE key = ? AND expires_at > ?",
                    (key, self._clock()),
                ).fetchone()
        except sqlite3.Error as exc:
            raise CounterStoreError(f"Failed to read counter {key}") from exc
        return _parse_count(key, row["value"] if row else None)

    def put(self, key: str, value: int, ttl_seconds: int) -> None:
        """Overwrite ``key`` with ``value``, expiring ``ttl_seconds`` from now."""
        expires_at = self._clock() + ttl_seconds
        try:
            with self._lock, self._conn as conn:
                conn.execute(
                    """
                    INSERT INTO rate_counters (key, value, expires_at)
                    VALUES (?, ?, ?)
                    ON CONFLICT(key) DO UPDATE SET
                        value = excluded.value,
                        expires_at = excluded.expires_at
                    """,
                    (key, str(value), expires_at),
                )
        except sqlite3.Error as exc:
            raise CounterStoreError(f"Failed to write counter {key}") from exc

    def list_live(self, prefix: str = "", limit: int = 100) -> list[CounterEntry]:
        """Return unexpired entries whose key starts with ``prefix``."""
        with self._lock:
            rows = self._conn.execute(
                """
                SELECT key, value, expires_at FROM rate_counters
                WHERE key LIKE ? ESCAPE '\\' AND expires_at > ?
                ORDER BY key
                LIMIT ?
                """,
                (prefix.replace("%", r"\%").replace("_", r"\_") + "%", self._clock(), limit),
            ).fetchall()
        return [CounterEntry(key=r["key"], value=r["value"], expires_at=r["expires_at"]) for r in rows]

    def purge_expired(self) -> int:
        """Delete expired rows. Returns the number removed."""
        with self._lock, self._conn as conn:
            cursor = conn.execute(
                "DELETE FROM rate_counters WHERE expires_at <= ?",
                (self._clock(),),
            )
        count = cursor.rowcount
        if count:
            logger.info("Purged %d expired counters", count)
        return count


class InMemoryCounterStore:
    """Process-local CounterStore for development and tests."""

    def __init__(self, clock: Callable[[], float] = time.time) -> None:
        self._clock = clock
        self._entries: dict[str, tuple[str, float]] = {}
        self._lock = threading.Lock()

    def get(self, key: str) -> Optional[int]:
        with self._lock:
            entry = self._entries.get(key)
        if entry is None or entry[1] <= self._clock():
            return None
        return _parse_count(key, entry[0])

    def put(self, key: str, value: int, ttl_seconds: int) -> None:
        with self._lock:
            self._entries[key] = (str(value), self._clock() + ttl_seconds)

    def __len__(self) -> int:
        return len(self._entries)
