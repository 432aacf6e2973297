"""Tests for the counter stores."""

from __future__ import annotations

from pathlib import Path

import pytest

from websyncer.config.settings import StorageSettings
from websyncer.storage.connection import close_connection, get_connection
from websyncer.storage.counter_store import (
    CounterStoreError,
    InMemoryCounterStore,
    SqliteCounterStore,
)
from websyncer.storage.schema import SCHEMA_VERSION, get_schema_version, initialize_database


class _Clock:
    """Manually advanced UNIX-time clock."""

    def __init__(self, start: float = 1_700_000_000.0) -> None:
        self.now = start

    def __call__(self) -> float:
        return self.now


@pytest.fixture
def clock() -> _Clock:
    return _Clock()


@pytest.fixture
def timed_store(db, db_path: Path, clock) -> SqliteCounterStore:
    return SqliteCounterStore(db_path, clock=clock)


class TestSchema:
    def test_version_recorded(self, db, db_path):
        assert get_schema_version(db_path) == SCHEMA_VERSION

    def test_initialize_is_idempotent(self, db, db_path):
        initialize_database(db_path)
        initialize_database(db_path)
        assert get_schema_version(db_path) == SCHEMA_VERSION


class TestSqliteCounterStore:
    def test_missing_key_is_none(self, sqlite_store):
        assert sqlite_store.get("rl:short:abc:2025-01-01-00-00") is None

    def test_put_then_get(self, sqlite_store):
        sqlite_store.put("rl:daily:abc:2025-01-01", 3, 86400)
        assert sqlite_store.get("rl:daily:abc:2025-01-01") == 3

    def test_put_overwrites_value(self, sqlite_store):
        sqlite_store.put("k", 1, 660)
        sqlite_store.put("k", 2, 660)
        assert sqlite_store.get("k") == 2

    def test_expired_entry_reads_absent(self, timed_store, clock):
        timed_store.put("k", 5, 660)
        clock.now += 659
        assert timed_store.get("k") == 5
        clock.now += 1
        assert timed_store.get("k") is None

    def test_put_refreshes_ttl(self, timed_store, clock):
        timed_store.put("k", 1, 660)
        clock.now += 600
        timed_store.put("k", 2, 660)
        clock.now += 600
        assert timed_store.get("k") == 2

    def test_non_integer_value_reads_absent(self, db, sqlite_store):
        with db:
            db.execute(
                "INSERT INTO rate_counters (key, value, expires_at) VALUES (?, ?, ?)",
                ("bad", "NaN", 9e12),
            )
        assert sqlite_store.get("bad") is None

    def test_purge_expired(self, timed_store, clock):
        timed_store.put("short", 1, 660)
        timed_store.put("daily", 1, 86400)
        clock.now += 700

        assert timed_store.purge_expired() == 1
        assert timed_store.get("daily") == 1
        assert timed_store.purge_expired() == 0

    def test_list_live_filters_prefix_and_expiry(self, timed_store, clock):
        timed_store.put("rl:short:aaa:2025-01-01-00-00", 2, 660)
        timed_store.put("rl:daily:aaa:2025-01-01", 7, 86400)
        timed_store.put("rl:short:bbb:2025-01-01-00-00", 1, 10)
        clock.now += 60

        entries = timed_store.list_live(prefix="rl:short:")
        assert [e.key for e in entries] == ["rl:short:aaa:2025-01-01-00-00"]
        assert entries[0].value == "2"
        assert entries[0].scope == "short"

    def test_list_live_treats_underscore_literally(self, sqlite_store):
        sqlite_store.put("rl_x", 1, 660)
        sqlite_store.put("rlax", 1, 660)
        assert [e.key for e in sqlite_store.list_live(prefix="rl_")] == ["rl_x"]

    def test_missing_table_raises_store_error(self, tmp_path):
        path = tmp_path / "uninitialized.db"
        store = SqliteCounterStore(path)
        try:
            with pytest.raises(CounterStoreError):
                store.get("k")
            with pytest.raises(CounterStoreError):
                store.put("k", 1, 60)
        finally:
            close_connection(path)

    def test_storage_settings_reach_the_connection(self, tmp_path):
        path = tmp_path / "tuned.db"
        storage = StorageSettings(journal_mode="DELETE", busy_timeout_ms=1234)
        store = SqliteCounterStore(path, storage=storage)
        try:
            # First use opens the connection, before the table exists
            with pytest.raises(CounterStoreError):
                store.get("k")
            conn = get_connection(path)
            assert conn.execute("PRAGMA journal_mode").fetchone()[0] == "delete"
            assert conn.execute("PRAGMA busy_timeout").fetchone()[0] == 1234

            initialize_database(path)
            store.put("k", 1, 60)
            assert store.get("k") == 1
        finally:
            close_connection(path)


class TestInMemoryCounterStore:
    def test_round_trip_and_expiry(self, clock):
        store = InMemoryCounterStore(clock=clock)
        store.put("k", 4, 10)
        assert store.get("k") == 4
        clock.now += 10
        assert store.get("k") is None

    def test_missing_key(self, memory_store):
        assert memory_store.get("nope") is None
