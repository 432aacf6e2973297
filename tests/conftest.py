"""
Shared test fixtures for the WebSyncer test suite.

Every storage test gets its own temporary SQLite file with the counter
schema initialized. Admission tests run against a fixed UTC clock so
bucket keys and retry hints are predictable.
"""

from __future__ import annotations

from datetime import datetime, timezone
from pathlib import Path

import pytest

from websyncer.admission.identity import ClientIdentity
from websyncer.storage.connection import close_connection, get_connection
from websyncer.storage.counter_store import InMemoryCounterStore, SqliteCounterStore
from websyncer.storage.schema import initialize_database

# 2025-03-14 15:42:30 UTC: inside the 15:40 short-term bucket
FIXED_NOW = datetime(2025, 3, 14, 15, 42, 30, tzinfo=timezone.utc)


@pytest.fixture
def db_path(tmp_path: Path) -> Path:
    """Provide a temporary SQLite database path."""
    return tmp_path / "test_websyncer.db"


@pytest.fixture
def db(db_path: Path):
    """Initialize the schema, yield the connection, then close it."""
    initialize_database(db_path)
    conn = get_connection(db_path)
    yield conn
    close_connection(db_path)


@pytest.fixture
def sqlite_store(db, db_path: Path) -> SqliteCounterStore:
    """Provide a SqliteCounterStore connected to the test database."""
    return SqliteCounterStore(db_path)


@pytest.fixture
def memory_store() -> InMemoryCounterStore:
    return InMemoryCounterStore()


@pytest.fixture
def fixed_clock():
    """A clock callable that always returns FIXED_NOW."""
    return lambda: FIXED_NOW


# ---------------------------------------------------------------------------
# Sample data factories
# ---------------------------------------------------------------------------


def make_identity(address: str = "203.0.113.7", **kwargs) -> ClientIdentity:
    """Create a ClientIdentity with browser-like defaults. Override any field via kwargs."""
    defaults = dict(
        address=address,
        user_agent="Mozilla/5.0 (X11; Linux x86_64)",
        accept_language="en-US,en;q=0.9",
        accept_encoding="gzip, deflate, br",
    )
    defaults.update(kwargs)
    return ClientIdentity(**defaults)
