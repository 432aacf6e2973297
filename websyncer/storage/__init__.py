from websyncer.storage.models import CounterEntry
from websyncer.storage.connection import get_connection, close_connection
from websyncer.storage.schema import initialize_database
from websyncer.storage.counter_store import (
    CounterStore,
    CounterStoreError,
    InMemoryCounterStore,
    SqliteCounterStore,
)

__all__ = [
    "CounterEntry",
    "get_connection",
    "close_connection",
    "initialize_database",
    "CounterStore",
    "CounterStoreError",
    "InMemoryCounterStore",
    "SqliteCounterStore",
]
