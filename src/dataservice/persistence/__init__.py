"""Persistence layer public exports."""

from .adapter import ABSENT, PersistenceAdapter, decode_record
from .errors import StoreError, StoreReadError, StoreWriteError
from .factory import create_store
from .interfaces import KeyValueStore
from .memory import InMemoryKeyValueStore
from .sqlite import SQLiteKeyValueStore, create_sqlite_store

__all__ = [
    "ABSENT",
    "InMemoryKeyValueStore",
    "KeyValueStore",
    "PersistenceAdapter",
    "SQLiteKeyValueStore",
    "StoreError",
    "StoreReadError",
    "StoreWriteError",
    "create_sqlite_store",
    "create_store",
    "decode_record",
]
