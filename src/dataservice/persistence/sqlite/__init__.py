"""SQLite persistence implementation."""

from .store import SQLiteKeyValueStore, create_sqlite_store

__all__ = ["SQLiteKeyValueStore", "create_sqlite_store"]
