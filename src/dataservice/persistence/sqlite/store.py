"""SQLite-backed key-value store."""

from __future__ import annotations

import threading
from collections.abc import Sequence

from sqlalchemy import Engine, create_engine, delete, select
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session, sessionmaker

from dataservice.persistence.errors import StoreReadError, StoreWriteError
from dataservice.persistence.interfaces import KeyValueStore
from dataservice.utils.time import utc_now

from .migrations import apply_migrations
from .models import CacheEntryRecord


class SQLiteKeyValueStore(KeyValueStore):
    """Durable store keeping one row per cache key.

    Every operation runs in its own short transaction so entries survive
    process restarts as soon as the call returns.
    """

    def __init__(
        self,
        engine: Engine,
        session_factory: sessionmaker[Session],
        database_url: str,
    ) -> None:
        self._engine = engine
        self._session_factory = session_factory
        self._database_url = database_url
        self._migration_lock = threading.Lock()
        self._migrated = False

    @property
    def database_url(self) -> str:
        return self._database_url

    def _ensure_migrated(self) -> None:
        with self._migration_lock:
            if self._migrated:
                return
            apply_migrations(self._engine)
            self._migrated = True

    def _session(self) -> Session:
        self._ensure_migrated()
        return self._session_factory()

    def get(self, key: str) -> str | None:
        try:
            with self._session() as session:
                record = session.get(CacheEntryRecord, key)
                return None if record is None else record.value
        except SQLAlchemyError as exc:
            msg = f"Unable to read cache entry {key}"
            raise StoreReadError(msg) from exc

    def set(self, key: str, value: str) -> None:
        try:
            with self._session() as session, session.begin():
                record = session.get(CacheEntryRecord, key)
                if record is None:
                    session.add(CacheEntryRecord(key=key, value=value, updated_at=utc_now()))
                else:
                    record.value = value
                    record.updated_at = utc_now()
        except SQLAlchemyError as exc:
            msg = f"Unable to write cache entry {key}"
            raise StoreWriteError(msg) from exc

    def delete(self, key: str) -> None:
        try:
            with self._session() as session, session.begin():
                session.execute(delete(CacheEntryRecord).where(CacheEntryRecord.key == key))
        except SQLAlchemyError as exc:
            msg = f"Unable to remove cache entry {key}"
            raise StoreWriteError(msg) from exc

    def keys(self) -> Sequence[str]:
        try:
            with self._session() as session:
                result = session.execute(select(CacheEntryRecord.key).order_by(CacheEntryRecord.key))
                return list(result.scalars().all())
        except SQLAlchemyError as exc:
            msg = "Unable to list cache entries"
            raise StoreReadError(msg) from exc

    def clear(self) -> None:
        try:
            with self._session() as session, session.begin():
                session.execute(delete(CacheEntryRecord))
        except SQLAlchemyError as exc:
            msg = "Unable to clear cache entries"
            raise StoreWriteError(msg) from exc


def create_sqlite_store(database_url: str) -> SQLiteKeyValueStore:
    engine = create_engine(database_url, future=True)
    session_factory = sessionmaker(engine, expire_on_commit=False)
    return SQLiteKeyValueStore(engine, session_factory, database_url)


__all__ = ["SQLiteKeyValueStore", "create_sqlite_store"]
