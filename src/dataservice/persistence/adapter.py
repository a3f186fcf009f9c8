"""Typed persistence adapter translating service payloads to store entries."""

from __future__ import annotations

import logging
from enum import Enum, auto
from typing import Any, Generic, Literal, TypeVar

from pydantic import TypeAdapter, ValidationError
from pydantic_core import PydanticSerializationError

from dataservice.domain import CacheMode, CacheRecord

from .errors import StoreError, StoreWriteError
from .interfaces import KeyValueStore

T = TypeVar("T")

logger = logging.getLogger(__name__)


class _Absent(Enum):
    ABSENT = auto()


ABSENT: Literal[_Absent.ABSENT] = _Absent.ABSENT
"""Marker returned by :meth:`PersistenceAdapter.get` on a cache miss."""


def decode_record(raw: str) -> CacheRecord | None:
    """Parse a stored entry into a :class:`CacheRecord`, or ``None`` if malformed."""

    try:
        return CacheRecord.model_validate_json(raw)
    except ValidationError:
        return None


class PersistenceAdapter(Generic[T]):
    """Reads and writes payloads of one type through a :class:`KeyValueStore`.

    Reads fail soft: a missing entry, a store read failure, malformed JSON or a
    payload that no longer validates against the payload type are all reported
    as :data:`ABSENT`. Writes raise :class:`StoreWriteError`.

    Stores are expected to raise :class:`StoreError` subclasses. Any other
    exception a failing read raises counts as a miss, and one a failing write
    raises is wrapped into :class:`StoreWriteError`.
    """

    def __init__(self, store: KeyValueStore, payload_type: Any = Any) -> None:
        self._store = store
        self._type_adapter: TypeAdapter[T] = TypeAdapter(payload_type)

    @property
    def store(self) -> KeyValueStore:
        return self._store

    def get(self, key: str) -> T | Literal[_Absent.ABSENT]:
        try:
            raw = self._store.get(key)
        except Exception as exc:
            logger.warning("Cache read for %s failed: %s", key, exc)
            return ABSENT
        if raw is None:
            return ABSENT
        record = decode_record(raw)
        if record is None:
            logger.debug("Ignoring malformed cache entry for %s", key)
            return ABSENT
        try:
            return self._type_adapter.validate_python(record.payload)
        except ValidationError:
            logger.debug("Ignoring cache entry for %s with incompatible payload", key)
            return ABSENT

    def set(self, key: str, value: T, *, mode: CacheMode) -> None:
        try:
            payload = self._type_adapter.dump_python(value, mode="json")
            raw = CacheRecord(key=key, mode=mode, payload=payload).model_dump_json()
        except (PydanticSerializationError, ValueError) as exc:
            msg = f"Payload for {key} is not serializable"
            raise StoreWriteError(msg) from exc
        try:
            self._store.set(key, raw)
        except StoreError:
            raise
        except Exception as exc:
            msg = f"Unable to write cache entry {key}: {exc}"
            raise StoreWriteError(msg) from exc

    def remove(self, key: str) -> None:
        try:
            self._store.delete(key)
        except StoreError:
            raise
        except Exception as exc:
            msg = f"Unable to remove cache entry {key}: {exc}"
            raise StoreWriteError(msg) from exc


__all__ = ["ABSENT", "PersistenceAdapter", "decode_record"]
