"""Process-wide default store used by services that persist without an explicit store."""

from __future__ import annotations

from functools import lru_cache

from dataservice.config import AppSettings
from dataservice.persistence import KeyValueStore, create_store

_override: KeyValueStore | None = None


@lru_cache(maxsize=1)
def _store_from_env() -> KeyValueStore:
    return create_store(AppSettings.from_env())


def get_default_store() -> KeyValueStore:
    """Return the default store, building it from the environment on first use."""

    if _override is not None:
        return _override
    return _store_from_env()


def set_default_store(store: KeyValueStore) -> None:
    global _override
    _override = store


def reset_default_store() -> None:
    """Forget any configured or cached default store (useful for tests)."""

    global _override
    _override = None
    _store_from_env.cache_clear()


__all__ = ["get_default_store", "reset_default_store", "set_default_store"]
