"""Shared CLI dependency helpers."""

from __future__ import annotations

from functools import lru_cache

from dataservice.config import AppSettings
from dataservice.persistence import KeyValueStore, create_store


@lru_cache(maxsize=1)
def get_settings() -> AppSettings:
    """Return cached settings for CLI commands."""

    return AppSettings.from_env()


@lru_cache(maxsize=1)
def get_store() -> KeyValueStore:
    """Return a cached store built from the CLI settings."""

    return create_store(get_settings())


def reset_cli_state() -> None:
    """Clear cached settings and store (useful for tests)."""

    get_store.cache_clear()
    get_settings.cache_clear()
