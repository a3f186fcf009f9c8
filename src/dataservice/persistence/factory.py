"""Construction of key-value stores from application settings."""

from __future__ import annotations

from pathlib import Path

from dataservice.config import AppSettings
from dataservice.exceptions import ConfigurationError

from .interfaces import KeyValueStore
from .memory import InMemoryKeyValueStore
from .sqlite import create_sqlite_store


def _ensure_sqlite_directory(database_url: str) -> None:
    try:
        _, path = database_url.split(":///", maxsplit=1)
    except ValueError:
        return
    if not path or path == ":memory:":
        return
    db_path = Path(path).expanduser()
    db_path.parent.mkdir(parents=True, exist_ok=True)


def create_store(settings: AppSettings) -> KeyValueStore:
    """Build the store selected by ``settings.cache_url``.

    An empty URL yields a process-local in-memory store; ``sqlite`` URLs yield a
    durable SQLite store whose parent directory is created on demand.
    """

    url = settings.cache_url
    if not url:
        return InMemoryKeyValueStore()
    if not url.startswith("sqlite"):
        msg = f"Unsupported cache URL scheme: {url}"
        raise ConfigurationError(msg)
    _ensure_sqlite_directory(url)
    return create_sqlite_store(url)


__all__ = ["create_store"]
