"""In-memory key-value store for tests and non-durable processes."""

from __future__ import annotations

from collections.abc import Sequence
from dataclasses import dataclass, field

from .interfaces import KeyValueStore


@dataclass
class InMemoryKeyValueStore(KeyValueStore):
    _entries: dict[str, str] = field(default_factory=dict)

    def get(self, key: str) -> str | None:
        return self._entries.get(key)

    def set(self, key: str, value: str) -> None:
        self._entries[key] = value

    def delete(self, key: str) -> None:
        self._entries.pop(key, None)

    def keys(self) -> Sequence[str]:
        return sorted(self._entries)

    def clear(self) -> None:
        self._entries.clear()


__all__ = ["InMemoryKeyValueStore"]
