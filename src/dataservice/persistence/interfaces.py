"""Persistence layer abstractions for durable key-value stores."""

from __future__ import annotations

from collections.abc import Sequence
from typing import Protocol, runtime_checkable


@runtime_checkable
class KeyValueStore(Protocol):
    """String-keyed text store backing persisted service payloads.

    ``get`` returns ``None`` for a missing key and ``delete`` is a no-op for a
    missing key. Implementations raise ``StoreError`` subclasses on I/O failure.
    """

    def get(self, key: str) -> str | None: ...

    def set(self, key: str, value: str) -> None: ...

    def delete(self, key: str) -> None: ...

    def keys(self) -> Sequence[str]: ...

    def clear(self) -> None: ...
