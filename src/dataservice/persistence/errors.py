"""Custom persistence exceptions."""

from __future__ import annotations


class StoreError(RuntimeError):
    """Base class for key-value store failures."""


class StoreReadError(StoreError):
    """Raised when an entry could not be read from the store."""


class StoreWriteError(StoreError):
    """Raised when an entry could not be written to or removed from the store."""
