"""Enumerations shared by the data service layer."""

from __future__ import annotations

from enum import StrEnum


class CacheMode(StrEnum):
    """Policy deciding whether and how a persisted value is used at construction."""

    NONE = "none"
    BOOT_ONLY = "boot_only"
    FULL = "full"

    @property
    def persists(self) -> bool:
        return self is not CacheMode.NONE


class ServiceState(StrEnum):
    """Observable lifecycle state of a data service."""

    FRESH_DEFAULT = "fresh_default"
    CACHE_OPTIMISTIC = "cache_optimistic"
    CACHE_READY = "cache_ready"
    FETCHING = "fetching"
    READY = "ready"
