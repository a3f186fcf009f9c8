"""Configuration and persisted record models."""

from __future__ import annotations

from datetime import datetime
from typing import Any

from pydantic import Field

from dataservice.utils.time import utc_now

from .base import DomainModel
from .enums import CacheMode


class ServiceConfig(DomainModel):
    """Per-service options recognised at construction time."""

    cache_key: str | None = Field(default=None, min_length=1)
    cache_mode: CacheMode = CacheMode.NONE


class CacheRecord(DomainModel):
    """Envelope written to the key-value store for one service payload."""

    key: str
    mode: CacheMode
    stored_at: datetime = Field(default_factory=utc_now)
    payload: Any = None


__all__ = ["CacheRecord", "ServiceConfig"]
