"""Lightweight application configuration loader."""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass

from dataservice.exceptions import ConfigurationError


@dataclass(frozen=True)
class AppSettings:
    """Immutable configuration sourced from environment variables."""

    environment: str = "development"
    cache_url: str | None = None
    log_level: str = "WARNING"

    @classmethod
    def from_env(cls) -> AppSettings:
        return cls(
            environment=os.getenv("DATASERVICE_ENV", cls.environment),
            cache_url=os.getenv("DATASERVICE_CACHE_URL") or None,
            log_level=os.getenv("DATASERVICE_LOG_LEVEL", cls.log_level).strip().upper(),
        )

    def resolved_log_level(self) -> int:
        level = logging.getLevelName(self.log_level)
        if not isinstance(level, int):
            msg = f"Unknown log level {self.log_level!r}"
            raise ConfigurationError(msg)
        return level


__all__ = ["AppSettings"]
