"""Data service exceptions."""

from __future__ import annotations


class DataServiceError(RuntimeError):
    """Base class for data service failures."""


class FetchError(DataServiceError):
    """Raised by a source when its payload could not be produced."""


class ConfigurationError(DataServiceError):
    """Raised when settings cannot be turned into a working configuration."""


__all__ = ["ConfigurationError", "DataServiceError", "FetchError"]
