"""dataservice: fetch-once, cache-forever, observable data containers.

A :class:`DataService` lazily fetches a typed payload, optionally persists it
in a key-value store, and multicasts every update to its subscribers.
:func:`reset_all` restores every constructed service to its default state.
"""

from .config import AppSettings
from .defaults import get_default_store, reset_default_store, set_default_store
from .domain import CacheMode, CacheRecord, ServiceConfig, ServiceState
from .exceptions import ConfigurationError, DataServiceError, FetchError
from .notifications import NotificationChannel
from .persistence import (
    InMemoryKeyValueStore,
    KeyValueStore,
    PersistenceAdapter,
    SQLiteKeyValueStore,
    StoreError,
)
from .registry import ServiceRegistry, register_service, reset_all
from .service import DataService
from .sources import FunctionDataService, HttpJsonService

__all__ = [
    "AppSettings",
    "CacheMode",
    "CacheRecord",
    "ConfigurationError",
    "DataService",
    "DataServiceError",
    "FetchError",
    "FunctionDataService",
    "HttpJsonService",
    "InMemoryKeyValueStore",
    "KeyValueStore",
    "NotificationChannel",
    "PersistenceAdapter",
    "SQLiteKeyValueStore",
    "ServiceConfig",
    "ServiceRegistry",
    "ServiceState",
    "StoreError",
    "get_default_store",
    "register_service",
    "reset_all",
    "reset_default_store",
    "set_default_store",
]

__version__ = "0.1.0"
