"""Domain models and enumerations."""

from .base import DomainModel
from .enums import CacheMode, ServiceState
from .models import CacheRecord, ServiceConfig
from .types import Unsubscribe

__all__ = [
    "CacheMode",
    "CacheRecord",
    "DomainModel",
    "ServiceConfig",
    "ServiceState",
    "Unsubscribe",
]
