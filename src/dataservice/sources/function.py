"""Data service whose fetch capability is an injected coroutine function."""

from __future__ import annotations

from collections.abc import Awaitable, Callable
from typing import Any, TypeVar

from dataservice.domain import ServiceConfig
from dataservice.exceptions import ConfigurationError
from dataservice.persistence import KeyValueStore
from dataservice.registry import ServiceRegistry
from dataservice.service import DataService

T = TypeVar("T")

Fetcher = Callable[[], Awaitable[T]]


class FunctionDataService(DataService[T]):
    """Adapts an ``async def`` producing the payload into a :class:`DataService`.

    Without an explicit cache key, the key is derived from the fetcher's
    qualified name so services wrapping different functions never share an
    entry. Lambdas share one qualified name, so a persisting service built
    around one raises :class:`ConfigurationError` unless a key is configured.
    """

    def __init__(
        self,
        fetcher: Fetcher[T],
        default_data: T = None,  # type: ignore[assignment]
        config: ServiceConfig | None = None,
        *,
        store: KeyValueStore | None = None,
        registry: ServiceRegistry | None = None,
        data_type: Any = None,
    ) -> None:
        self._fetcher = fetcher
        super().__init__(
            default_data,
            config,
            store=store,
            registry=registry,
            data_type=data_type,
        )

    async def fetch_data(self) -> T:
        return await self._fetcher()

    def _default_cache_key(self) -> str:
        module = getattr(self._fetcher, "__module__", None) or type(self).__module__
        name = getattr(self._fetcher, "__qualname__", None) or type(self._fetcher).__qualname__
        if "<lambda>" in name and self.cache_mode.persists:
            msg = "A persisted service wrapping a lambda needs an explicit cache_key"
            raise ConfigurationError(msg)
        return f"{module}.{name}"


__all__ = ["Fetcher", "FunctionDataService"]
