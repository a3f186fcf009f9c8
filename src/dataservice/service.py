"""Fetch-once observable data service with an optional persistent cache."""

from __future__ import annotations

import asyncio
import logging
from abc import ABC, abstractmethod
from collections.abc import Callable
from typing import Any, ClassVar, Generic, TypeVar, get_args, get_origin

from dataservice.defaults import get_default_store
from dataservice.domain import CacheMode, ServiceConfig, ServiceState, Unsubscribe
from dataservice.notifications import NotificationChannel, deliver
from dataservice.persistence import ABSENT, KeyValueStore, PersistenceAdapter, StoreError
from dataservice.registry import ServiceRegistry
from dataservice.registry import registry as global_registry
from dataservice.utils.cloning import clone

T = TypeVar("T")

logger = logging.getLogger(__name__)


def resolve_payload_type(cls: type) -> Any:
    """Return the payload type a service class was parameterised with.

    An explicit ``data_type`` class attribute wins; otherwise the first concrete
    argument given to a ``DataService[...]`` base in the MRO is used, falling back
    to ``Any``.
    """

    explicit = getattr(cls, "data_type", None)
    if explicit is not None:
        return explicit
    for klass in cls.__mro__:
        for base in klass.__dict__.get("__orig_bases__", ()):
            origin = get_origin(base)
            if not (isinstance(origin, type) and issubclass(origin, DataService)):
                continue
            args = get_args(base)
            if args and not isinstance(args[0], TypeVar):
                return args[0]
    return Any


class DataService(ABC, Generic[T]):
    """Holds one lazily fetched payload and publishes every update.

    Subclasses implement :meth:`fetch_data`. The payload is fetched at most once
    per lifecycle unless :meth:`force_fetch_data` is called, optionally
    persisted under :meth:`get_service_cache_key`, and pushed to subscribers
    attached with :meth:`attach_data_subs`.

    Concurrent fetch requests share a single in-flight task, so every caller
    observes the same result or exception.
    """

    data_type: ClassVar[Any] = None

    def __init__(
        self,
        default_data: T = None,  # type: ignore[assignment]
        config: ServiceConfig | None = None,
        *,
        store: KeyValueStore | None = None,
        registry: ServiceRegistry | None = None,
        data_type: Any = None,
    ) -> None:
        self._config = config or ServiceConfig()
        self._default_data = default_data
        self._data: T = clone(default_data)
        self._fetch_flag = False
        self._fetch_started_flag = False
        self._loaded_from_cache = False
        self._state = ServiceState.FRESH_DEFAULT
        self._channel: NotificationChannel[T] = NotificationChannel()
        self._inflight: asyncio.Task[T] | None = None
        self._generation = 0
        self._payload_type = (
            data_type if data_type is not None else resolve_payload_type(type(self))
        )
        self._cache_key = self.get_service_cache_key()
        self._adapter: PersistenceAdapter[T] | None = None
        if self.cache_mode.persists:
            self._adapter = PersistenceAdapter(store or get_default_store(), self._payload_type)
            self._hydrate(self._adapter)
        (registry if registry is not None else global_registry).register(self)

    # ------------------------------------------------------------------ accessors

    @property
    def data(self) -> T:
        """The current payload, as is."""

        return self._data

    @property
    def default_data(self) -> T:
        """A fresh copy of the default payload."""

        return clone(self._default_data)

    @property
    def fetch_flag(self) -> bool:
        return self._fetch_flag

    @property
    def fetch_started_flag(self) -> bool:
        return self._fetch_started_flag

    @property
    def loaded_from_cache(self) -> bool:
        return self._loaded_from_cache

    @property
    def state(self) -> ServiceState:
        return self._state

    @property
    def config(self) -> ServiceConfig:
        return self._config

    @property
    def cache_mode(self) -> CacheMode:
        return self._config.cache_mode

    @property
    def cache_key(self) -> str:
        return self._cache_key

    @property
    def payload_type(self) -> Any:
        return self._payload_type

    @property
    def subscriber_count(self) -> int:
        return self._channel.subscriber_count

    # ------------------------------------------------------------------ contract

    @abstractmethod
    async def fetch_data(self) -> T:
        """Produce a fresh payload from the underlying source."""

    def get_service_cache_key(self) -> str:
        """Return the configured cache key, or one derived from the concrete class."""

        if self._config.cache_key:
            return self._config.cache_key
        return self._default_cache_key()

    def _default_cache_key(self) -> str:
        cls = type(self)
        return f"{cls.__module__}.{cls.__qualname__}"

    # ------------------------------------------------------------------ operations

    async def get_data(self) -> T:
        """Return the payload, fetching it first if it has not been loaded."""

        if self._fetch_flag:
            return self._data
        return await self.force_fetch_data()

    async def force_fetch_data(self) -> T:
        """Fetch a new payload, joining a fetch that is already in flight."""

        return await asyncio.shield(self._start_fetch())

    def attach_data_subs(self, callback: Callable[[T], None]) -> Unsubscribe:
        """Subscribe ``callback`` to payload updates and return its unsubscribe handle.

        A service that has not started fetching delivers its cached payload (if
        one was loaded at construction) to the new subscriber and starts a
        background fetch. A loaded service replays its payload to the new
        subscriber. A fetch in flight will notify the subscriber when it settles.
        Starting a fetch requires a running event loop; without one
        ``RuntimeError`` is raised and nothing is subscribed.
        """

        if not self._fetch_started_flag:
            asyncio.get_running_loop()
        unsubscribe = self._channel.subscribe(callback)
        if not self._fetch_started_flag:
            if self._loaded_from_cache:
                deliver(callback, self._data)
            self._start_background_fetch()
        elif self._fetch_flag:
            deliver(callback, self._data)
        return unsubscribe

    def trigger_load(self) -> asyncio.Task[T] | None:
        """Start a background fetch unless one was already started or completed."""

        if self._fetch_started_flag or self._fetch_flag:
            return None
        return self._start_background_fetch()

    async def await_to_load(self) -> None:
        """Wait until a payload has been loaded. Does not start a fetch."""

        if self._fetch_flag:
            return
        loaded: asyncio.Future[None] = asyncio.get_running_loop().create_future()

        def _on_data(_: T) -> None:
            unsubscribe()
            if not loaded.done():
                loaded.set_result(None)

        unsubscribe = self._channel.subscribe(_on_data)
        try:
            await loaded
        finally:
            unsubscribe()

    def post_new_data(self, value: T) -> None:
        """Replace the payload with a copy of ``value`` without fetching."""

        copied = clone(value)
        self._data = copied
        self._fetch_flag = True
        self._fetch_started_flag = True
        self._transition(ServiceState.READY)
        self._channel.publish(copied)
        self._persist(copied)

    def reset(self) -> None:
        """Restore the default payload and forget any fetched or cached state."""

        self._generation += 1
        self._inflight = None
        self._data = clone(self._default_data)
        self._fetch_flag = False
        self._fetch_started_flag = False
        self._loaded_from_cache = False
        self._transition(ServiceState.FRESH_DEFAULT)
        if self._adapter is None:
            return
        try:
            self._adapter.remove(self._cache_key)
        except StoreError as exc:
            logger.warning("Unable to remove cached payload for %s: %s", self._cache_key, exc)

    # ------------------------------------------------------------------ internals

    def _hydrate(self, adapter: PersistenceAdapter[T]) -> None:
        cached = adapter.get(self._cache_key)
        if cached is ABSENT:
            logger.debug("No cached payload for %s", self._cache_key)
            return
        self._data = cached
        self._loaded_from_cache = True
        if self.cache_mode is CacheMode.FULL:
            self._fetch_flag = True
            self._fetch_started_flag = True
            self._transition(ServiceState.CACHE_READY)
        else:
            self._transition(ServiceState.CACHE_OPTIMISTIC)

    def _transition(self, state: ServiceState) -> None:
        if state is not self._state:
            logger.debug("%s: %s -> %s", self._cache_key, self._state.value, state.value)
        self._state = state

    def _start_fetch(self) -> asyncio.Task[T]:
        if self._inflight is None or self._inflight.done():
            task = asyncio.get_running_loop().create_task(self._run_fetch(self._generation))
            task.add_done_callback(self._on_fetch_settled)
            self._inflight = task
            self._transition(ServiceState.FETCHING)
        self._fetch_started_flag = True
        return self._inflight

    def _start_background_fetch(self) -> asyncio.Task[T]:
        task = self._start_fetch()
        task.add_done_callback(self._log_background_failure)
        return task

    async def _run_fetch(self, generation: int) -> T:
        try:
            result = await self.fetch_data()
        except (Exception, asyncio.CancelledError):
            self._release_inflight()
            if generation == self._generation:
                self._fetch_flag = False
                self._fetch_started_flag = False
                self._transition(ServiceState.FRESH_DEFAULT)
            raise
        # Subscribers woken by the publish below must be able to start a new fetch.
        self._release_inflight()
        if generation != self._generation:
            logger.debug("Discarding payload for %s fetched before a reset", self._cache_key)
            return result
        self._fetch_flag = True
        self._data = result
        self._transition(ServiceState.READY)
        self._channel.publish(result)
        self._persist(result)
        return result

    def _release_inflight(self) -> None:
        if self._inflight is not None and self._inflight is asyncio.current_task():
            self._inflight = None

    def _on_fetch_settled(self, task: asyncio.Task[T]) -> None:
        if self._inflight is task:
            self._inflight = None
        if not task.cancelled():
            # Mark the exception retrieved; callers awaiting the task still receive it.
            task.exception()

    def _log_background_failure(self, task: asyncio.Task[T]) -> None:
        if task.cancelled():
            return
        exc = task.exception()
        if exc is not None:
            logger.warning("Background fetch for %s failed: %s", self._cache_key, exc)

    def _persist(self, value: T) -> None:
        if self._adapter is None:
            return
        try:
            self._adapter.set(self._cache_key, value, mode=self.cache_mode)
        except StoreError as exc:
            logger.warning("Unable to persist payload for %s: %s", self._cache_key, exc)


__all__ = ["DataService", "resolve_payload_type"]
