from __future__ import annotations

import asyncio
import logging
from typing import Any

import pytest

from dataservice import (
    CacheMode,
    DataService,
    InMemoryKeyValueStore,
    PersistenceAdapter,
    ServiceConfig,
    ServiceRegistry,
    ServiceState,
)
from dataservice.persistence import ABSENT, StoreWriteError

DEFAULT_VALUE = -1
CACHE_KEY = "counter"


class CounterService(DataService[int]):
    def __init__(self, config: ServiceConfig | None = None, **kwargs: Any) -> None:
        self.calls = 0
        super().__init__(DEFAULT_VALUE, config, **kwargs)

    async def fetch_data(self) -> int:
        self.calls += 1
        return self.calls * 10


class OtherService(DataService[int]):
    async def fetch_data(self) -> int:
        return 0


class BrokenWriteStore(InMemoryKeyValueStore):
    def set(self, key: str, value: str) -> None:
        raise StoreWriteError("disk full")

    def delete(self, key: str) -> None:
        raise StoreWriteError("disk full")


class FailingDiskStore(InMemoryKeyValueStore):
    def get(self, key: str) -> str | None:
        raise OSError("read-only file system")

    def set(self, key: str, value: str) -> None:
        raise OSError("read-only file system")

    def delete(self, key: str) -> None:
        raise OSError("read-only file system")


def _config(mode: CacheMode) -> ServiceConfig:
    return ServiceConfig(cache_key=CACHE_KEY, cache_mode=mode)


def _seed(store: InMemoryKeyValueStore, value: int, mode: CacheMode) -> None:
    PersistenceAdapter(store, int).set(CACHE_KEY, value, mode=mode)


def _stored(store: InMemoryKeyValueStore) -> object:
    return PersistenceAdapter(store, int).get(CACHE_KEY)


def test_full_mode_serves_cache_without_fetching(
    store: InMemoryKeyValueStore, service_registry: ServiceRegistry
) -> None:
    _seed(store, 42, CacheMode.FULL)
    service = CounterService(_config(CacheMode.FULL), store=store, registry=service_registry)

    assert service.state is ServiceState.CACHE_READY
    assert service.loaded_from_cache is True
    assert service.fetch_flag is True
    assert service.fetch_started_flag is True
    assert asyncio.run(service.get_data()) == 42
    assert service.calls == 0


def test_full_mode_with_corrupted_entry_behaves_like_none(
    store: InMemoryKeyValueStore, service_registry: ServiceRegistry
) -> None:
    store.set(CACHE_KEY, "{not json")
    service = CounterService(_config(CacheMode.FULL), store=store, registry=service_registry)

    assert service.state is ServiceState.FRESH_DEFAULT
    assert service.loaded_from_cache is False
    assert service.data == DEFAULT_VALUE
    assert service.fetch_flag is False
    assert service.fetch_started_flag is False
    assert asyncio.run(service.get_data()) == 10
    assert service.calls == 1


def test_full_mode_with_incompatible_payload_is_a_miss(
    store: InMemoryKeyValueStore, service_registry: ServiceRegistry
) -> None:
    PersistenceAdapter(store).set(CACHE_KEY, {"unexpected": True}, mode=CacheMode.FULL)
    service = CounterService(_config(CacheMode.FULL), store=store, registry=service_registry)

    assert service.data == DEFAULT_VALUE
    assert service.loaded_from_cache is False


def test_boot_only_mode_delivers_cache_then_refresh(
    store: InMemoryKeyValueStore, service_registry: ServiceRegistry
) -> None:
    _seed(store, 42, CacheMode.BOOT_ONLY)
    service = CounterService(_config(CacheMode.BOOT_ONLY), store=store, registry=service_registry)

    assert service.state is ServiceState.CACHE_OPTIMISTIC
    assert service.data == 42
    assert service.loaded_from_cache is True
    assert service.fetch_flag is False
    assert service.fetch_started_flag is False

    received: list[int] = []

    async def _run() -> None:
        service.attach_data_subs(received.append)
        assert received == [42]
        await service.await_to_load()

    asyncio.run(_run())
    assert received == [42, 10]
    assert service.calls == 1
    assert _stored(store) == 10


def test_boot_only_get_data_always_refetches(
    store: InMemoryKeyValueStore, service_registry: ServiceRegistry
) -> None:
    _seed(store, 42, CacheMode.BOOT_ONLY)
    service = CounterService(_config(CacheMode.BOOT_ONLY), store=store, registry=service_registry)

    assert asyncio.run(service.get_data()) == 10
    assert service.calls == 1


def test_fetched_value_survives_restart(
    store: InMemoryKeyValueStore, service_registry: ServiceRegistry
) -> None:
    first = CounterService(_config(CacheMode.FULL), store=store, registry=service_registry)
    asyncio.run(first.get_data())
    assert _stored(store) == 10

    restarted = CounterService(
        _config(CacheMode.FULL), store=store, registry=ServiceRegistry()
    )
    assert asyncio.run(restarted.get_data()) == 10
    assert restarted.calls == 0


def test_none_mode_ignores_and_never_writes_store(
    store: InMemoryKeyValueStore, service_registry: ServiceRegistry
) -> None:
    _seed(store, 42, CacheMode.FULL)
    service = CounterService(_config(CacheMode.NONE), store=store, registry=service_registry)

    assert service.data == DEFAULT_VALUE
    asyncio.run(service.get_data())
    service.reset()
    assert _stored(store) == 42


def test_reset_removes_persisted_entry(
    store: InMemoryKeyValueStore, service_registry: ServiceRegistry
) -> None:
    service = CounterService(_config(CacheMode.FULL), store=store, registry=service_registry)
    asyncio.run(service.get_data())

    service.reset()

    assert _stored(store) is ABSENT
    assert service.loaded_from_cache is False
    assert service.data == DEFAULT_VALUE


def test_post_new_data_is_persisted(
    store: InMemoryKeyValueStore, service_registry: ServiceRegistry
) -> None:
    service = CounterService(_config(CacheMode.BOOT_ONLY), store=store, registry=service_registry)

    service.post_new_data(99)

    assert _stored(store) == 99


def test_persistence_failure_does_not_block_publish(
    service_registry: ServiceRegistry, caplog: pytest.LogCaptureFixture
) -> None:
    service = CounterService(
        _config(CacheMode.FULL), store=BrokenWriteStore(), registry=service_registry
    )
    received: list[int] = []
    service.post_new_data(5)
    service.attach_data_subs(received.append)

    with caplog.at_level(logging.WARNING, logger="dataservice.service"):
        assert asyncio.run(service.force_fetch_data()) == 10
        service.reset()

    assert received == [5, 10]
    assert service.data == DEFAULT_VALUE
    assert "disk full" in caplog.text


def test_unexpected_store_errors_do_not_fail_fetches(
    service_registry: ServiceRegistry, caplog: pytest.LogCaptureFixture
) -> None:
    with caplog.at_level(logging.WARNING):
        service = CounterService(
            _config(CacheMode.FULL), store=FailingDiskStore(), registry=service_registry
        )
        assert asyncio.run(service.force_fetch_data()) == 10
        service.reset()

    assert service.loaded_from_cache is False
    assert service.calls == 1
    assert service.data == DEFAULT_VALUE
    assert "read-only file system" in caplog.text


def test_default_store_is_used_without_explicit_store(
    default_store: InMemoryKeyValueStore, service_registry: ServiceRegistry
) -> None:
    service = CounterService(_config(CacheMode.FULL), registry=service_registry)
    asyncio.run(service.get_data())

    assert _stored(default_store) == 10


def test_cache_key_follows_concrete_class(service_registry: ServiceRegistry) -> None:
    first = CounterService(registry=service_registry)
    second = CounterService(registry=service_registry)
    other = OtherService(0, registry=service_registry)
    explicit = CounterService(ServiceConfig(cache_key="custom"), registry=service_registry)

    assert first.get_service_cache_key() == second.get_service_cache_key()
    assert first.get_service_cache_key() != other.get_service_cache_key()
    assert first.get_service_cache_key().endswith("CounterService")
    assert explicit.get_service_cache_key() == "custom"
    assert explicit.cache_key == "custom"


def test_cache_mode_accepts_string_values() -> None:
    config = ServiceConfig.model_validate({"cache_mode": "boot_only"})

    assert config.cache_mode is CacheMode.BOOT_ONLY
    assert config.cache_key is None
