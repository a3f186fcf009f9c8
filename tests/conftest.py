from __future__ import annotations

import sys
from collections.abc import Iterator
from pathlib import Path

import pytest

# Ensure the src/ directory is importable when tests run without an install.
sys.path.append(str(Path(__file__).resolve().parents[1] / "src"))

from dataservice import (  # noqa: E402
    InMemoryKeyValueStore,
    ServiceRegistry,
    reset_default_store,
    set_default_store,
)


@pytest.fixture(autouse=True)
def default_store() -> Iterator[InMemoryKeyValueStore]:
    """Give every test a fresh process default store."""

    store = InMemoryKeyValueStore()
    set_default_store(store)
    yield store
    reset_default_store()


@pytest.fixture
def store() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def service_registry() -> ServiceRegistry:
    return ServiceRegistry()
