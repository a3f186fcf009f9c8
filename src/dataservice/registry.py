"""Process-wide registry of constructed data services."""

from __future__ import annotations

import weakref
from dataclasses import dataclass, field
from typing import Protocol


class Resettable(Protocol):
    def reset(self) -> None: ...


@dataclass(slots=True)
class ServiceRegistry:
    """Append-only list of every registered service, held by weak reference."""

    _services: list[weakref.ref[Resettable]] = field(default_factory=list)

    def register(self, service: Resettable) -> None:
        self._services.append(weakref.ref(service))

    def services(self) -> tuple[Resettable, ...]:
        live = (ref() for ref in self._services)
        return tuple(service for service in live if service is not None)

    def reset_all(self) -> int:
        """Reset every live service in registration order and return how many were reset."""

        services = self.services()
        for service in services:
            service.reset()
        return len(services)

    def __len__(self) -> int:
        return len(self.services())


registry = ServiceRegistry()


def register_service(service: Resettable) -> None:
    """Register a service on the global registry."""

    registry.register(service)


def reset_all(target: ServiceRegistry | None = None) -> int:
    """Reset every service on ``target`` (the global registry by default)."""

    return (target if target is not None else registry).reset_all()


__all__ = ["Resettable", "ServiceRegistry", "register_service", "registry", "reset_all"]
