"""Synchronous in-process multicast channel."""

from __future__ import annotations

import logging
from collections.abc import Callable
from dataclasses import dataclass
from typing import Generic, TypeVar

from dataservice.domain import Unsubscribe

T = TypeVar("T")

logger = logging.getLogger(__name__)


def deliver(callback: Callable[[T], None], value: T) -> None:
    """Invoke one subscriber, logging rather than propagating its failure."""

    try:
        callback(value)
    except Exception:
        logger.exception("Subscriber %r failed while handling a published value", callback)


@dataclass(eq=False, slots=True)
class _Subscription(Generic[T]):
    callback: Callable[[T], None]
    active: bool = True


class NotificationChannel(Generic[T]):
    """Delivers each published value to every current subscriber, in order.

    The channel keeps no history. A subscriber added while a value is being
    published does not receive that value; one removed during delivery is
    skipped if it has not been reached yet.
    """

    def __init__(self) -> None:
        self._subscriptions: list[_Subscription[T]] = []

    @property
    def subscriber_count(self) -> int:
        return len(self._subscriptions)

    def subscribe(self, callback: Callable[[T], None]) -> Unsubscribe:
        subscription = _Subscription(callback)
        self._subscriptions.append(subscription)

        def unsubscribe() -> None:
            if not subscription.active:
                return
            subscription.active = False
            self._subscriptions.remove(subscription)

        return unsubscribe

    def publish(self, value: T) -> None:
        for subscription in tuple(self._subscriptions):
            if subscription.active:
                deliver(subscription.callback, value)


__all__ = ["NotificationChannel", "deliver"]
