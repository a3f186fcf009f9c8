"""Shared type aliases for the domain layer."""

from __future__ import annotations

from collections.abc import Callable

Unsubscribe = Callable[[], None]

__all__ = ["Unsubscribe"]
