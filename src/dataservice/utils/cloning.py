"""Structural copies used at the service's defensive boundaries."""

from __future__ import annotations

from copy import deepcopy
from typing import TypeVar

T = TypeVar("T")


def clone(value: T) -> T:
    """Return a deep copy of ``value`` sharing no mutable state with it."""

    return deepcopy(value)


__all__ = ["clone"]
