"""Shared utilities."""

from .cloning import clone
from .time import utc_now

__all__ = ["clone", "utc_now"]
