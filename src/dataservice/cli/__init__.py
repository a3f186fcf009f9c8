"""Command-line administration of persisted service payloads."""

from .app import app

__all__ = ["app"]
