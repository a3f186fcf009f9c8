"""Ready-made data service sources."""

from .function import Fetcher, FunctionDataService
from .http import HttpJsonService

__all__ = ["Fetcher", "FunctionDataService", "HttpJsonService"]
