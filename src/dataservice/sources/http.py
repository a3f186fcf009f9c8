"""Data service fetching a JSON document over HTTP."""

from __future__ import annotations

from collections.abc import AsyncIterator, Mapping
from contextlib import asynccontextmanager
from typing import Any, TypeVar

import httpx
from pydantic import TypeAdapter, ValidationError

from dataservice.domain import ServiceConfig
from dataservice.exceptions import FetchError
from dataservice.persistence import KeyValueStore
from dataservice.registry import ServiceRegistry
from dataservice.service import DataService

T = TypeVar("T")


class HttpJsonService(DataService[T]):
    """Loads its payload from a JSON endpoint.

    The decoded body goes through :meth:`transform`, which by default validates
    it against the service's payload type. Transport errors, non-2xx statuses,
    undecodable bodies and validation failures are raised as :class:`FetchError`.
    """

    def __init__(
        self,
        url: str,
        default_data: T = None,  # type: ignore[assignment]
        config: ServiceConfig | None = None,
        *,
        params: Mapping[str, Any] | None = None,
        headers: Mapping[str, str] | None = None,
        client: httpx.AsyncClient | None = None,
        timeout: float = 30.0,
        store: KeyValueStore | None = None,
        registry: ServiceRegistry | None = None,
        data_type: Any = None,
    ) -> None:
        self._url = url
        self._params = dict(params or {})
        self._headers = dict(headers or {})
        self._client = client
        self._timeout = timeout
        super().__init__(
            default_data,
            config,
            store=store,
            registry=registry,
            data_type=data_type,
        )
        self._type_adapter: TypeAdapter[T] = TypeAdapter(self.payload_type)

    @property
    def url(self) -> str:
        return self._url

    async def fetch_data(self) -> T:
        async with self._client_scope() as client:
            payload = await self._request(client)
        return self.transform(payload)

    def transform(self, payload: Any) -> T:
        """Turn the decoded JSON body into the payload."""

        try:
            return self._type_adapter.validate_python(payload)
        except ValidationError as exc:
            msg = f"Response from {self._url} does not match the expected payload"
            raise FetchError(msg) from exc

    async def _request(self, client: httpx.AsyncClient) -> Any:
        try:
            response = await client.get(self._url, params=self._params, headers=self._headers)
            response.raise_for_status()
            return response.json()
        except httpx.HTTPStatusError as exc:
            msg = f"Request to {self._url} failed with status {exc.response.status_code}"
            raise FetchError(msg) from exc
        except httpx.HTTPError as exc:
            msg = f"Request to {self._url} failed"
            raise FetchError(msg) from exc
        except ValueError as exc:
            msg = f"Response from {self._url} is not valid JSON"
            raise FetchError(msg) from exc

    @asynccontextmanager
    async def _client_scope(self) -> AsyncIterator[httpx.AsyncClient]:
        if self._client is not None:
            yield self._client
            return
        async with httpx.AsyncClient(timeout=self._timeout) as client:
            yield client


__all__ = ["HttpJsonService"]
