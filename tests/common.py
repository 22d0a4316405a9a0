from collections.abc import Callable
from http import HTTPStatus
from typing import Any

import httpx

from iplocator.clients.base import BaseGeolocationClient
from iplocator.models.common import GeolocationData


class MockResponse:
    def __init__(self, status_code: int, payload: Any = None, text: str = "") -> None:
        self.status_code = status_code
        self._payload = {} if payload is None else payload
        self.text = text

    def json(self) -> Any:
        return self._payload


class MockAsyncClient:
    """Minimal async context-manager mock for httpx.AsyncClient that records requested URLs."""

    def __init__(self, response: MockResponse, requested_urls: list[str] | None = None) -> None:
        self._response = response
        self.requested_urls = requested_urls if requested_urls is not None else []

    async def __aenter__(self) -> "MockAsyncClient":
        return self

    async def __aexit__(self, exc_type, exc, tb) -> None:
        return None

    async def get(self, url: str, **kwargs: Any) -> MockResponse:
        self.requested_urls.append(url)
        return self._response


class FailingAsyncClient:
    """Async client that raises a RequestError on enter to simulate network failure.

    The target URL is provided at construction time, so tests for different providers
    can reuse this implementation with different base URLs.
    """

    def __init__(self, url: str, *args: Any, **kwargs: Any) -> None:
        self._url = url

    async def __aenter__(self) -> "FailingAsyncClient":
        request = httpx.Request("GET", self._url)
        raise httpx.ConnectError("Network failure", request=request)

    async def __aexit__(self, exc_type, exc, tb) -> None:
        return None

    async def get(self, url: str, **kwargs: Any) -> MockResponse:
        return MockResponse(status_code=HTTPStatus.OK, payload={})


def make_fake_async_client(
    response: MockResponse, requested_urls: list[str] | None = None
) -> Callable[..., MockAsyncClient]:
    """Factory for a fake httpx.AsyncClient returning a fixed response.

    Pass a list as `requested_urls` to capture the URLs the client was asked for.
    """

    def _fake_client(*args: Any, **kwargs: Any) -> MockAsyncClient:
        return MockAsyncClient(response, requested_urls)

    return _fake_client


class StubGeolocationClient(BaseGeolocationClient):
    """Test double returning fixed data, or raising a configured exception."""

    def __init__(
        self,
        data: GeolocationData | None = None,
        client_ip_data: GeolocationData | None = None,
        exc: Exception | None = None,
    ) -> None:
        super().__init__("http://geolocation.invalid")
        self._data = data or GeolocationData()
        self._client_ip_data = client_ip_data or self._data
        self._exc = exc
        self.looked_up: list[str | None] = []
        self.client_ip_lookups = 0

    async def lookup_ip(self, ip: str | None) -> GeolocationData:
        self.looked_up.append(ip)
        if self._exc is not None:
            raise self._exc
        return self._data

    async def lookup_client_ip(self) -> GeolocationData:
        self.client_ip_lookups += 1
        if self._exc is not None:
            raise self._exc
        return self._client_ip_data
