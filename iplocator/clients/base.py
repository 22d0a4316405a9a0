from abc import ABC, abstractmethod
from http import HTTPStatus
from typing import Any

import httpx
from pydantic import ValidationError

from iplocator.errors import ExternalServiceBadResponseError, ExternalServiceUnreachableError
from iplocator.models.common import GeolocationData


class BaseGeolocationClient(ABC):
    """Abstract base for all IP geolocation clients.

    Concrete implementations build provider-specific URLs and map the
    provider's payload into the normalized GeolocationData shape. The HTTP
    round trip and the translation of transport and decoding failures into
    domain errors are shared here.
    """

    def __init__(self, base_url: str, timeout_seconds: float = 5.0) -> None:
        self._base_url = base_url.rstrip("/")
        self._timeout_seconds = timeout_seconds

    @abstractmethod
    async def lookup_ip(self, ip: str | None) -> GeolocationData:
        """Look up geolocation information for an IP address, or for the caller when `ip` is None."""
        raise NotImplementedError

    @abstractmethod
    async def lookup_client_ip(self) -> GeolocationData:
        """Look up geolocation information for the IP the provider sees this service calling from."""
        raise NotImplementedError

    async def _request(self, url: str) -> GeolocationData:
        """Perform the HTTP request and normalize the response."""
        try:
            async with httpx.AsyncClient(timeout=self._timeout_seconds, follow_redirects=True) as client:
                response = await client.get(url, headers={"Accept": "application/json"})
        except httpx.RequestError as exc:
            raise ExternalServiceUnreachableError(f"Request to geolocation service failed: {repr(exc)}") from exc

        self._handle_http_errors(response)

        data = self._parse_json(response)
        self._handle_provider_error(data)

        try:
            return self._normalize_payload(data)
        except ValidationError as exc:
            raise ExternalServiceBadResponseError(
                f"Geolocation service response does not match the expected schema: {exc}"
            ) from exc

    def _handle_http_errors(self, response: httpx.Response) -> None:
        """Map non-successful HTTP status codes from the provider to domain errors."""
        status_code = response.status_code

        if status_code == HTTPStatus.TOO_MANY_REQUESTS:
            raise ExternalServiceBadResponseError("Geolocation service rate limit or quota exceeded (HTTP 429).")

        if status_code >= HTTPStatus.BAD_REQUEST:
            raise ExternalServiceBadResponseError(
                f"Geolocation service returned HTTP {status_code}: {response.text}"
            )

    def _handle_provider_error(self, data: dict[str, Any]) -> None:
        """Hook for providers that report errors inside a successful JSON body."""

    @staticmethod
    def _parse_json(response: httpx.Response) -> dict[str, Any]:
        try:
            data = response.json()
        except ValueError as exc:
            raise ExternalServiceBadResponseError(
                f"Failed to decode geolocation service response as JSON: {exc}"
            ) from exc

        if not isinstance(data, dict):
            raise ExternalServiceBadResponseError(
                f"Geolocation service returned a JSON {type(data).__name__}, expected an object."
            )
        return data

    @staticmethod
    def _normalize_payload(data: dict[str, Any]) -> GeolocationData:
        return GeolocationData.model_validate(data)
