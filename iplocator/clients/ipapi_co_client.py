from typing import Any

from iplocator.clients.base import BaseGeolocationClient
from iplocator.errors import ExternalServiceBadResponseError
from iplocator.models.common import GeolocationData


class IpApiCo(BaseGeolocationClient):
    """Client for the https://ipapi.co/ IP geolocation API."""

    def __init__(self, base_url: str = "https://ipapi.co", timeout_seconds: float = 5.0) -> None:
        super().__init__(base_url, timeout_seconds)

    async def lookup_ip(self, ip: str | None) -> GeolocationData:
        """Look up geolocation information for an explicit IP address."""
        if ip is None:
            return await self.lookup_client_ip()
        url = f"{self._base_url}/{ip}/json/"
        return await self._request(url)

    async def lookup_client_ip(self) -> GeolocationData:
        """Look up geolocation information for the calling IP."""
        url = f"{self._base_url}/json/"
        return await self._request(url)

    def _handle_provider_error(self, data: dict[str, Any]) -> None:
        """Normalize ipapi.co error payloads into domain exceptions.

        ipapi.co embeds error information in the JSON body, sometimes with HTTP 200.
        Examples:
            { "error": true, "reason": "Invalid IP Address", "ip": "..." }
            { "error": true, "reason": "Reserved IP Address", "ip": "127.0.0.1", "reserved": true }
            { "error": true, "reason": "RateLimited", "message": "..." }
        """
        if not data.get("error"):
            return

        reason = str(data.get("reason") or data.get("message") or "Unknown error from ipapi.co")
        raise ExternalServiceBadResponseError(f"Geolocation service reported an error: {reason}")

    @staticmethod
    def _normalize_payload(data: dict[str, Any]) -> GeolocationData:
        """Map ipapi.co's response into our normalized schema.

        `country` holds the two-letter code, the same form ipinfo.io uses.
        """
        return GeolocationData(
            ip=data.get("ip"),
            country=data.get("country") or data.get("country_code"),
            region=data.get("region"),
            city=data.get("city"),
            postal=data.get("postal"),
            timezone=data.get("timezone"),
        )
