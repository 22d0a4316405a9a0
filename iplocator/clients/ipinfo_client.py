from iplocator.clients.base import BaseGeolocationClient
from iplocator.models.common import GeolocationData


class IpInfo(BaseGeolocationClient):
    """Client for the http://ipinfo.io JSON API.

    ipinfo.io already answers with the `ip`, `country`, `region`, `city`,
    `postal` and `timezone` fields our normalized model uses, so the payload
    is validated as-is. Errors are reported through HTTP status codes, e.g.
    404 with `{"error": {"title": "Wrong ip", ...}}` for an invalid address.
    """

    def __init__(self, base_url: str = "http://ipinfo.io", timeout_seconds: float = 5.0) -> None:
        super().__init__(base_url, timeout_seconds)

    async def lookup_ip(self, ip: str | None) -> GeolocationData:
        """Look up geolocation information for an explicit IP address."""
        if ip is None:
            return await self.lookup_client_ip()
        url = f"{self._base_url}/{ip}"
        return await self._request(url)

    async def lookup_client_ip(self) -> GeolocationData:
        """Look up geolocation information for the calling IP."""
        url = f"{self._base_url}/json"
        return await self._request(url)
