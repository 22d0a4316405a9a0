from ipaddress import IPv6Address, ip_address

from iplocator.clients.base import BaseGeolocationClient
from iplocator.errors import (
    ExternalLookupFailedError,
    ExternalServiceBadResponseError,
    GeolocationServiceError,
    MalformedRemoteAddressError,
    NoValidAddressError,
)
from iplocator.logger import logger
from iplocator.networks import IPAddress, PrivateRangeClassifier, private_range_classifier


def parse_address(value: str) -> IPAddress | None:
    """Parse an IPv4 or IPv6 literal, returning None when it is not one.

    The text must be the bare literal: surrounding whitespace and IPv6 zone
    identifiers (e.g. "fe80::1%eth0") are rejected.
    """
    try:
        address = ip_address(value)
    except ValueError:
        return None
    if isinstance(address, IPv6Address) and address.scope_id is not None:
        return None
    return address


def split_host_port(address: str) -> tuple[str, str]:
    """Split a network address of the form "host:port" or "[host]:port".

    A literal IPv6 host must be enclosed in square brackets. Raises
    MalformedRemoteAddressError when the address has no port, too many
    colons, or unbalanced brackets.
    """
    last_colon = address.rfind(":")
    if last_colon < 0:
        raise MalformedRemoteAddressError(f"address {address}: missing port in address")

    port = address[last_colon + 1 :]
    if address.startswith("["):
        closing = address.find("]")
        if closing < 0:
            raise MalformedRemoteAddressError(f"address {address}: missing ']' in address")
        # The closing bracket must be immediately followed by the port separator.
        if closing + 1 != last_colon:
            if closing + 1 == len(address):
                raise MalformedRemoteAddressError(f"address {address}: missing port in address")
            raise MalformedRemoteAddressError(f"address {address}: unexpected characters after ']'")
        host = address[1:closing]
        if "[" in host or "]" in port or "[" in port:
            raise MalformedRemoteAddressError(f"address {address}: unexpected bracket in address")
        return host, port

    host = address[:last_colon]
    if ":" in host:
        raise MalformedRemoteAddressError(f"address {address}: too many colons in address")
    if "[" in host or "]" in host or "[" in port or "]" in port:
        raise MalformedRemoteAddressError(f"address {address}: unexpected bracket in address")
    return host, port


class ExternalAddressGateway:
    """Asks the geolocation provider which public IP this service is seen from.

    Used when a caller reaches the service over a private network, in which case
    the caller and this service share the same public address.
    """

    def __init__(self, client: BaseGeolocationClient) -> None:
        self._client = client

    async def current_public_address(self) -> str:
        """Return the provider-reported address, validated but in the provider's own notation."""
        data = await self._client.lookup_client_ip()
        if parse_address(data.ip) is None:
            raise ExternalServiceBadResponseError(
                f"Geolocation service returned an invalid IP address: {data.ip!r}"
            )
        return data.ip


class ClientAddressResolver:
    """Determines the best guess of a caller's public IP address.

    Resolution order:
    1. The first entry of the X-Forwarded-For header that is a valid IP literal.
       These entries are trusted as-is, proxies are expected to report public
       addresses.
    2. The peer address of the connection. If it belongs to a private range,
       the public address reported by the external gateway is used instead.

    The returned value is always a validated IP literal, kept exactly as it was
    written by its source.
    """

    def __init__(
        self,
        gateway: ExternalAddressGateway,
        classifier: PrivateRangeClassifier = private_range_classifier,
    ) -> None:
        self._gateway = gateway
        self._classifier = classifier

    async def resolve(self, forwarded_for: str, remote_addr: str) -> str:
        # Entries are not stripped: "a, b" only ever yields "a".
        for candidate in forwarded_for.split(","):
            if parse_address(candidate) is not None:
                return candidate

        host, _ = split_host_port(remote_addr)
        address = parse_address(host)
        if address is None:
            raise NoValidAddressError("a valid IP address was not found")

        if not self._classifier.is_private(address):
            return host

        logger.info(f"Peer address is private, looking up external address peer={host}")
        try:
            return await self._gateway.current_public_address()
        except GeolocationServiceError as exc:
            raise ExternalLookupFailedError(f"Failed to determine external IP address: {exc}") from exc
