from collections.abc import Iterable
from ipaddress import IPv4Address, IPv4Network, IPv6Address, IPv6Network, ip_network

from iplocator.errors import InvalidRangeTableError

IPAddress = IPv4Address | IPv6Address

PRIVATE_CIDRS: tuple[str, ...] = (
    "127.0.0.0/8",  # IPv4 loopback
    "10.0.0.0/8",  # RFC1918
    "172.16.0.0/12",  # RFC1918
    "192.168.0.0/16",  # RFC1918
    "169.254.0.0/16",  # RFC3927 link-local
)


class PrivateRangeClassifier:
    """Decides whether an address belongs to a local, loopback or link-local network.

    The CIDR table is parsed once on construction and kept as an immutable tuple,
    so a single instance can be shared between concurrent requests.
    """

    def __init__(self, cidrs: Iterable[str] = PRIVATE_CIDRS) -> None:
        networks: list[IPv4Network | IPv6Network] = []
        for cidr in cidrs:
            try:
                networks.append(ip_network(cidr))
            except ValueError as exc:
                raise InvalidRangeTableError(f"Invalid private network range {cidr!r}: {exc}") from exc
        self._networks = tuple(networks)

    @property
    def networks(self) -> tuple[IPv4Network | IPv6Network, ...]:
        return self._networks

    def is_private(self, address: IPAddress) -> bool:
        """Return True if the address falls within any of the configured ranges.

        Ranges are tested in table order. IPv4-mapped IPv6 addresses are checked
        by their embedded IPv4 address.
        """
        if isinstance(address, IPv6Address) and address.ipv4_mapped is not None:
            address = address.ipv4_mapped

        return any(address in network for network in self._networks)


# Built at import time; a broken table stops the service before it starts listening.
private_range_classifier = PrivateRangeClassifier()
