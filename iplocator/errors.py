class AppError(Exception):
    """Base application error for the client IP locator service."""


class InvalidRangeTableError(AppError):
    """Raised when the private network table contains an unparseable CIDR literal."""


class AddressResolutionError(AppError):
    """Base error for failures while determining the client's IP address."""


class NoValidAddressError(AddressResolutionError):
    """Raised when neither the proxy header nor the peer address yield a valid IP."""


class MalformedRemoteAddressError(AddressResolutionError):
    """Raised when the peer address is not in host:port form."""


class ExternalLookupFailedError(AddressResolutionError):
    """Raised when the public IP of a privately addressed caller could not be obtained."""


class GeolocationServiceError(AppError):
    """Base error for geolocation provider failures."""


class ExternalServiceUnreachableError(GeolocationServiceError):
    """Raised when the geolocation provider cannot be reached."""


class ExternalServiceBadResponseError(GeolocationServiceError):
    """Raised when the geolocation provider returns an unusable payload."""
