from pydantic import BaseModel

from iplocator.models.common import GeolocationData


class HealthResponse(BaseModel):
    """Response model for the health check endpoint."""

    status: str


def render_location(data: GeolocationData) -> str:
    """Render the location block shown under the current IP address."""
    return (
        f"Country: {data.country}\n"
        f"State(region): {data.region}\n"
        f"City: {data.city}\n"
        f"Zip: {data.postal}\n"
        f"Time Zone: {data.timezone}"
    )


def render_ip_report(address: str, data: GeolocationData | None = None, error: Exception | None = None) -> str:
    """Render the plain-text body of the /ip endpoint for a resolved address.

    - With `data`, the location block follows the address line.
    - With `error`, the lookup failure message follows the address line instead.
    """
    body = f"Current IP Address: {address}"
    if error is not None:
        return f"{body}\nError while attempting to get location data: {error}"
    if data is not None:
        return f"{body}\n{render_location(data)}"
    return body
