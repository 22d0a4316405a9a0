from typing import Annotated

from fastapi import Depends, FastAPI, Request, status
from fastapi.responses import PlainTextResponse

from iplocator.clients.base import BaseGeolocationClient
from iplocator.clients.ipapi_co_client import IpApiCo
from iplocator.clients.ipinfo_client import IpInfo
from iplocator.config import Provider, settings
from iplocator.errors import AddressResolutionError, GeolocationServiceError
from iplocator.exception_handlers import render_unexpected_errors
from iplocator.logger import logger
from iplocator.models.response_models import HealthResponse, render_ip_report
from iplocator.resolver import ClientAddressResolver, ExternalAddressGateway

app = FastAPI(
    title="Client IP Locator",
    version="0.1.0",
    description="Reports the caller's public IP address and coarse geolocation.",
)
logger.info(f"Started Client IP Locator provider={settings.provider.value}")


class GeolocationClientFactory:
    """Factory for geolocation provider clients.

    Given a Provider enum, returns a concrete client instance.
    """

    PROVIDERS_MAP: dict[Provider, type[BaseGeolocationClient]] = {
        Provider.ipinfo_io: IpInfo,
        Provider.ipapi_co: IpApiCo,
    }

    def __init__(self, timeout_seconds: float) -> None:
        self._timeout_seconds = timeout_seconds

    def __call__(self, provider: Provider) -> BaseGeolocationClient:
        client_cls = self.PROVIDERS_MAP[provider]
        return client_cls(timeout_seconds=self._timeout_seconds)


def get_geolocation_client() -> BaseGeolocationClient:
    """Dependency providing a client for the configured geolocation provider."""
    return GeolocationClientFactory(settings.timeout_seconds)(settings.provider)


def get_address_resolver(
    client: Annotated[BaseGeolocationClient, Depends(get_geolocation_client)],
) -> ClientAddressResolver:
    """Dependency providing a resolver backed by the same geolocation client."""
    return ClientAddressResolver(ExternalAddressGateway(client))


def format_remote_addr(request: Request) -> str:
    """Render the connection peer as "host:port", bracketing IPv6 hosts.

    An unknown peer is rendered as an empty string.
    """
    if request.client is None:
        return ""
    host, port = request.client.host, request.client.port
    if ":" in host:
        return f"[{host}]:{port}"
    return f"{host}:{port}"


app.middleware("http")(render_unexpected_errors)


@app.get(
    "/health",
    tags=["health"],
    response_model=HealthResponse,
    status_code=status.HTTP_200_OK,
    summary="Health check",
)
async def health() -> HealthResponse:
    """Basic health check endpoint."""
    return HealthResponse(status="ok")


@app.get(
    "/ip",
    response_class=PlainTextResponse,
    status_code=status.HTTP_200_OK,
    tags=["ip"],
    summary="Report the caller's public IP address and location.",
)
async def current_ip(
    request: Request,
    client: Annotated[BaseGeolocationClient, Depends(get_geolocation_client)],
    resolver: Annotated[ClientAddressResolver, Depends(get_address_resolver)],
) -> PlainTextResponse:
    """Report the caller's IP address followed by its geolocation.

    Failures never change the status code: they are described in the body.
    - If the address cannot be resolved, the body is the error message alone.
    - If the location lookup fails, the error follows the address line.
    """
    forwarded_for = request.headers.get("x-forwarded-for", "")
    remote_addr = format_remote_addr(request)
    logger.info(
        "Resolving client IP "
        f"path={request.url.path} method={request.method} "
        f"remote_addr={remote_addr} x_forwarded_for={forwarded_for}"
    )

    try:
        address = await resolver.resolve(forwarded_for, remote_addr)
    except AddressResolutionError as exc:
        logger.error(
            "Failed to resolve client IP "
            f"path={request.url.path} remote_addr={remote_addr} x_forwarded_for={forwarded_for} error={exc}"
        )
        return PlainTextResponse(str(exc))

    try:
        data = await client.lookup_ip(address)
    except GeolocationServiceError as exc:
        logger.error(f"Geolocation lookup failed path={request.url.path} ip={address} error={exc}")
        return PlainTextResponse(render_ip_report(address, error=exc))

    return PlainTextResponse(render_ip_report(address, data=data))
