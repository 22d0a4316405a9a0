from collections.abc import Awaitable, Callable

from fastapi import Request, status
from fastapi.responses import PlainTextResponse, Response

from iplocator.logger import logger

UNEXPECTED_ERROR_MESSAGE = "An unexpected error occurred while processing the request."


async def unhandled_exception_handler(request: Request, exc: Exception) -> PlainTextResponse:
    """Catch-all handler for unexpected errors.

    The service reports every failure in the body of a 200 response, so
    unexpected errors get a generic plain-text message rather than a 500.
    """
    logger.exception(
        "Unhandled exception while processing request: "
        f"{repr(exc)} path={request.url.path} method={request.method}"
    )
    return PlainTextResponse(UNEXPECTED_ERROR_MESSAGE, status_code=status.HTTP_200_OK)


async def render_unexpected_errors(request: Request, call_next: Callable[[Request], Awaitable[Response]]) -> Response:
    """HTTP middleware rendering any exception that escapes a route as the catch-all response.

    The exception ends here and is not re-raised to the server.
    """
    try:
        return await call_next(request)
    except Exception as exc:
        return await unhandled_exception_handler(request, exc)
