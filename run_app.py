import uvicorn

from iplocator.config import settings
from iplocator.logger import log_config


def main() -> None:
    """Run the FastAPI application with uvicorn."""
    uvicorn.run(
        "iplocator.main:app",
        host=settings.host,
        port=settings.port,
        log_config=log_config,
    )


if __name__ == "__main__":
    main()
