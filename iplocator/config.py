import os
from enum import Enum

from pydantic import BaseModel, Field


class Provider(str, Enum):
    """Supported IP geolocation providers."""

    ipinfo_io = "ipinfo.io"
    ipapi_co = "ipapi.co"


class Settings(BaseModel):
    """Process-wide settings, read once from the environment at startup."""

    log_level: str = "INFO"
    provider: Provider = Provider.ipinfo_io
    timeout_seconds: float = Field(default=5.0, gt=0)
    host: str = "0.0.0.0"
    port: int = Field(default=8080, ge=1, le=65535)

    @classmethod
    def from_env(cls) -> "Settings":
        """Build settings from environment variables, falling back to defaults."""
        env = {
            "log_level": os.getenv("LOG_LEVEL"),
            "provider": os.getenv("GEOLOCATION_PROVIDER"),
            "timeout_seconds": os.getenv("GEOLOCATION_TIMEOUT_SECONDS"),
            "host": os.getenv("APP_HOST"),
            "port": os.getenv("APP_PORT"),
        }
        return cls(**{key: value for key, value in env.items() if value is not None})


settings = Settings.from_env()
