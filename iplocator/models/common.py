from typing import Any

from pydantic import BaseModel, ConfigDict, field_validator


class GeolocationData(BaseModel):
    """Normalized geolocation data returned by a geolocation provider.

    Every field is a plain string. Fields the provider leaves out (or sends as
    null) become empty strings, while values of the wrong type are rejected so
    that a schema mismatch surfaces as a validation error.
    """

    model_config = ConfigDict(frozen=True, extra="ignore")

    ip: str = ""
    country: str = ""
    region: str = ""
    city: str = ""
    postal: str = ""
    timezone: str = ""

    @field_validator("*", mode="before")
    @classmethod
    def _null_to_empty(cls, value: Any) -> Any:
        return "" if value is None else value
