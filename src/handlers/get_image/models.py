from typing import Any

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    StrictBool,
    StrictStr,
    field_validator,
)

from core.utils.constants import DEFAULT_SIGNED_URL_TTL_MINUTES, MAX_SIGNED_URL_TTL_MINUTES


class GetImageRequest(BaseModel):
    """Validation model for get image request."""

    model_config = ConfigDict(str_strip_whitespace=True)

    key: StrictStr = Field(
        ...,
        min_length=1,
        description="Object key to sign",
    )

    ttl_minutes: int = Field(
        default=DEFAULT_SIGNED_URL_TTL_MINUTES,
        ge=1,
        le=MAX_SIGNED_URL_TTL_MINUTES,
        description="Lifetime of the signed URL in minutes",
    )

    metadata: StrictBool = Field(
        default=False,
        description="Include stored object metadata in the response",
    )

    @field_validator("key")
    @classmethod
    def validate_key(cls, value: str) -> str:
        if value.startswith("/") or ".." in value.split("/"):
            raise ValueError("Invalid object key")
        return value


class GetImageResponse(BaseModel):
    key: str
    url: str
    expires_in_minutes: int
    metadata: dict[str, Any] | None = None
