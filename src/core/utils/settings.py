"""Runtime configuration read from the Lambda environment."""

from pydantic import Field
from pydantic import ValidationError as PydanticValidationError
from pydantic_settings import BaseSettings, SettingsConfigDict

from core.utils.constants import (
    ENV_APP_RUNTIME,
    ENV_AWS_ENDPOINT_URL,
    ENV_AWS_REGION,
    ENV_IMAGE_S3_BUCKET_NAME,
    ENV_PETS_TABLE_NAME,
    ENV_PUBLIC_READ_UPLOADS,
    ENV_THUMBNAIL_MAX_HEIGHT,
    ENV_THUMBNAIL_MAX_WIDTH,
    ENV_THUMBNAILS_ENABLED,
    THUMBNAIL_MAX_HEIGHT,
    THUMBNAIL_MAX_WIDTH,
)


class StorageSettings(BaseSettings):
    """Object store and thumbnail settings.

    Each field is read from the environment variable named in its alias;
    keyword arguments by field name take precedence. Blank variables count
    as unset.
    """

    model_config = SettingsConfigDict(
        frozen=True,
        populate_by_name=True,
        env_ignore_empty=True,
        extra="ignore",
    )

    bucket_name: str = Field(..., min_length=1, validation_alias=ENV_IMAGE_S3_BUCKET_NAME)
    region: str | None = Field(None, validation_alias=ENV_AWS_REGION)
    endpoint_url: str | None = Field(None, validation_alias=ENV_AWS_ENDPOINT_URL)
    pets_table_name: str | None = Field(None, validation_alias=ENV_PETS_TABLE_NAME)
    public_read: bool = Field(True, validation_alias=ENV_PUBLIC_READ_UPLOADS)
    thumbnails_enabled: bool = Field(True, validation_alias=ENV_THUMBNAILS_ENABLED)
    thumbnail_max_width: int = Field(THUMBNAIL_MAX_WIDTH, gt=0, validation_alias=ENV_THUMBNAIL_MAX_WIDTH)
    thumbnail_max_height: int = Field(THUMBNAIL_MAX_HEIGHT, gt=0, validation_alias=ENV_THUMBNAIL_MAX_HEIGHT)
    runtime: str | None = Field(None, validation_alias=ENV_APP_RUNTIME)

    @property
    def is_localstack(self) -> bool:
        return self.runtime == "localstack"

    @classmethod
    def from_env(cls) -> "StorageSettings":
        """Build settings from environment variables.

        Raises:
            RuntimeError: If the bucket name is missing or a value is malformed
        """
        try:
            return cls()
        except PydanticValidationError as exc:
            fields = sorted({str(error["loc"][0]) for error in exc.errors() if error.get("loc")})
            raise RuntimeError(f"Invalid environment configuration: {', '.join(fields)}") from exc
