"""Pydantic models for image upload request/response."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator

from core.utils.constants import DEFAULT_FOLDER, FOLDER_PATTERN, OWNER_ID_PATTERN
from core.utils.validators import check_image_name, check_image_payload


class ImageUploadRequest(BaseModel):
    """Validation model for image upload request."""

    model_config = ConfigDict(str_strip_whitespace=True)

    file: str = Field(..., description="Base64 encoded image file")
    original_name: str = Field(
        ..., min_length=1, max_length=255, description="Original file name"
    )
    folder: str = Field(
        DEFAULT_FOLDER,
        max_length=100,
        pattern=FOLDER_PATTERN,
        description="Logical folder for the object key",
    )
    pet_id: str | None = Field(
        None,
        min_length=1,
        max_length=100,
        pattern=OWNER_ID_PATTERN,
        description="Owning pet, if already known",
    )

    @field_validator("original_name")
    @classmethod
    def validate_original_name(cls, value: str) -> str:
        return check_image_name(value)

    @field_validator("file")
    @classmethod
    def validate_file(cls, value: str) -> str:
        return check_image_payload(value)


class ImageUploadResponse(BaseModel):
    """Response model for successful image upload."""

    message: str = Field(..., description="Success message")
    image: dict[str, Any] = Field(..., description="Descriptor of the uploaded image")
