"""Pydantic models for multi-file image upload request/response."""

from typing import Any

from pydantic import BaseModel, ConfigDict, Field

from core.utils.constants import DEFAULT_FOLDER, FOLDER_PATTERN, MAX_BATCH_FILES, OWNER_ID_PATTERN


class BatchFile(BaseModel):
    """One file of a batch. Content is checked per file, not per request."""

    model_config = ConfigDict(str_strip_whitespace=True)

    file: str = Field(..., min_length=1, description="Base64 encoded image file")
    original_name: str = Field(..., min_length=1, max_length=255)


class BatchUploadRequest(BaseModel):
    """Validation model for batch upload request."""

    model_config = ConfigDict(str_strip_whitespace=True)

    files: list[BatchFile] = Field(..., min_length=1, max_length=MAX_BATCH_FILES)
    folder: str = Field(DEFAULT_FOLDER, max_length=100, pattern=FOLDER_PATTERN)
    pet_id: str | None = Field(
        None,
        min_length=1,
        max_length=100,
        pattern=OWNER_ID_PATTERN,
        description="Attach successes to this pet's gallery",
    )


class BatchUploadResponse(BaseModel):
    """Response model for batch upload; every file is in exactly one list."""

    message: str
    succeeded: list[dict[str, Any]]
    failed: list[dict[str, Any]]
    total: int
    pet: dict[str, Any] | None = None
