"""
Pydantic models for list images request and response.
"""

from pydantic import BaseModel, ConfigDict, Field

from core.models.image import StoredObject
from core.utils.constants import DEFAULT_LIST_LIMIT, MAX_LIST_LIMIT, MIN_LIST_LIMIT


class ListImagesRequest(BaseModel):
    """Validation model for list images API."""

    model_config = ConfigDict(str_strip_whitespace=True)

    folder: str = Field(
        "",
        max_length=200,
        description="Key prefix to list under; empty lists the whole bucket",
    )
    limit: int = Field(
        default=DEFAULT_LIST_LIMIT,
        ge=MIN_LIST_LIMIT,
        le=MAX_LIST_LIMIT,
        description="Maximum number of objects (1-1000)",
    )


class ListImagesResponse(BaseModel):
    images: list[StoredObject]
    count: int
