"""Pydantic models for delete image request/response."""

from pydantic import BaseModel, ConfigDict, Field


class DeleteImageRequest(BaseModel):
    """Validation model for delete image request."""

    model_config = ConfigDict(str_strip_whitespace=True)
    key: str = Field(
        ...,
        min_length=1,
        description="Object key to delete",
    )


class DeleteImageResponse(BaseModel):
    """Response model for successful image deletion."""

    key: str = Field(..., description="Deleted object key")
    message: str = Field(..., description="Success message")
    deleted_at: str = Field(..., description="Deletion timestamp")
