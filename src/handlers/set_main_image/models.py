"""Pydantic models for changing a pet's main image."""

from pydantic import BaseModel, ConfigDict, Field


class SetMainImageRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    object_key: str = Field(..., min_length=1, description="Key of an image in the gallery")
