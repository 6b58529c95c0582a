"""Pydantic models for adding an image to a pet."""

from pydantic import Field

from core.models.requests import ImagePayload


class AddPetImageRequest(ImagePayload):
    make_main: bool | None = Field(
        None,
        description="Make the new image the main image; the first image always is",
    )
