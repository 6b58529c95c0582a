"""Pydantic models for pet updates."""

from decimal import Decimal
from typing import Any

from pydantic import BaseModel, ConfigDict, Field, field_validator, model_validator

from core.models.requests import ImagePayload


class UpdatePetRequest(BaseModel):
    """Partial update: only the fields sent are changed."""

    model_config = ConfigDict(str_strip_whitespace=True, populate_by_name=True)

    name: str | None = Field(None, min_length=1, max_length=100)
    pet_type: str | None = Field(None, alias="type", min_length=1, max_length=50)
    breed: str | None = Field(None, min_length=1, max_length=100)
    age: int | None = Field(None, ge=0, le=100)
    price: Decimal | None = Field(None, ge=0, max_digits=10, decimal_places=2)
    description: str | None = Field(None, max_length=2000)
    featured: bool | None = Field(None, description="Admin only")
    image: ImagePayload | None = Field(None, description="New image, becomes the main image")

    @field_validator("pet_type")
    @classmethod
    def lower_case_type(cls, value: str | None) -> str | None:
        return value.lower() if value else value

    @model_validator(mode="after")
    def require_change(self) -> "UpdatePetRequest":
        if not self.model_fields_set:
            raise ValueError("At least one field must be provided")
        return self

    def changes(self) -> dict[str, Any]:
        return self.model_dump(exclude={"image"}, exclude_unset=True, exclude_none=True)
