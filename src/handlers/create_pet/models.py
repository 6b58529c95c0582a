"""Pydantic models for pet creation."""

from typing import Any

from pydantic import BaseModel

from core.models.requests import ImagePayload, PetFields


class CreatePetRequest(PetFields):
    """Pet fields plus an optional first image."""

    image: ImagePayload | None = None

    def pet_fields(self) -> dict[str, Any]:
        return self.model_dump(exclude={"image"})


class PetResponse(BaseModel):
    message: str
    pet: dict[str, Any]
