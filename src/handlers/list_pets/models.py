"""Pydantic models for pet listings."""

from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field

from core.utils.constants import DEFAULT_PET_LIST_LIMIT, MAX_PET_LIST_LIMIT


class ListPetsRequest(BaseModel):
    """Query string of the listing routes."""

    model_config = ConfigDict(str_strip_whitespace=True, populate_by_name=True)

    pet_type: str | None = Field(None, alias="type", min_length=1, max_length=50)
    featured: bool | None = None
    sort: Literal["newest", "oldest", "priceHigh", "priceLow"] | None = None
    limit: int = Field(DEFAULT_PET_LIST_LIMIT, ge=1, le=MAX_PET_LIST_LIMIT)


class ListPetsResponse(BaseModel):
    pets: list[dict[str, Any]]
    count: int
