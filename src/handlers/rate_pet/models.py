"""Pydantic models for pet ratings."""

from pydantic import BaseModel, ConfigDict, Field, StrictInt

from core.utils.constants import MAX_RATING, MAX_RATING_COMMENT_LENGTH, MIN_RATING


class RatePetRequest(BaseModel):
    model_config = ConfigDict(str_strip_whitespace=True)

    rating: StrictInt = Field(..., ge=MIN_RATING, le=MAX_RATING, description="Whole stars, 1-5")
    comment: str = Field("", max_length=MAX_RATING_COMMENT_LENGTH)
