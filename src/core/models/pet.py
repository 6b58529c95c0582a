"""Pet record model holding the image gallery."""

from decimal import Decimal
from typing import Any, Literal

from pydantic import BaseModel, ConfigDict, Field, StrictStr, field_validator, model_validator
from pydantic.alias_generators import to_camel

from core.models.image import ImageDescriptor
from core.utils.constants import MAX_RATING, MAX_RATING_COMMENT_LENGTH, MIN_RATING
from core.utils.time import utc_now_iso

VoteType = Literal["up", "down"]

_CAMEL_CONFIG = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="ignore")


def normalize_main_flags(images: list[ImageDescriptor]) -> list[ImageDescriptor]:
    """Return images with exactly one main descriptor (none if empty).

    The first descriptor already flagged as main keeps the flag; when no
    descriptor is flagged the first one is promoted.
    """
    if not images:
        return []

    main_index = next((i for i, image in enumerate(images) if image.is_main), 0)

    normalized: list[ImageDescriptor] = []
    for index, image in enumerate(images):
        should_be_main = index == main_index
        if image.is_main != should_be_main:
            image = image.model_copy(update={"is_main": should_be_main})
        normalized.append(image)

    return normalized


class VoteTally(BaseModel):
    model_config = _CAMEL_CONFIG

    up: int = Field(0, ge=0)
    down: int = Field(0, ge=0)


class UserVote(BaseModel):
    model_config = _CAMEL_CONFIG

    user_id: StrictStr
    vote_type: VoteType
    voted_at: StrictStr


class PetRating(BaseModel):
    model_config = _CAMEL_CONFIG

    user_id: StrictStr
    rating: int = Field(..., ge=MIN_RATING, le=MAX_RATING)
    comment: str = Field("", max_length=MAX_RATING_COMMENT_LENGTH)
    created_at: StrictStr
    updated_at: StrictStr | None = None


class Pet(BaseModel):
    """Pet listing as stored in the pets table."""

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        extra="ignore",
    )

    pet_id: StrictStr = Field(..., min_length=1)
    name: StrictStr = Field(..., min_length=1, max_length=100)
    pet_type: StrictStr = Field(..., alias="type", min_length=1, max_length=50)
    breed: StrictStr = Field(..., min_length=1, max_length=100)
    age: int = Field(..., ge=0)
    price: Decimal = Field(..., ge=0)
    description: StrictStr = Field(..., max_length=2000)
    created_by: StrictStr | None = None

    images: list[ImageDescriptor] = Field(default_factory=list)
    legacy_image_url: str | None = Field(None, description="Mirror of the main image public URL")

    featured: bool = False
    votes: VoteTally = Field(default_factory=VoteTally)
    user_votes: list[UserVote] = Field(default_factory=list)
    ratings: list[PetRating] = Field(default_factory=list)

    created_at: StrictStr | None = None
    updated_at: StrictStr | None = None

    @field_validator("pet_type")
    @classmethod
    def _lower_case_type(cls, value: str) -> str:
        return value.lower()

    @model_validator(mode="after")
    def _enforce_single_main(self) -> "Pet":
        self.images = normalize_main_flags(self.images)
        self.refresh_legacy_image_url()
        return self

    @property
    def main_image(self) -> ImageDescriptor | None:
        return next((image for image in self.images if image.is_main), None)

    def refresh_legacy_image_url(self) -> None:
        """Re-derive the legacy single image URL from the main descriptor."""
        main = self.main_image
        self.legacy_image_url = main.public_url if main else None

    def find_image_index(self, object_key: str) -> int | None:
        for index, image in enumerate(self.images):
            if image.object_key == object_key:
                return index
        return None

    @property
    def average_rating(self) -> float:
        if not self.ratings:
            return 0.0
        return round(sum(r.rating for r in self.ratings) / len(self.ratings), 1)

    def user_vote(self, user_id: str) -> str | None:
        return next((v.vote_type for v in self.user_votes if v.user_id == user_id), None)

    def record_vote(self, user_id: str, vote_type: VoteType) -> str | None:
        """Apply a user's vote and return the vote they now hold.

        Repeating the same vote withdraws it; the opposite vote switches it.
        A user holds at most one vote per pet.
        """
        existing = next((v for v in self.user_votes if v.user_id == user_id), None)

        if existing is None:
            self._bump_vote(vote_type, 1)
            self.user_votes.append(UserVote(user_id=user_id, vote_type=vote_type, voted_at=utc_now_iso()))
            return vote_type

        self._bump_vote(existing.vote_type, -1)

        if existing.vote_type == vote_type:
            self.user_votes.remove(existing)
            return None

        self._bump_vote(vote_type, 1)
        existing.vote_type = vote_type
        existing.voted_at = utc_now_iso()
        return vote_type

    def _bump_vote(self, vote_type: str, delta: int) -> None:
        current = getattr(self.votes, vote_type)
        setattr(self.votes, vote_type, max(0, current + delta))

    def record_rating(self, user_id: str, rating: int, comment: str = "") -> bool:
        """Add or replace a user's rating. Returns True when one was replaced."""
        existing = next((r for r in self.ratings if r.user_id == user_id), None)

        if existing is None:
            self.ratings.append(
                PetRating(user_id=user_id, rating=rating, comment=comment, created_at=utc_now_iso())
            )
            return False

        existing.rating = rating
        existing.comment = comment
        existing.updated_at = utc_now_iso()
        return True

    def to_item(self) -> dict[str, Any]:
        """Serialize for DynamoDB (camelCase keys, Decimal numbers)."""
        return self.model_dump(by_alias=True)

    def to_response(self) -> dict[str, Any]:
        response = self.model_dump(by_alias=True, mode="json")
        response["averageRating"] = self.average_rating
        response["totalRatings"] = len(self.ratings)
        return response
