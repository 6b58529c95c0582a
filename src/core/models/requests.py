"""Request payload models shared by the pet image handlers."""

from decimal import Decimal

from pydantic import BaseModel, ConfigDict, Field, field_validator

from core.models.image import UploadFile
from core.utils.validators import check_image_name, check_image_payload, decode_base64_file


class ImagePayload(BaseModel):
    """A base64 image embedded in a JSON request body."""

    model_config = ConfigDict(str_strip_whitespace=True)

    file: str = Field(..., description="Base64 encoded image file")
    original_name: str = Field(..., min_length=1, max_length=255)

    @field_validator("original_name")
    @classmethod
    def validate_original_name(cls, value: str) -> str:
        return check_image_name(value)

    @field_validator("file")
    @classmethod
    def validate_file(cls, value: str) -> str:
        return check_image_payload(value)

    def to_upload(self) -> UploadFile:
        return UploadFile(content=decode_base64_file(self.file), original_name=self.original_name)


class PetFields(BaseModel):
    """Editable listing fields of a pet."""

    model_config = ConfigDict(str_strip_whitespace=True, populate_by_name=True)

    name: str = Field(..., min_length=1, max_length=100)
    pet_type: str = Field(..., alias="type", min_length=1, max_length=50)
    breed: str = Field(..., min_length=1, max_length=100)
    age: int = Field(..., ge=0, le=100)
    price: Decimal = Field(..., ge=0, max_digits=10, decimal_places=2)
    description: str = Field("", max_length=2000)

    @field_validator("pet_type")
    @classmethod
    def lower_case_type(cls, value: str) -> str:
        return value.lower()
