"""Image descriptor and upload result models."""

from urllib.parse import quote

from pydantic import BaseModel, ConfigDict, Field, StrictBool, StrictStr, computed_field
from pydantic.alias_generators import to_camel

from core.models.errors import PartialFailureError


def public_url_for(bucket_name: str, key: str) -> str:
    """Public HTTPS URL of an object in a public-read bucket."""
    return f"https://{bucket_name}.s3.amazonaws.com/{quote(key, safe='/')}"


def store_uri_for(bucket_name: str, key: str) -> str:
    return f"s3://{bucket_name}/{key}"


class ImageDescriptor(BaseModel):
    """Metadata of one uploaded image object, as tracked on a pet.

    Persisted with camelCase keys. ``publicUrl``, ``storeUri`` and
    ``thumbnailUrl`` are always derived from the object key and bucket;
    values present in a stored record are ignored on load.
    """

    model_config = ConfigDict(
        alias_generator=to_camel,
        populate_by_name=True,
        frozen=True,
        extra="ignore",
    )

    object_key: StrictStr = Field(..., min_length=1, description="Object key in the store")
    original_name: StrictStr = Field(..., description="File name supplied at upload time")
    bucket_name: StrictStr = Field(..., min_length=1, description="Bucket holding the object")
    size: int = Field(..., ge=0, description="Object size in bytes")
    content_type: StrictStr = Field(..., description="Content type sniffed from the bytes")
    is_main: StrictBool = Field(False, description="Whether this is the pet's main image")
    folder: StrictStr = Field(..., description="Logical namespace of the object")
    owner_id: StrictStr | None = Field(None, description="Owning pet id, once known")
    thumbnail_key: StrictStr | None = Field(None, description="Key of the derived thumbnail")
    uploaded_at: StrictStr | None = Field(None, description="ISO-8601 upload timestamp (UTC)")

    @computed_field(alias="publicUrl")  # type: ignore[prop-decorator]
    @property
    def public_url(self) -> str:
        return public_url_for(self.bucket_name, self.object_key)

    @computed_field(alias="storeUri")  # type: ignore[prop-decorator]
    @property
    def store_uri(self) -> str:
        return store_uri_for(self.bucket_name, self.object_key)

    @computed_field(alias="thumbnailUrl")  # type: ignore[prop-decorator]
    @property
    def thumbnail_url(self) -> str | None:
        if not self.thumbnail_key:
            return None
        return public_url_for(self.bucket_name, self.thumbnail_key)

    def object_keys(self) -> list[str]:
        """Every store key owned by this descriptor."""
        keys = [self.object_key]
        if self.thumbnail_key:
            keys.append(self.thumbnail_key)
        return keys


class StoredObject(BaseModel):
    """One entry of a bucket listing."""

    key: StrictStr
    size: int
    content_type: str | None = None
    created_at: str | None = None
    public_url: str | None = None


class UploadFile(BaseModel):
    """A decoded file of a batch upload."""

    content: bytes
    original_name: StrictStr


class FailedUpload(BaseModel):
    """A file that could not be uploaded in a batch."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    original_name: str
    error: str
    error_code: str


class BatchUploadResult(BaseModel):
    """Outcome of a batch upload: every file lands in exactly one list."""

    succeeded: list[ImageDescriptor] = Field(default_factory=list)
    failed: list[FailedUpload] = Field(default_factory=list)

    @property
    def total(self) -> int:
        return len(self.succeeded) + len(self.failed)

    def partial_failure(self) -> PartialFailureError | None:
        """Describe failed items as an error value, or None if all succeeded."""
        if not self.failed:
            return None

        return PartialFailureError(
            message=f"{len(self.failed)} of {self.total} files failed to upload",
            details={
                "failed": [item.model_dump(by_alias=True) for item in self.failed],
                "succeeded_count": len(self.succeeded),
            },
        )
