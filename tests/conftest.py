"""
Pytest configuration and fixtures for pet gallery tests.
Provides AWS mocking, DynamoDB and S3 fixtures with proper cleanup,
an in-memory object store and generated sample images.
"""

import os
import threading
from collections.abc import Callable
from decimal import Decimal
from io import BytesIO
from typing import Any

os.environ.setdefault("AWS_REGION", "us-east-1")
os.environ.setdefault("AWS_DEFAULT_REGION", "us-east-1")
os.environ.setdefault("AWS_ACCESS_KEY_ID", "testing")
os.environ.setdefault("AWS_SECRET_ACCESS_KEY", "testing")
os.environ.setdefault("IMAGE_S3_BUCKET_NAME", "test-pet-images")
os.environ.setdefault("PETS_TABLE_NAME", "test-pets")
os.environ.setdefault("POWERTOOLS_SERVICE_NAME", "pet-gallery")
os.environ.setdefault("POWERTOOLS_METRICS_NAMESPACE", "PetGallery")
os.environ.setdefault("POWERTOOLS_TRACE_DISABLED", "true")

import boto3  # noqa: E402
import pytest  # noqa: E402
from botocore.exceptions import ClientError  # noqa: E402
from moto import mock_aws  # noqa: E402
from PIL import Image  # noqa: E402

from core.models.errors import NotFoundError, ObjectStoreError  # noqa: E402
from core.models.image import StoredObject, public_url_for  # noqa: E402
from core.models.pet import Pet  # noqa: E402
from core.repositories.pet_repository import PetRepository  # noqa: E402
from core.repositories.storage_repository import ObjectStoreRepository  # noqa: E402
from core.utils.mime import content_type_for_extension, file_extension  # noqa: E402


class InMemoryObjectStore(ObjectStoreRepository):
    """Thread-safe object store double with failure injection.

    - ``put_errors``: exceptions raised by successive puts (None = succeed)
    - ``delete_errors``: exception raised when deleting a given key
    """

    def __init__(self, bucket_name: str = "test-pet-images") -> None:
        self._bucket_name = bucket_name
        self._lock = threading.Lock()
        self.objects: dict[str, dict[str, Any]] = {}
        self.put_calls: list[str] = []
        self.delete_calls: list[str] = []
        self.put_errors: list[Exception | None] = []
        self.delete_errors: dict[str, Exception] = {}

    @property
    def bucket_name(self) -> str:
        return self._bucket_name

    def put_object(
        self,
        *,
        key: str,
        body: bytes,
        content_type: str,
        cache_control: str | None = None,
        public: bool = False,
        metadata: dict[str, str] | None = None,
    ) -> str:
        with self._lock:
            self.put_calls.append(key)
            error = self.put_errors.pop(0) if self.put_errors else None
            if error is not None:
                raise error

            self.objects[key] = {
                "body": body,
                "content_type": content_type,
                "cache_control": cache_control,
                "public": public,
                "metadata": metadata or {},
            }
        return key

    def delete_object(self, *, key: str) -> None:
        with self._lock:
            self.delete_calls.append(key)
            error = self.delete_errors.get(key)
            if error is not None:
                raise error
            self.objects.pop(key, None)

    def list_objects(self, *, prefix: str, limit: int) -> list[StoredObject]:
        with self._lock:
            keys = sorted(key for key in self.objects if key.startswith(prefix))

        return [
            StoredObject(
                key=key,
                size=len(self.objects[key]["body"]),
                content_type=content_type_for_extension(file_extension(key)),
                public_url=public_url_for(self.bucket_name, key),
            )
            for key in keys[:limit]
        ]

    def sign_url(self, *, key: str, ttl_minutes: int) -> str:
        return f"https://signed.example.com/{key}?expires={ttl_minutes * 60}"

    def bucket_exists(self) -> bool:
        return True

    def get_object_metadata(self, *, key: str) -> dict[str, Any]:
        stored = self.objects.get(key)
        if stored is None:
            raise NotFoundError(message="Image not found", details={"key": key})
        return {
            "key": key,
            "size": len(stored["body"]),
            "content_type": stored["content_type"],
            "metadata": stored["metadata"],
        }


class InMemoryPetRepository(PetRepository):
    """Pet repository double storing serialized items, with save failure injection."""

    def __init__(self) -> None:
        self.items: dict[str, dict[str, Any]] = {}
        self.save_errors: list[Exception | None] = []
        self.saves = 0

    def load_pet(self, *, pet_id: str) -> Pet:
        item = self.items.get(pet_id)
        if item is None:
            raise NotFoundError(
                message="Pet not found",
                error_code="PET_NOT_FOUND",
                details={"pet_id": pet_id},
            )
        return Pet.model_validate(item)

    def save_pet(self, *, pet: Pet) -> Pet:
        self.saves += 1
        error = self.save_errors.pop(0) if self.save_errors else None
        if error is not None:
            raise error
        self.items[pet.pet_id] = pet.to_item()
        return pet

    def delete_pet(self, *, pet_id: str) -> None:
        self.items.pop(pet_id, None)

    def list_pets(self, *, pet_type: str | None = None, featured: bool | None = None) -> list[Pet]:
        pets = [Pet.model_validate(item) for item in self.items.values()]
        return [
            pet
            for pet in pets
            if (pet_type is None or pet.pet_type == pet_type.lower())
            and (featured is None or pet.featured is featured)
        ]


@pytest.fixture
def memory_store() -> InMemoryObjectStore:
    return InMemoryObjectStore()


@pytest.fixture
def memory_pets() -> InMemoryPetRepository:
    return InMemoryPetRepository()


@pytest.fixture
def store_error() -> Callable[..., ObjectStoreError]:
    """Build a generic store failure for injection."""

    def _make(message: str = "boom") -> ObjectStoreError:
        return ObjectStoreError(message=message)

    return _make


# ---------------------------------------------------------------------------
# Sample images
# ---------------------------------------------------------------------------


@pytest.fixture
def make_image() -> Callable[..., bytes]:
    """
    Generate a real encoded image with Pillow.

    Usage:
        png = make_image("PNG", size=(640, 480), mode="RGBA")
    """

    def _make(
        fmt: str = "PNG",
        *,
        size: tuple[int, int] = (64, 48),
        mode: str = "RGB",
        color: Any = (200, 120, 40),
    ) -> bytes:
        if mode == "RGBA" and len(color) == 3:
            color = (*color, 128)
        image = Image.new(mode, size, color)
        output = BytesIO()
        image.save(output, format=fmt)
        return output.getvalue()

    return _make


@pytest.fixture
def sample_png(make_image) -> bytes:
    return make_image("PNG")


@pytest.fixture
def sample_jpeg(make_image) -> bytes:
    return make_image("JPEG")


@pytest.fixture
def make_pet() -> Callable[..., Pet]:
    """Build a valid pet with overridable fields."""

    def _make(**overrides: Any) -> Pet:
        fields: dict[str, Any] = {
            "pet_id": "pet-42",
            "name": "Rex",
            "pet_type": "dog",
            "breed": "Labrador",
            "age": 3,
            "price": Decimal("250.00"),
            "description": "Friendly and house-trained",
            "created_by": "user-1",
        }
        fields.update(overrides)
        return Pet(**fields)

    return _make


# ---------------------------------------------------------------------------
# AWS (moto)
# ---------------------------------------------------------------------------


@pytest.fixture(scope="function")
def aws_mock():
    with mock_aws():
        yield


@pytest.fixture(scope="function")
def dynamodb_resource(aws_mock):
    return boto3.resource("dynamodb", region_name=os.getenv("AWS_REGION"))


@pytest.fixture(scope="function")
def pets_table(dynamodb_resource):
    """
    Create the pets table for testing.

    moto discards the table when the mock context exits.
    """
    table = dynamodb_resource.create_table(
        TableName=os.getenv("PETS_TABLE_NAME"),
        BillingMode="PAY_PER_REQUEST",
        KeySchema=[{"AttributeName": "petId", "KeyType": "HASH"}],
        AttributeDefinitions=[{"AttributeName": "petId", "AttributeType": "S"}],
    )
    table.wait_until_exists()
    return table


@pytest.fixture
def pets_table_get_item(pets_table) -> Callable[[str], dict[str, Any] | None]:
    """
    Helper to read a raw pet item.

    Usage:
        item = pets_table_get_item("pet-42")
    """

    def _get(pet_id: str) -> dict[str, Any] | None:
        response: dict[str, Any] = pets_table.get_item(Key={"petId": pet_id})
        item: dict[str, Any] | None = response.get("Item")
        return item

    return _get


@pytest.fixture(scope="function")
def s3_client(aws_mock):
    """S3 client for bucket operations."""
    return boto3.client("s3", region_name=os.getenv("AWS_REGION"))


@pytest.fixture(scope="function")
def s3_bucket(s3_client):
    """Create the image bucket; moto discards it when the mock context exits."""
    bucket_name = os.getenv("IMAGE_S3_BUCKET_NAME")

    try:
        s3_client.create_bucket(Bucket=bucket_name)
    except ClientError as e:
        if e.response["Error"]["Code"] != "BucketAlreadyOwnedByYou":
            raise

    return s3_client


@pytest.fixture
def s3_put_object(s3_bucket) -> Callable[..., dict[str, Any]]:
    """
    Helper to upload an object to S3.

    Usage:
        response = s3_put_object("pets/pet-1-1-abc.jpg", image_bytes, "image/jpeg")
    """

    def _put(key: str, body: bytes, content_type: str = "application/octet-stream"):
        return s3_bucket.put_object(
            Bucket=os.getenv("IMAGE_S3_BUCKET_NAME"),
            Key=key,
            Body=body,
            ContentType=content_type,
        )

    return _put


@pytest.fixture
def s3_get_object(s3_bucket) -> Callable[[str], dict[str, Any]]:
    """
    Helper to get an object from S3 (body read into ``Body``).

    Usage:
        stored = s3_get_object("pets/pet-1-1-abc.jpg")
    """

    def _get(key: str) -> dict[str, Any]:
        response: dict[str, Any] = s3_bucket.get_object(
            Bucket=os.getenv("IMAGE_S3_BUCKET_NAME"),
            Key=key,
        )
        response["Body"] = response["Body"].read()
        return response

    return _get
