"""Abstract contract for image object storage."""

from abc import ABC, abstractmethod
from typing import Any

from core.models.image import StoredObject


class ObjectStoreRepository(ABC):
    """Contract for storing and retrieving image objects.

    Implementations could be S3, GCS, an in-memory fake, etc.
    Services depend on this interface, not the implementation.
    Implementations must be safe to share between threads.
    """

    @property
    @abstractmethod
    def bucket_name(self) -> str:
        """Identity of the bucket, used to derive public URLs."""

    @abstractmethod
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
        """Store an object and return its key.

        Raises:
            StoreUnavailableError: If the store cannot be reached
            ObjectStoreError: If the write fails; object state is unknown
        """

    @abstractmethod
    def delete_object(self, *, key: str) -> None:
        """Delete an object. Deleting a missing key is not an error.

        Raises:
            ObjectStoreError: If deletion fails
        """

    @abstractmethod
    def list_objects(self, *, prefix: str, limit: int) -> list[StoredObject]:
        """List up to ``limit`` objects whose key starts with ``prefix``.

        Raises:
            ObjectStoreError: If listing fails
        """

    @abstractmethod
    def sign_url(self, *, key: str, ttl_minutes: int) -> str:
        """Return a temporary GET URL for an object.

        Raises:
            ObjectStoreError: If signing fails
        """

    @abstractmethod
    def bucket_exists(self) -> bool:
        """Bucket-level health probe. Never raises."""

    @abstractmethod
    def get_object_metadata(self, *, key: str) -> dict[str, Any]:
        """Return stored metadata of an object.

        Raises:
            NotFoundError: If the object does not exist
            ObjectStoreError: If the lookup fails
        """
