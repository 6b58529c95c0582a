"""Business logic for deleting a bucket object.

Deletion is idempotent: deleting a key that does not exist succeeds. Pet
galleries are not touched; removing an image from a pet goes through the
pet image routes so the descriptor and main flag stay consistent.
"""

from typing import Any

from aws_lambda_powertools import Logger

from core.infrastructure.aws.s3_object_store import S3ObjectStore
from core.repositories.storage_repository import ObjectStoreRepository
from core.utils.time import utc_now_iso

logger = Logger(UTC=True)


class DeleteService:
    """Application service responsible for deleting stored images."""

    def __init__(self, store: ObjectStoreRepository | None = None) -> None:
        self.store = store or S3ObjectStore()

    def delete_image(self, key: str) -> dict[str, Any]:
        """Delete an object from the store.

        Raises:
            StoreUnavailableError: If the store cannot be reached
            ObjectStoreError: If the delete fails
        """
        logger.debug("Starting image deletion", extra={"key": key})

        self.store.delete_object(key=key)

        logger.info("Image deleted", extra={"key": key})
        return {"key": key, "deleted_at": utc_now_iso()}
