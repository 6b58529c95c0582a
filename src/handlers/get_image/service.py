"""
Business logic for image retrieval.

Generates temporary signed URLs for stored objects and, on request, reads
their stored metadata.
"""

from typing import Any

from aws_lambda_powertools import Logger

from core.infrastructure.aws.s3_object_store import S3ObjectStore
from core.repositories.storage_repository import ObjectStoreRepository
from core.utils.constants import LOCALHOST_URL, LOCALSTACK_URL
from core.utils.settings import StorageSettings

logger = Logger(UTC=True)


class GetService:
    """Application service responsible for signed image access."""

    def __init__(
        self,
        store: ObjectStoreRepository | None = None,
        *,
        is_localstack: bool | None = None,
    ) -> None:
        self.store = store or S3ObjectStore()
        self._is_localstack = (
            StorageSettings.from_env().is_localstack if is_localstack is None else is_localstack
        )

    def _rewrite_localstack_url(self, url: str) -> str:
        """
        Replace internal LocalStack hostname with localhost
        so URLs are accessible from the host machine.
        """
        return url.replace(LOCALSTACK_URL, LOCALHOST_URL, 1)

    def generate_image_url(
        self,
        key: str,
        *,
        ttl_minutes: int,
        include_metadata: bool = False,
    ) -> tuple[str, dict[str, Any] | None]:
        """
        Generate a signed GET URL for an object.

        Returns:
            Tuple of (signed_url, object_metadata or None)

        Raises:
            NotFoundError: If metadata was requested and the object does not exist
            ObjectStoreError: If signing or the metadata lookup fails
        """
        logger.debug(
            "Generating image access URL",
            extra={"key": key, "ttl_minutes": ttl_minutes},
        )

        metadata = self.store.get_object_metadata(key=key) if include_metadata else None

        url = self.store.sign_url(key=key, ttl_minutes=ttl_minutes)
        if self._is_localstack:
            url = self._rewrite_localstack_url(url)

        logger.info("Signed URL generated", extra={"key": key})
        return url, metadata
