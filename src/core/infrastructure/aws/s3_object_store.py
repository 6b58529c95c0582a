"""S3-backed implementation of ObjectStoreRepository."""

from collections.abc import Mapping
from typing import Any

from aws_lambda_powertools import Logger
from botocore.exceptions import (
    BotoCoreError,
    ClientError,
    ConnectTimeoutError,
    EndpointConnectionError,
    NoCredentialsError,
)

from core.infrastructure.adapters.s3_adapter import S3Adapter, S3AdapterProtocol
from core.models.errors import NotFoundError, ObjectStoreError, StoreUnavailableError
from core.models.image import StoredObject, public_url_for
from core.repositories.storage_repository import ObjectStoreRepository
from core.utils.constants import (
    ERROR_CODE_IMAGE_DELETE_FAILED,
    ERROR_CODE_IMAGE_LIST_FAILED,
    ERROR_CODE_IMAGE_METADATA_FAILED,
    ERROR_CODE_IMAGE_PRESIGNED_URL_FAILED,
    ERROR_CODE_IMAGE_UPLOAD_FAILED,
    STORE_UNAVAILABLE_CODES,
)
from core.utils.mime import content_type_for_extension, file_extension

logger = Logger(UTC=True)

_MISSING_OBJECT_CODES = frozenset({"NoSuchKey", "NotFound", "404"})
_UNREACHABLE_ERRORS = (EndpointConnectionError, ConnectTimeoutError, NoCredentialsError)

# S3 pages listings at 1000 keys
_LIST_PAGE_SIZE = 1000


def _client_error_code(exc: ClientError) -> str:
    return str(exc.response.get("Error", {}).get("Code", ""))


class S3ObjectStore(ObjectStoreRepository):
    """Object store implementation backed by Amazon S3.

    All boto3 errors are caught and translated into domain errors:
    connectivity and credential failures become StoreUnavailableError,
    everything else ObjectStoreError.
    """

    def __init__(self, adapter: S3AdapterProtocol | None = None) -> None:
        """Create storage using the provided S3 adapter."""
        self._s3: S3AdapterProtocol = adapter or S3Adapter()

    @property
    def bucket_name(self) -> str:
        return self._s3.bucket

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
        """Upload bytes to S3 and return the object key."""
        logger.debug(
            "Uploading object",
            extra={"key": key, "size": len(body), "content_type": content_type},
        )

        try:
            self._s3.put_object(
                key=key,
                body=body,
                content_type=content_type,
                metadata=metadata or {},
                cache_control=cache_control,
                acl="public-read" if public else None,
            )
        except Exception as exc:
            raise self._translate(
                exc,
                message="Unable to upload image at this time",
                error_code=ERROR_CODE_IMAGE_UPLOAD_FAILED,
                key=key,
            ) from exc

        logger.info("Object uploaded successfully", extra={"key": key})
        return key

    def delete_object(self, *, key: str) -> None:
        """Delete an object from S3; a missing key counts as deleted."""
        logger.debug("Deleting object", extra={"key": key})

        try:
            self._s3.delete_object(key=key)
        except ClientError as exc:
            if _client_error_code(exc) in _MISSING_OBJECT_CODES:
                logger.info("Object already absent", extra={"key": key})
                return
            raise self._translate(
                exc,
                message="Unable to delete image at this time",
                error_code=ERROR_CODE_IMAGE_DELETE_FAILED,
                key=key,
            ) from exc
        except Exception as exc:
            raise self._translate(
                exc,
                message="Unable to delete image at this time",
                error_code=ERROR_CODE_IMAGE_DELETE_FAILED,
                key=key,
            ) from exc

        logger.info("Object deleted successfully", extra={"key": key})

    def list_objects(self, *, prefix: str, limit: int) -> list[StoredObject]:
        """List objects under a prefix, following continuation tokens up to limit."""
        logger.debug("Listing objects", extra={"prefix": prefix, "limit": limit})

        objects: list[StoredObject] = []
        token: str | None = None

        try:
            while len(objects) < limit:
                page = self._s3.list_objects(
                    prefix=prefix,
                    max_keys=min(_LIST_PAGE_SIZE, limit - len(objects)),
                    continuation_token=token,
                )

                for entry in page.get("Contents", []):
                    objects.append(self._to_stored_object(entry))

                token = page.get("NextContinuationToken")
                if not page.get("IsTruncated") or not token:
                    break

        except Exception as exc:
            raise self._translate(
                exc,
                message="Unable to list images at this time",
                error_code=ERROR_CODE_IMAGE_LIST_FAILED,
                key=prefix,
            ) from exc

        logger.info("Objects listed", extra={"prefix": prefix, "count": len(objects)})
        return objects[:limit]

    def sign_url(self, *, key: str, ttl_minutes: int) -> str:
        """Generate a pre-signed S3 URL for reading an object."""
        logger.debug(
            "Generating pre-signed S3 URL",
            extra={"key": key, "ttl_minutes": ttl_minutes},
        )

        try:
            url: str = self._s3.generate_presigned_url(
                method="get_object",
                params={"Key": key},
                expires_in=ttl_minutes * 60,
            )
        except Exception as exc:
            raise self._translate(
                exc,
                message="Unable to generate image access URL",
                error_code=ERROR_CODE_IMAGE_PRESIGNED_URL_FAILED,
                key=key,
            ) from exc

        return url

    def bucket_exists(self) -> bool:
        try:
            self._s3.head_bucket()
        except (ClientError, BotoCoreError) as exc:
            logger.warning(
                "Bucket probe failed",
                extra={"bucket": self.bucket_name, "error": str(exc)},
            )
            return False

        logger.debug("Bucket probe succeeded", extra={"bucket": self.bucket_name})
        return True

    def get_object_metadata(self, *, key: str) -> dict[str, Any]:
        """Return size, content type and user metadata of an object."""
        try:
            response = self._s3.head_object(key=key)
        except ClientError as exc:
            if _client_error_code(exc) in _MISSING_OBJECT_CODES:
                raise NotFoundError(
                    message="Image not found",
                    details={"key": key},
                ) from exc
            raise self._translate(
                exc,
                message="Unable to read image metadata",
                error_code=ERROR_CODE_IMAGE_METADATA_FAILED,
                key=key,
            ) from exc
        except Exception as exc:
            raise self._translate(
                exc,
                message="Unable to read image metadata",
                error_code=ERROR_CODE_IMAGE_METADATA_FAILED,
                key=key,
            ) from exc

        last_modified = response.get("LastModified")

        return {
            "key": key,
            "size": response.get("ContentLength"),
            "content_type": response.get("ContentType"),
            "cache_control": response.get("CacheControl"),
            "last_modified": last_modified.isoformat() if last_modified else None,
            "metadata": dict(response.get("Metadata", {})),
        }

    def _to_stored_object(self, entry: Mapping[str, Any]) -> StoredObject:
        key = str(entry["Key"])
        last_modified = entry.get("LastModified")

        return StoredObject(
            key=key,
            size=int(entry.get("Size", 0)),
            content_type=content_type_for_extension(file_extension(key)),
            created_at=last_modified.isoformat() if last_modified else None,
            public_url=public_url_for(self.bucket_name, key),
        )

    def _translate(
        self,
        exc: Exception,
        *,
        message: str,
        error_code: str,
        key: str,
    ) -> ObjectStoreError:
        """Map a boto3/botocore failure onto the domain error hierarchy."""
        details = {"key": key, "bucket": self.bucket_name}

        if isinstance(exc, ClientError) and _client_error_code(exc) in STORE_UNAVAILABLE_CODES:
            logger.error(
                "Object store unavailable",
                extra={**details, "code": _client_error_code(exc)},
            )
            return StoreUnavailableError(message="Image storage is unavailable", details=details)

        if isinstance(exc, _UNREACHABLE_ERRORS):
            logger.error("Object store unreachable", extra={**details, "error": str(exc)})
            return StoreUnavailableError(message="Image storage is unavailable", details=details)

        if isinstance(exc, ClientError):
            logger.error(
                "S3 request failed",
                extra={**details, "code": _client_error_code(exc)},
            )
        else:
            logger.exception("Unexpected object store error", extra=details)

        return ObjectStoreError(message=message, error_code=error_code, details=details)
