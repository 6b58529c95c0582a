"""Image asset lifecycle management for pet galleries.

This module owns the relationship between a pet's ``images`` list and the
objects in the store:

- uploads validate input, write the object and build a descriptor
- batch uploads isolate failures per file
- main-image transitions keep exactly one main descriptor per non-empty
  gallery and keep ``legacy_image_url`` in step
- removals delete store objects best-effort and always drop the descriptor

The manager trusts its caller: creator-or-admin checks and persistence of
the pet happen in the request-handling layer. No lock is taken on the pet;
concurrent writers to the same pet race at the repository.
"""

from collections.abc import Iterable, Sequence
from concurrent.futures import ThreadPoolExecutor, as_completed
from pathlib import PurePosixPath
from urllib.parse import quote

from aws_lambda_powertools import Logger

from core.imaging.thumbnails import NullThumbnailDeriver, ThumbnailDeriver, build_thumbnail_deriver
from core.infrastructure.adapters.s3_adapter import S3Adapter
from core.infrastructure.aws.s3_object_store import S3ObjectStore
from core.models.errors import (
    FileSizeError,
    InconsistentStateWarning,
    MIMETypeError,
    NotFoundError,
    PetGalleryError,
    StoreUnavailableError,
    ValidationError,
)
from core.models.image import BatchUploadResult, FailedUpload, ImageDescriptor, UploadFile
from core.models.pet import Pet
from core.repositories.storage_repository import ObjectStoreRepository
from core.utils.constants import (
    ALLOWED_EXTENSIONS,
    ALLOWED_MIME_TYPES,
    CACHE_CONTROL_LONG_LIVED,
    DEFAULT_FOLDER,
    ERROR_CODE_IMAGE_NOT_FOUND,
    ERROR_CODE_INTERNAL_ERROR,
    MAX_FILE_SIZE,
    PURGE_MAX_WORKERS,
    THUMBNAIL_CONTENT_TYPE,
    THUMBNAIL_MAX_HEIGHT,
    THUMBNAIL_MAX_WIDTH,
    THUMBNAIL_PREFIX,
    THUMBNAIL_SUBFOLDER,
    get_max_file_size_mb,
)
from core.utils.keys import generate_object_key
from core.utils.mime import detect_mime_type, file_extension
from core.utils.settings import StorageSettings
from core.utils.time import utc_now_iso

logger = Logger(UTC=True)


class ImageAssetManager:
    """Uploads, attaches, re-elects and removes pet images."""

    def __init__(
        self,
        store: ObjectStoreRepository,
        thumbnails: ThumbnailDeriver | None = None,
        *,
        public_read: bool = True,
        thumbnail_max_width: int = THUMBNAIL_MAX_WIDTH,
        thumbnail_max_height: int = THUMBNAIL_MAX_HEIGHT,
    ) -> None:
        self.store = store
        self.thumbnails = thumbnails or NullThumbnailDeriver()
        self._public_read = public_read
        self._thumbnail_size = (thumbnail_max_width, thumbnail_max_height)

    # ------------------------------------------------------------------
    # Uploads
    # ------------------------------------------------------------------

    def upload_one(
        self,
        content: bytes,
        original_name: str,
        folder: str = DEFAULT_FOLDER,
        owner_id: str | None = None,
        *,
        is_main: bool = False,
        thumbnail: bool = False,
    ) -> ImageDescriptor:
        """Validate and upload one image, returning its descriptor.

        The descriptor is not attached to any pet. If this raises a store
        error the object may or may not exist.

        Raises:
            ValidationError: If the input is rejected (nothing was written)
            StoreUnavailableError: If the store cannot be reached
            ObjectStoreError: If the write failed
        """
        content_type = self._validate_upload(content, original_name)
        key = generate_object_key(folder, owner_id, original_name)

        logger.debug(
            "Starting image upload",
            extra={"key": key, "owner_id": owner_id, "size": len(content)},
        )

        self.store.put_object(
            key=key,
            body=content,
            content_type=content_type,
            cache_control=CACHE_CONTROL_LONG_LIVED,
            public=self._public_read,
            metadata=self._object_metadata(original_name, folder, owner_id),
        )

        thumbnail_key = self._upload_thumbnail(content, original_name, folder, owner_id) if thumbnail else None

        descriptor = ImageDescriptor(
            object_key=key,
            original_name=original_name,
            bucket_name=self.store.bucket_name,
            size=len(content),
            content_type=content_type,
            is_main=is_main,
            folder=folder,
            owner_id=owner_id,
            thumbnail_key=thumbnail_key,
            uploaded_at=utc_now_iso(),
        )

        logger.info(
            "Image uploaded",
            extra={"key": key, "owner_id": owner_id, "thumbnail_key": thumbnail_key},
        )
        return descriptor

    def upload_batch(
        self,
        files: Sequence[UploadFile],
        folder: str = DEFAULT_FOLDER,
        owner_id: str | None = None,
    ) -> BatchUploadResult:
        """Upload files one by one, isolating per-file failures.

        Each success also gets a best-effort thumbnail. Individual failures
        are returned in ``failed``; the call only raises
        StoreUnavailableError before any put has been attempted.
        """
        logger.info(
            "Starting batch upload",
            extra={"file_count": len(files), "folder": folder, "owner_id": owner_id},
        )

        result = BatchUploadResult()
        # Set once a put may have reached the store; validation failures never do
        write_attempted = False

        for upload in files:
            try:
                descriptor = self.upload_one(
                    upload.content,
                    upload.original_name,
                    folder,
                    owner_id,
                    thumbnail=True,
                )
            except StoreUnavailableError as exc:
                if not write_attempted:
                    logger.error(
                        "Object store unavailable before any batch write",
                        extra={"original_name": upload.original_name},
                    )
                    raise
                result.failed.append(self._failed(upload, exc.message, exc.error_code))
            except PetGalleryError as exc:
                write_attempted = write_attempted or not isinstance(exc, ValidationError)
                logger.warning(
                    "Batch item rejected",
                    extra={"original_name": upload.original_name, "error_code": exc.error_code},
                )
                result.failed.append(self._failed(upload, exc.message, exc.error_code))
            except Exception as exc:
                write_attempted = True
                logger.exception(
                    "Unexpected error uploading batch item",
                    extra={"original_name": upload.original_name},
                )
                result.failed.append(self._failed(upload, str(exc), ERROR_CODE_INTERNAL_ERROR))
            else:
                write_attempted = True
                result.succeeded.append(descriptor)

        logger.info(
            "Batch upload complete",
            extra={"succeeded": len(result.succeeded), "failed": len(result.failed)},
        )
        return result

    # ------------------------------------------------------------------
    # Gallery transitions
    # ------------------------------------------------------------------

    def attach(
        self,
        pet: Pet,
        descriptor: ImageDescriptor,
        *,
        make_main: bool | None = None,
    ) -> list[ImageDescriptor]:
        """Append an uploaded descriptor to the pet's gallery.

        ``make_main=None`` makes the image main only when the gallery was
        empty; ``True`` makes it the sole main image. The first image of a
        gallery is always main.
        """
        becomes_main = not pet.images or bool(make_main)

        if becomes_main:
            pet.images = [
                image.model_copy(update={"is_main": False}) if image.is_main else image
                for image in pet.images
            ]

        pet.images.append(
            descriptor.model_copy(update={"is_main": becomes_main, "owner_id": pet.pet_id})
        )
        pet.refresh_legacy_image_url()

        logger.debug(
            "Image attached",
            extra={"pet_id": pet.pet_id, "key": descriptor.object_key, "is_main": becomes_main},
        )
        return pet.images

    def upload_and_attach(
        self,
        pet: Pet,
        content: bytes,
        original_name: str,
        *,
        folder: str = DEFAULT_FOLDER,
        make_main: bool | None = None,
        thumbnail: bool = False,
    ) -> ImageDescriptor:
        """Upload an image owned by the pet and attach it."""
        descriptor = self.upload_one(content, original_name, folder, pet.pet_id, thumbnail=thumbnail)
        self.attach(pet, descriptor, make_main=make_main)
        return pet.images[-1]

    def backfill_owner(self, pet: Pet) -> list[ImageDescriptor]:
        """Set the owner id on descriptors uploaded before the pet had an id."""
        pet.images = [
            image.model_copy(update={"owner_id": pet.pet_id}) if image.owner_id is None else image
            for image in pet.images
        ]
        return pet.images

    def set_as_main(self, pet: Pet, object_key: str) -> list[ImageDescriptor]:
        """Make the given image the pet's only main image.

        Raises:
            NotFoundError: If the key is not in the pet's gallery
        """
        target = self._require_index(pet, object_key)

        pet.images = [
            image.model_copy(update={"is_main": index == target})
            if image.is_main != (index == target)
            else image
            for index, image in enumerate(pet.images)
        ]
        pet.refresh_legacy_image_url()

        logger.info("Main image changed", extra={"pet_id": pet.pet_id, "key": object_key})
        return pet.images

    def remove_image(self, pet: Pet, object_key: str) -> list[ImageDescriptor]:
        """Delete an image's objects and drop its descriptor.

        Store failures are logged and ignored. If the removed image was
        main, the earliest remaining image is promoted.

        Raises:
            NotFoundError: If the key is not in the pet's gallery
        """
        index = self._require_index(pet, object_key)
        removed = pet.images[index]

        self._delete_quietly(removed.object_keys(), pet_id=pet.pet_id)

        remaining = pet.images[:index] + pet.images[index + 1 :]
        if removed.is_main and remaining:
            remaining[0] = remaining[0].model_copy(update={"is_main": True})

        pet.images = remaining
        pet.refresh_legacy_image_url()

        logger.info(
            "Image removed",
            extra={
                "pet_id": pet.pet_id,
                "key": object_key,
                "remaining": len(remaining),
                "main_key": pet.main_image.object_key if pet.main_image else None,
            },
        )
        return pet.images

    def purge_all(self, pet: Pet) -> None:
        """Delete every object of the pet's gallery concurrently.

        Waits for all deletes; failures are logged and never raised, so a
        storage outage cannot block deleting the pet. Leaves the in-memory
        gallery empty.
        """
        keys = [key for image in pet.images for key in image.object_keys()]

        failed = self._delete_quietly(keys, pet_id=pet.pet_id)

        pet.images = []
        pet.refresh_legacy_image_url()

        logger.info(
            "Gallery purged",
            extra={"pet_id": pet.pet_id, "object_count": len(keys), "orphaned": len(failed)},
        )

    def discard(self, descriptors: Iterable[ImageDescriptor]) -> list[str]:
        """Best-effort delete of uploads that will not be attached.

        Returns:
            Keys that could not be deleted
        """
        keys = [key for descriptor in descriptors for key in descriptor.object_keys()]
        return self._delete_quietly(keys, pet_id=None)

    # ------------------------------------------------------------------
    # Helpers
    # ------------------------------------------------------------------

    def _validate_upload(self, content: bytes, original_name: str) -> str:
        """Validate an upload and return the content type sniffed from it."""
        if not content:
            raise ValidationError(
                message="File must not be empty",
                details={"original_name": original_name},
            )

        extension = file_extension(original_name or "").lstrip(".")
        if extension not in ALLOWED_EXTENSIONS:
            raise MIMETypeError(
                message=(
                    f"Invalid image extension '{extension}'. "
                    f"Allowed extensions: {', '.join(sorted(ALLOWED_EXTENSIONS))}"
                ),
                details={"original_name": original_name},
            )

        if len(content) > MAX_FILE_SIZE:
            raise FileSizeError(
                message=f"File size exceeds {get_max_file_size_mb()}MB limit",
                details={"original_name": original_name, "size": len(content)},
            )

        try:
            content_type = detect_mime_type(content)
        except ValueError as exc:
            raise MIMETypeError(
                message="File is not a supported image",
                details={"original_name": original_name},
            ) from exc

        if content_type not in ALLOWED_MIME_TYPES:
            raise MIMETypeError(
                message="Unsupported image type",
                details={"original_name": original_name, "content_type": content_type},
            )

        return content_type

    def _upload_thumbnail(
        self,
        content: bytes,
        original_name: str,
        folder: str,
        owner_id: str | None,
    ) -> str | None:
        width, height = self._thumbnail_size
        thumbnail = self.thumbnails.derive(content, width, height)
        if thumbnail is None:
            return None

        thumbnail_name = f"{THUMBNAIL_PREFIX}{PurePosixPath(original_name).stem}.jpg"
        key = generate_object_key(f"{folder}/{THUMBNAIL_SUBFOLDER}", owner_id, thumbnail_name)

        try:
            self.store.put_object(
                key=key,
                body=thumbnail,
                content_type=THUMBNAIL_CONTENT_TYPE,
                cache_control=CACHE_CONTROL_LONG_LIVED,
                public=self._public_read,
                metadata=self._object_metadata(thumbnail_name, folder, owner_id),
            )
        except Exception as exc:
            logger.warning(
                "Thumbnail upload failed",
                extra={"key": key, "error": str(exc)},
            )
            return None

        return key

    def _delete_quietly(self, keys: Sequence[str], *, pet_id: str | None) -> list[str]:
        """Delete keys concurrently, wait for all, and return those that failed."""
        if not keys:
            return []

        failed: list[str] = []

        with ThreadPoolExecutor(max_workers=min(PURGE_MAX_WORKERS, len(keys))) as pool:
            futures = {pool.submit(self.store.delete_object, key=key): key for key in keys}

            for future in as_completed(futures):
                key = futures[future]
                try:
                    future.result()
                except Exception as exc:
                    failed.append(key)
                    self._report_orphan(key, pet_id=pet_id, exc=exc)

        return failed

    @staticmethod
    def _report_orphan(key: str, *, pet_id: str | None, exc: Exception) -> None:
        warning = InconsistentStateWarning(
            message="Stored object could not be deleted; descriptor removed anyway",
            details={"key": key, "pet_id": pet_id},
        )
        logger.warning(
            warning.message,
            extra={
                "error_code": warning.error_code,
                "key": key,
                "pet_id": pet_id,
                "error": str(exc),
                "error_type": type(exc).__name__,
            },
        )

    @staticmethod
    def _require_index(pet: Pet, object_key: str) -> int:
        index = pet.find_image_index(object_key)
        if index is None:
            raise NotFoundError(
                message="Image not found",
                error_code=ERROR_CODE_IMAGE_NOT_FOUND,
                details={"pet_id": pet.pet_id, "key": object_key},
            )
        return index

    @staticmethod
    def _failed(upload: UploadFile, error: str, error_code: str) -> FailedUpload:
        return FailedUpload(original_name=upload.original_name, error=error, error_code=error_code)

    @staticmethod
    def _object_metadata(original_name: str, folder: str, owner_id: str | None) -> dict[str, str]:
        # S3 user metadata must be ASCII
        return {
            "original-name": quote(original_name),
            "folder": folder,
            "owner-id": owner_id or "unknown",
            "uploaded-at": utc_now_iso(),
        }


def build_image_asset_manager(
    settings: StorageSettings | None = None,
    *,
    store: ObjectStoreRepository | None = None,
    thumbnails: ThumbnailDeriver | None = None,
) -> ImageAssetManager:
    """Wire the manager from settings, defaulting to S3 and Pillow."""
    settings = settings or StorageSettings.from_env()

    return ImageAssetManager(
        store or S3ObjectStore(S3Adapter(settings)),
        thumbnails or build_thumbnail_deriver(settings),
        public_read=settings.public_read,
        thumbnail_max_width=settings.thumbnail_max_width,
        thumbnail_max_height=settings.thumbnail_max_height,
    )
