"""Business logic for multi-file uploads.

Decodes each file on its own so one bad payload fails only that file,
then delegates to the asset manager (bucket only) or the pet gallery
service (upload and attach).
"""

from aws_lambda_powertools import Logger

from core.models.errors import ValidationError
from core.models.image import BatchUploadResult, FailedUpload, UploadFile
from core.models.pet import Pet
from core.services.image_assets import ImageAssetManager
from core.services.pet_gallery import PetGalleryService
from core.utils.authorization import Principal
from core.utils.validators import decode_base64_file

from .models import BatchFile

logger = Logger(UTC=True)


class BatchUploadService:
    """Application service for batch uploads."""

    def __init__(
        self,
        assets: ImageAssetManager,
        gallery: PetGalleryService | None = None,
    ) -> None:
        self.assets = assets
        self.gallery = gallery

    @staticmethod
    def decode_files(files: list[BatchFile]) -> tuple[list[UploadFile], list[FailedUpload]]:
        """Split request files into decoded uploads and decode failures."""
        uploads: list[UploadFile] = []
        failed: list[FailedUpload] = []

        for item in files:
            try:
                content = decode_base64_file(item.file)
            except ValidationError as exc:
                logger.warning(
                    "Batch file could not be decoded",
                    extra={"original_name": item.original_name},
                )
                failed.append(
                    FailedUpload(
                        original_name=item.original_name,
                        error=exc.message,
                        error_code=exc.error_code,
                    )
                )
                continue

            uploads.append(UploadFile(content=content, original_name=item.original_name))

        return uploads, failed

    def upload(
        self,
        *,
        files: list[BatchFile],
        folder: str,
        principal: Principal,
        pet_id: str | None = None,
    ) -> tuple[BatchUploadResult, Pet | None]:
        uploads, decode_failures = self.decode_files(files)

        pet: Pet | None = None
        if not uploads:
            result = BatchUploadResult()
        elif pet_id:
            if self.gallery is None:
                raise RuntimeError("Pet gallery service is not configured")
            pet, result = self.gallery.add_images(
                pet_id=pet_id,
                principal=principal,
                files=uploads,
                folder=folder,
            )
        else:
            result = self.assets.upload_batch(uploads, folder)

        result.failed.extend(decode_failures)
        return result, pet
