"""Pet use cases: listings, feedback, and galleries mutated through the asset manager.

Every mutation is a read-modify-write of the whole pet document. Store side
effects happen before the save, so a failed save can leave objects behind;
uploads are rolled back best-effort, deletions are not.
"""

import uuid
from collections.abc import Sequence
from typing import Any

from aws_lambda_powertools import Logger

from core.infrastructure.aws.dynamodb_pets import DynamoDBPetRepository
from core.models.errors import ForbiddenError, NotFoundError, PetGalleryError
from core.models.image import BatchUploadResult, ImageDescriptor, UploadFile
from core.models.pet import Pet, VoteType
from core.repositories.pet_repository import PetRepository
from core.services.image_assets import ImageAssetManager, build_image_asset_manager
from core.utils.authorization import Principal, ensure_can_modify
from core.utils.constants import (
    DEFAULT_FOLDER,
    DEFAULT_PET_LIST_LIMIT,
    ERROR_CODE_NO_PETS_FOUND,
    SORT_NEWEST,
    SORT_OLDEST,
    SORT_PRICE_HIGH,
    SORT_PRICE_LOW,
)

logger = Logger(UTC=True)


class PetGalleryService:
    """Application service for pets and their image galleries."""

    def __init__(self, pets: PetRepository, assets: ImageAssetManager) -> None:
        self.pets = pets
        self.assets = assets

    @staticmethod
    def generate_pet_id() -> str:
        return f"pet-{uuid.uuid4().hex}"

    def create_pet(
        self,
        *,
        principal: Principal,
        fields: dict[str, Any],
        image: UploadFile | None = None,
    ) -> Pet:
        """Create a pet, optionally with a first image.

        The image is uploaded before the pet exists, so its descriptor has no
        owner until the record is saved and the owner is backfilled.

        Raises:
            ValidationError: If the image is rejected (nothing was saved)
            PersistenceError: If the pet could not be saved; the upload is
                deleted best-effort first
        """
        descriptors: list[ImageDescriptor] = []

        if image is not None:
            descriptors.append(
                self.assets.upload_one(
                    image.content,
                    image.original_name,
                    DEFAULT_FOLDER,
                    None,
                    is_main=True,
                    thumbnail=True,
                )
            )

        try:
            pet = Pet(
                pet_id=self.generate_pet_id(),
                created_by=principal.user_id,
                images=descriptors,
                **fields,
            )
            pet = self.pets.save_pet(pet=pet)
        except Exception:
            if descriptors:
                logger.warning(
                    "Pet creation failed; discarding uploaded image",
                    extra={"keys": [d.object_key for d in descriptors]},
                )
                self.assets.discard(descriptors)
            raise

        if pet.images:
            self.assets.backfill_owner(pet)
            try:
                pet = self.pets.save_pet(pet=pet)
            except PetGalleryError as exc:
                # The pet exists; descriptors without an owner are still valid
                logger.warning(
                    "Owner backfill failed",
                    extra={"pet_id": pet.pet_id, "error_code": exc.error_code},
                )

        logger.info(
            "Pet created",
            extra={"pet_id": pet.pet_id, "image_count": len(pet.images)},
        )
        return pet

    def get_pet(self, pet_id: str) -> Pet:
        return self.pets.load_pet(pet_id=pet_id)

    def list_pets(
        self,
        *,
        pet_type: str | None = None,
        featured: bool | None = None,
        sort: str | None = None,
        limit: int = DEFAULT_PET_LIST_LIMIT,
    ) -> list[Pet]:
        """List pets, optionally filtered by type or featured flag.

        Raises:
            NotFoundError: If a type filter matches no pet
        """
        pets = self.pets.list_pets(pet_type=pet_type, featured=featured)

        if pet_type and not pets:
            raise NotFoundError(
                message=f"No pets found for type: {pet_type}",
                error_code=ERROR_CODE_NO_PETS_FOUND,
                details={"type": pet_type},
            )

        return sort_pets(pets, sort)[:limit]

    def vote_pet(self, *, pet_id: str, principal: Principal, vote_type: VoteType) -> tuple[Pet, str | None]:
        """Record an up or down vote; returns the pet and the vote the user now holds."""
        pet = self.pets.load_pet(pet_id=pet_id)
        current = pet.record_vote(principal.user_id, vote_type)
        self.pets.save_pet(pet=pet)

        logger.info(
            "Pet vote recorded",
            extra={"pet_id": pet_id, "user_id": principal.user_id, "vote": current},
        )
        return pet, current

    def rate_pet(
        self,
        *,
        pet_id: str,
        principal: Principal,
        rating: int,
        comment: str = "",
    ) -> tuple[Pet, bool]:
        """Add or replace the user's rating; the flag is True when one was replaced."""
        pet = self.pets.load_pet(pet_id=pet_id)
        replaced = pet.record_rating(principal.user_id, rating, comment)
        self.pets.save_pet(pet=pet)

        logger.info(
            "Pet rating recorded",
            extra={"pet_id": pet_id, "user_id": principal.user_id, "replaced": replaced},
        )
        return pet, replaced

    def add_image(
        self,
        *,
        pet_id: str,
        principal: Principal,
        upload: UploadFile,
        make_main: bool | None = None,
        folder: str = DEFAULT_FOLDER,
    ) -> tuple[Pet, ImageDescriptor]:
        """Upload one image into a pet's gallery and save the pet."""
        pet = self._load_for_update(pet_id, principal)

        descriptor = self.assets.upload_and_attach(
            pet,
            upload.content,
            upload.original_name,
            folder=folder,
            make_main=make_main,
            thumbnail=True,
        )
        self._save_or_discard(pet, [descriptor])

        return pet, descriptor

    def add_images(
        self,
        *,
        pet_id: str,
        principal: Principal,
        files: Sequence[UploadFile],
        folder: str = DEFAULT_FOLDER,
    ) -> tuple[Pet, BatchUploadResult]:
        """Batch upload into a pet's gallery; successes are attached in order."""
        pet = self._load_for_update(pet_id, principal)

        result = self.assets.upload_batch(files, folder, pet.pet_id)

        for descriptor in result.succeeded:
            self.assets.attach(pet, descriptor)

        if result.succeeded:
            self._save_or_discard(pet, result.succeeded)

        return pet, result

    def update_pet(
        self,
        *,
        pet_id: str,
        principal: Principal,
        changes: dict[str, Any],
        image: UploadFile | None = None,
    ) -> Pet:
        """Apply field changes; a new image becomes the main image."""
        pet = self._load_for_update(pet_id, principal)

        if "featured" in changes and not principal.is_admin:
            raise ForbiddenError(
                message="Only admins can change whether a pet is featured",
                details={"pet_id": pet_id},
            )

        uploaded: list[ImageDescriptor] = []
        if image is not None:
            uploaded.append(
                self.assets.upload_and_attach(
                    pet,
                    image.content,
                    image.original_name,
                    make_main=True,
                    thumbnail=True,
                )
            )

        for field, value in changes.items():
            setattr(pet, field, value)

        self._save_or_discard(pet, uploaded)
        return pet

    def set_main_image(self, *, pet_id: str, principal: Principal, object_key: str) -> Pet:
        pet = self._load_for_update(pet_id, principal)
        self.assets.set_as_main(pet, object_key)
        return self.pets.save_pet(pet=pet)

    def remove_image(self, *, pet_id: str, principal: Principal, object_key: str) -> Pet:
        """Remove one image; store failures leave an orphan, never a dangling descriptor."""
        pet = self._load_for_update(pet_id, principal)
        self.assets.remove_image(pet, object_key)
        return self.pets.save_pet(pet=pet)

    def delete_pet(self, *, pet_id: str, principal: Principal) -> int:
        """Purge the gallery and delete the pet record.

        Returns:
            Number of images the pet had
        """
        pet = self._load_for_update(pet_id, principal)
        image_count = len(pet.images)

        self.assets.purge_all(pet)
        self.pets.delete_pet(pet_id=pet.pet_id)

        logger.info("Pet deleted", extra={"pet_id": pet_id, "image_count": image_count})
        return image_count

    def _load_for_update(self, pet_id: str, principal: Principal) -> Pet:
        pet = self.pets.load_pet(pet_id=pet_id)
        ensure_can_modify(pet, principal)
        return pet

    def _save_or_discard(self, pet: Pet, uploaded: Sequence[ImageDescriptor]) -> None:
        try:
            self.pets.save_pet(pet=pet)
        except PetGalleryError:
            if uploaded:
                logger.warning(
                    "Saving pet failed; discarding new uploads",
                    extra={"pet_id": pet.pet_id, "keys": [d.object_key for d in uploaded]},
                )
                self.assets.discard(uploaded)
            raise


def build_pet_gallery_service(
    *,
    pets: PetRepository | None = None,
    assets: ImageAssetManager | None = None,
) -> PetGalleryService:
    return PetGalleryService(
        pets or DynamoDBPetRepository(),
        assets or build_image_asset_manager(),
    )


def sort_pets(pets: Sequence[Pet], sort: str | None) -> list[Pet]:
    """Order pets by one of the listing sort options; unknown options keep storage order."""
    if sort == SORT_NEWEST:
        return sorted(pets, key=lambda pet: pet.created_at or "", reverse=True)
    if sort == SORT_OLDEST:
        return sorted(pets, key=lambda pet: pet.created_at or "")
    if sort == SORT_PRICE_HIGH:
        return sorted(pets, key=lambda pet: pet.price, reverse=True)
    if sort == SORT_PRICE_LOW:
        return sorted(pets, key=lambda pet: pet.price)
    return list(pets)
