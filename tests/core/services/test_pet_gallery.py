"""Unit tests for the pet gallery application service."""

from decimal import Decimal

import pytest
from pydantic import ValidationError as PydanticValidationError

from core.models.errors import ForbiddenError, NotFoundError, PersistenceError
from core.models.image import UploadFile
from core.models.pet import Pet
from core.services.image_assets import ImageAssetManager
from core.services.pet_gallery import PetGalleryService
from core.utils.authorization import Principal

OWNER = Principal(user_id="user-1")
STRANGER = Principal(user_id="user-2")
ADMIN = Principal(user_id="admin-1", role="admin")

FIELDS = {
    "name": "Rex",
    "pet_type": "dog",
    "breed": "Labrador",
    "age": 3,
    "price": Decimal("250.00"),
    "description": "Friendly",
}


@pytest.fixture
def service(memory_pets, memory_store) -> PetGalleryService:
    return PetGalleryService(memory_pets, ImageAssetManager(memory_store))


@pytest.fixture
def stored_pet(memory_pets, make_pet) -> Pet:
    pet = make_pet()
    memory_pets.items[pet.pet_id] = pet.to_item()
    return pet


def persistence_error() -> PersistenceError:
    return PersistenceError(message="Unable to save pet at this time")


class TestCreatePet:
    def test_without_image(self, service, memory_pets) -> None:
        pet = service.create_pet(principal=OWNER, fields=FIELDS)

        assert pet.pet_id.startswith("pet-")
        assert pet.created_by == "user-1"
        assert pet.images == []
        assert memory_pets.saves == 1

    def test_with_image_backfills_owner(self, service, memory_pets, memory_store, sample_png) -> None:
        pet = service.create_pet(
            principal=OWNER,
            fields=FIELDS,
            image=UploadFile(content=sample_png, original_name="rex.png"),
        )

        stored = memory_pets.load_pet(pet_id=pet.pet_id)
        assert stored.images[0].is_main is True
        assert stored.images[0].owner_id == pet.pet_id
        assert stored.legacy_image_url == stored.images[0].public_url
        assert stored.images[0].object_key in memory_store.objects
        assert memory_pets.saves == 2

    def test_failed_save_discards_upload(self, service, memory_pets, memory_store, sample_png) -> None:
        memory_pets.save_errors.append(persistence_error())

        with pytest.raises(PersistenceError):
            service.create_pet(
                principal=OWNER,
                fields=FIELDS,
                image=UploadFile(content=sample_png, original_name="rex.png"),
            )

        assert memory_store.objects == {}
        assert memory_pets.items == {}

    def test_invalid_fields_discard_upload(self, service, memory_store, sample_png) -> None:
        with pytest.raises(PydanticValidationError):
            service.create_pet(
                principal=OWNER,
                fields={**FIELDS, "age": -5},
                image=UploadFile(content=sample_png, original_name="rex.png"),
            )

        assert memory_store.objects == {}

    def test_backfill_save_failure_keeps_pet(self, service, memory_pets, sample_png) -> None:
        memory_pets.save_errors.extend([None, persistence_error()])

        pet = service.create_pet(
            principal=OWNER,
            fields=FIELDS,
            image=UploadFile(content=sample_png, original_name="rex.png"),
        )

        assert pet.pet_id in memory_pets.items
        assert memory_pets.items[pet.pet_id]["images"][0]["ownerId"] is None


class TestAddImages:
    def test_add_image_requires_creator_or_admin(self, service, stored_pet, sample_png) -> None:
        with pytest.raises(ForbiddenError):
            service.add_image(
                pet_id=stored_pet.pet_id,
                principal=STRANGER,
                upload=UploadFile(content=sample_png, original_name="a.png"),
            )

    def test_admin_may_add_image(self, service, memory_pets, stored_pet, sample_png) -> None:
        pet, descriptor = service.add_image(
            pet_id=stored_pet.pet_id,
            principal=ADMIN,
            upload=UploadFile(content=sample_png, original_name="a.png"),
        )

        assert descriptor.is_main is True
        assert memory_pets.load_pet(pet_id=pet.pet_id).images == [descriptor]

    def test_add_image_save_failure_discards_upload(
        self, service, memory_pets, memory_store, stored_pet, sample_png
    ) -> None:
        memory_pets.save_errors.append(persistence_error())

        with pytest.raises(PersistenceError):
            service.add_image(
                pet_id=stored_pet.pet_id,
                principal=OWNER,
                upload=UploadFile(content=sample_png, original_name="a.png"),
            )

        assert memory_store.objects == {}

    def test_add_images_attaches_successes_in_order(self, service, memory_pets, stored_pet, sample_png) -> None:
        files = [
            UploadFile(content=sample_png, original_name="a.png"),
            UploadFile(content=b"not an image", original_name="b.png"),
            UploadFile(content=sample_png, original_name="c.png"),
        ]

        pet, result = service.add_images(pet_id=stored_pet.pet_id, principal=OWNER, files=files)

        assert [image.original_name for image in pet.images] == ["a.png", "c.png"]
        assert [item.original_name for item in result.failed] == ["b.png"]
        assert pet.images[0].is_main is True
        assert len(memory_pets.load_pet(pet_id=pet.pet_id).images) == 2

    def test_add_images_skips_save_when_nothing_succeeded(self, service, memory_pets, stored_pet) -> None:
        files = [UploadFile(content=b"junk", original_name="a.txt")]

        _, result = service.add_images(pet_id=stored_pet.pet_id, principal=OWNER, files=files)

        assert result.succeeded == []
        assert memory_pets.saves == 0


class TestUpdatePet:
    def test_updates_fields(self, service, memory_pets, stored_pet) -> None:
        pet = service.update_pet(
            pet_id=stored_pet.pet_id,
            principal=OWNER,
            changes={"name": "Max", "price": Decimal("99.99")},
        )

        assert pet.name == "Max"
        assert memory_pets.load_pet(pet_id=pet.pet_id).price == Decimal("99.99")

    def test_new_image_becomes_main(self, service, stored_pet, sample_png, sample_jpeg) -> None:
        service.add_image(
            pet_id=stored_pet.pet_id,
            principal=OWNER,
            upload=UploadFile(content=sample_png, original_name="a.png"),
        )

        pet = service.update_pet(
            pet_id=stored_pet.pet_id,
            principal=OWNER,
            changes={},
            image=UploadFile(content=sample_jpeg, original_name="b.jpg"),
        )

        assert [image.is_main for image in pet.images] == [False, True]

    def test_stranger_cannot_update(self, service, stored_pet) -> None:
        with pytest.raises(ForbiddenError):
            service.update_pet(pet_id=stored_pet.pet_id, principal=STRANGER, changes={"name": "X"})


class TestMainAndRemoval:
    def test_set_main_and_remove(self, service, memory_pets, stored_pet, sample_png) -> None:
        _, first = service.add_image(
            pet_id=stored_pet.pet_id,
            principal=OWNER,
            upload=UploadFile(content=sample_png, original_name="a.png"),
        )
        _, second = service.add_image(
            pet_id=stored_pet.pet_id,
            principal=OWNER,
            upload=UploadFile(content=sample_png, original_name="b.png"),
        )

        pet = service.set_main_image(
            pet_id=stored_pet.pet_id, principal=OWNER, object_key=second.object_key
        )
        assert pet.main_image is not None
        assert pet.main_image.object_key == second.object_key

        pet = service.remove_image(
            pet_id=stored_pet.pet_id, principal=OWNER, object_key=second.object_key
        )
        stored = memory_pets.load_pet(pet_id=stored_pet.pet_id)
        assert [image.object_key for image in stored.images] == [first.object_key]
        assert stored.images[0].is_main is True

    def test_missing_pet(self, service) -> None:
        with pytest.raises(NotFoundError):
            service.set_main_image(pet_id="pet-none", principal=OWNER, object_key="k")


class TestDeletePet:
    def test_purges_gallery_and_record(self, service, memory_pets, memory_store, stored_pet, sample_png) -> None:
        for name in ("a.png", "b.png"):
            service.add_image(
                pet_id=stored_pet.pet_id,
                principal=OWNER,
                upload=UploadFile(content=sample_png, original_name=name),
            )

        count = service.delete_pet(pet_id=stored_pet.pet_id, principal=OWNER)

        assert count == 2
        assert memory_store.objects == {}
        assert memory_pets.items == {}

    def test_store_outage_does_not_block_deletion(
        self, service, memory_pets, memory_store, stored_pet, sample_png, store_error
    ) -> None:
        _, descriptor = service.add_image(
            pet_id=stored_pet.pet_id,
            principal=OWNER,
            upload=UploadFile(content=sample_png, original_name="a.png"),
        )
        memory_store.delete_errors[descriptor.object_key] = store_error()

        service.delete_pet(pet_id=stored_pet.pet_id, principal=OWNER)

        assert memory_pets.items == {}
        assert descriptor.object_key in memory_store.objects

    def test_stranger_cannot_delete(self, service, memory_pets, stored_pet) -> None:
        with pytest.raises(ForbiddenError):
            service.delete_pet(pet_id=stored_pet.pet_id, principal=STRANGER)

        assert stored_pet.pet_id in memory_pets.items


class TestListPets:
    @pytest.fixture
    def catalogue(self, memory_pets, make_pet) -> None:
        for pet in (
            make_pet(pet_id="pet-1", pet_type="dog", price=Decimal("300"), created_at="2024-01-01T00:00:00Z"),
            make_pet(pet_id="pet-2", pet_type="cat", price=Decimal("50"), created_at="2024-03-01T00:00:00Z", featured=True),
            make_pet(pet_id="pet-3", pet_type="dog", price=Decimal("120"), created_at="2024-02-01T00:00:00Z", featured=True),
        ):
            memory_pets.items[pet.pet_id] = pet.to_item()

    def test_lists_everything(self, service, catalogue) -> None:
        assert sorted(pet.pet_id for pet in service.list_pets()) == ["pet-1", "pet-2", "pet-3"]

    def test_filters_by_type(self, service, catalogue) -> None:
        pets = service.list_pets(pet_type="DOG", sort="newest")

        assert [pet.pet_id for pet in pets] == ["pet-3", "pet-1"]

    def test_featured_only(self, service, catalogue) -> None:
        pets = service.list_pets(featured=True, sort="oldest")

        assert [pet.pet_id for pet in pets] == ["pet-3", "pet-2"]

    @pytest.mark.parametrize(
        ("sort", "expected"),
        [
            ("priceHigh", ["pet-1", "pet-3", "pet-2"]),
            ("priceLow", ["pet-2", "pet-3", "pet-1"]),
            ("newest", ["pet-2", "pet-3", "pet-1"]),
        ],
    )
    def test_sorting(self, service, catalogue, sort, expected) -> None:
        assert [pet.pet_id for pet in service.list_pets(sort=sort)] == expected

    def test_limit_applies_after_sorting(self, service, catalogue) -> None:
        pets = service.list_pets(sort="priceLow", limit=2)

        assert [pet.pet_id for pet in pets] == ["pet-2", "pet-3"]

    def test_unknown_type_raises_not_found(self, service, catalogue) -> None:
        with pytest.raises(NotFoundError) as exc:
            service.list_pets(pet_type="parrot")

        assert exc.value.error_code == "NO_PETS_FOUND"

    def test_empty_catalogue_is_not_an_error(self, service) -> None:
        assert service.list_pets() == []


class TestFeedback:
    def test_vote_is_saved(self, service, memory_pets, stored_pet) -> None:
        pet, current = service.vote_pet(pet_id=stored_pet.pet_id, principal=STRANGER, vote_type="up")

        assert current == "up"
        assert pet.votes.up == 1
        assert memory_pets.load_pet(pet_id=stored_pet.pet_id).user_vote("user-2") == "up"

    def test_repeat_vote_withdraws(self, service, memory_pets, stored_pet) -> None:
        service.vote_pet(pet_id=stored_pet.pet_id, principal=STRANGER, vote_type="up")
        _, current = service.vote_pet(pet_id=stored_pet.pet_id, principal=STRANGER, vote_type="up")

        assert current is None
        assert memory_pets.load_pet(pet_id=stored_pet.pet_id).votes.up == 0

    def test_rate_then_update(self, service, memory_pets, stored_pet) -> None:
        _, replaced = service.rate_pet(pet_id=stored_pet.pet_id, principal=STRANGER, rating=5, comment="Lovely")
        pet, replaced_again = service.rate_pet(pet_id=stored_pet.pet_id, principal=STRANGER, rating=2)

        assert (replaced, replaced_again) == (False, True)
        assert pet.average_rating == 2.0
        assert len(memory_pets.load_pet(pet_id=stored_pet.pet_id).ratings) == 1

    def test_feedback_on_missing_pet(self, service) -> None:
        with pytest.raises(NotFoundError):
            service.vote_pet(pet_id="pet-missing", principal=STRANGER, vote_type="down")


class TestFeaturedFlag:
    def test_owner_cannot_feature(self, service, memory_pets, stored_pet) -> None:
        with pytest.raises(ForbiddenError):
            service.update_pet(pet_id=stored_pet.pet_id, principal=OWNER, changes={"featured": True})

        assert memory_pets.load_pet(pet_id=stored_pet.pet_id).featured is False

    def test_admin_can_feature(self, service, memory_pets, stored_pet) -> None:
        service.update_pet(pet_id=stored_pet.pet_id, principal=ADMIN, changes={"featured": True})

        assert memory_pets.load_pet(pet_id=stored_pet.pet_id).featured is True
