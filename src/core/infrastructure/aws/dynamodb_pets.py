"""DynamoDB-backed implementation of PetRepository."""

from typing import Any

from aws_lambda_powertools import Logger
from boto3.dynamodb.conditions import Attr, ConditionBase
from botocore.exceptions import ClientError
from pydantic import ValidationError as PydanticValidationError

from core.infrastructure.adapters.dynamodb_adapter import DynamoDBAdapter, DynamoDBAdapterProtocol
from core.models.errors import NotFoundError, PersistenceError
from core.models.pet import Pet
from core.repositories.pet_repository import PetRepository
from core.utils.constants import (
    ERROR_CODE_PET_DELETE_FAILED,
    ERROR_CODE_PET_FETCH_FAILED,
    ERROR_CODE_PET_LIST_FAILED,
    ERROR_CODE_PET_NOT_FOUND,
    ERROR_CODE_PET_SAVE_FAILED,
)
from core.utils.time import utc_now_iso

logger = Logger(UTC=True)

PET_KEY_ATTRIBUTE = "petId"


class DynamoDBPetRepository(PetRepository):
    """DynamoDB-backed pet storage with error handling.

    All boto3 errors are caught and translated into
    domain-specific errors with stable semantics.
    """

    def __init__(self, adapter: DynamoDBAdapterProtocol | None = None) -> None:
        """Initialize with DynamoDB adapter."""
        self._db: DynamoDBAdapterProtocol = adapter or DynamoDBAdapter()

    def load_pet(self, *, pet_id: str) -> Pet:
        logger.debug("Loading pet", extra={"pet_id": pet_id})

        try:
            response = self._db.get_item(key={PET_KEY_ATTRIBUTE: pet_id}, consistent_read=True)
        except ClientError as exc:
            logger.error("DynamoDB get_item failed", extra={"pet_id": pet_id})
            raise PersistenceError(
                message="Unable to retrieve pet",
                error_code=ERROR_CODE_PET_FETCH_FAILED,
                details={"pet_id": pet_id},
            ) from exc
        except Exception as exc:
            logger.exception("Unexpected error loading pet")
            raise PersistenceError(
                message="Unable to retrieve pet",
                error_code=ERROR_CODE_PET_FETCH_FAILED,
                details={"pet_id": pet_id},
            ) from exc

        item: dict[str, Any] | None = response.get("Item")
        if not item:
            raise NotFoundError(
                message="Pet not found",
                error_code=ERROR_CODE_PET_NOT_FOUND,
                details={"pet_id": pet_id},
            )

        try:
            return Pet.model_validate(item)
        except PydanticValidationError as exc:
            logger.error(
                "Stored pet record is malformed",
                extra={"pet_id": pet_id, "errors": exc.errors()},
            )
            raise PersistenceError(
                message="Stored pet record is invalid",
                error_code=ERROR_CODE_PET_FETCH_FAILED,
                details={"pet_id": pet_id},
            ) from exc

    def save_pet(self, *, pet: Pet) -> Pet:
        """Write the whole pet document (last write wins)."""
        now = utc_now_iso()
        if pet.created_at is None:
            pet.created_at = now
        pet.updated_at = now

        logger.debug(
            "Saving pet",
            extra={"pet_id": pet.pet_id, "image_count": len(pet.images)},
        )

        try:
            self._db.put_item(item=pet.to_item())
        except ClientError as exc:
            logger.error("DynamoDB put_item failed", extra={"pet_id": pet.pet_id})
            raise PersistenceError(
                message="Unable to save pet at this time",
                error_code=ERROR_CODE_PET_SAVE_FAILED,
                details={"pet_id": pet.pet_id},
            ) from exc
        except Exception as exc:
            logger.exception("Unexpected error saving pet")
            raise PersistenceError(
                message="Unable to save pet at this time",
                error_code=ERROR_CODE_PET_SAVE_FAILED,
                details={"pet_id": pet.pet_id},
            ) from exc

        logger.info("Pet saved", extra={"pet_id": pet.pet_id})
        return pet

    def delete_pet(self, *, pet_id: str) -> None:
        logger.debug("Deleting pet", extra={"pet_id": pet_id})

        try:
            self._db.delete_item(key={PET_KEY_ATTRIBUTE: pet_id})
        except ClientError as exc:
            logger.error("DynamoDB delete_item failed", extra={"pet_id": pet_id})
            raise PersistenceError(
                message="Unable to delete pet",
                error_code=ERROR_CODE_PET_DELETE_FAILED,
                details={"pet_id": pet_id},
            ) from exc
        except Exception as exc:
            logger.exception("Unexpected error deleting pet")
            raise PersistenceError(
                message="Unable to delete pet",
                error_code=ERROR_CODE_PET_DELETE_FAILED,
                details={"pet_id": pet_id},
            ) from exc

        logger.info("Pet deleted", extra={"pet_id": pet_id})

    def list_pets(self, *, pet_type: str | None = None, featured: bool | None = None) -> list[Pet]:
        """Scan the table page by page, applying the filters server side.

        Malformed records are skipped with an error log rather than failing
        the whole listing.
        """
        filters = {"pet_type": pet_type, "featured": featured}
        logger.debug("Listing pets", extra=filters)

        condition: ConditionBase | None = None
        if pet_type is not None:
            condition = Attr("type").eq(pet_type.lower())
        if featured is not None:
            featured_condition = Attr("featured").eq(featured)
            condition = featured_condition if condition is None else condition & featured_condition

        scan_kwargs: dict[str, Any] = {}
        if condition is not None:
            scan_kwargs["FilterExpression"] = condition

        items: list[dict[str, Any]] = []
        last_evaluated_key: dict[str, Any] | None = None

        try:
            while True:
                if last_evaluated_key:
                    scan_kwargs["ExclusiveStartKey"] = last_evaluated_key

                response = self._db.scan(**scan_kwargs)
                items.extend(response.get("Items", []))

                last_evaluated_key = response.get("LastEvaluatedKey")
                if not last_evaluated_key:
                    break
        except ClientError as exc:
            logger.error("DynamoDB scan failed", extra=filters)
            raise PersistenceError(
                message="Unable to list pets",
                error_code=ERROR_CODE_PET_LIST_FAILED,
                details=filters,
            ) from exc
        except Exception as exc:
            logger.exception("Unexpected error listing pets")
            raise PersistenceError(
                message="Unable to list pets",
                error_code=ERROR_CODE_PET_LIST_FAILED,
                details=filters,
            ) from exc

        pets: list[Pet] = []
        for item in items:
            try:
                pets.append(Pet.model_validate(item))
            except PydanticValidationError as exc:
                logger.error(
                    "Skipping malformed pet record",
                    extra={"pet_id": item.get(PET_KEY_ATTRIBUTE), "errors": exc.errors()},
                )

        logger.info("Pets listed", extra={**filters, "count": len(pets)})
        return pets
