"""
Lambda handler responsible for creating a pet with an optional first image.
"""

from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.metrics import MetricUnit
from aws_lambda_powertools.utilities.typing import LambdaContext

from core.services.pet_gallery import build_pet_gallery_service
from core.utils.authorization import require_principal
from core.utils.decorators import api_gateway_handler
from core.utils.request import request_log_context
from core.utils.response import ResponseBuilder
from core.utils.validators import parse_json_body, validate_request

from .models import CreatePetRequest, PetResponse

logger = Logger(UTC=True)
tracer = Tracer()
metrics = Metrics()


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle pet creation.

    The image, if any, is uploaded first, then the pet is saved and the
    image's owner is filled in. If saving fails the upload is deleted
    before the error is returned.
    """
    logger.info("Received create pet request", extra=request_log_context(event, context))

    principal = require_principal(event)
    request = validate_request(CreatePetRequest, parse_json_body(event))

    service = build_pet_gallery_service()
    pet = service.create_pet(
        principal=principal,
        fields=request.pet_fields(),
        image=request.image.to_upload() if request.image else None,
    )

    metrics.add_metric(name="PetsCreated", unit=MetricUnit.Count, value=1)
    if pet.images:
        metrics.add_metric(name="ImagesUploaded", unit=MetricUnit.Count, value=len(pet.images))

    response = PetResponse(message="Pet created successfully", pet=pet.to_response())

    return ResponseBuilder.created(response.model_dump())
