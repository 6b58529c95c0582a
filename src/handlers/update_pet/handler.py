"""
Lambda handler responsible for updating a pet's fields and adding a new main image.
"""

from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.metrics import MetricUnit
from aws_lambda_powertools.utilities.typing import LambdaContext

from core.services.pet_gallery import build_pet_gallery_service
from core.utils.authorization import require_principal
from core.utils.decorators import api_gateway_handler
from core.utils.request import path_parameter, request_log_context
from core.utils.response import ResponseBuilder
from core.utils.validators import parse_json_body, validate_request

from .models import UpdatePetRequest

logger = Logger(UTC=True)
tracer = Tracer()
metrics = Metrics()


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle pet updates.

    Only the pet's creator or an admin may update it. An uploaded image is
    appended to the gallery as the new main image; existing images are kept.
    """
    logger.info("Received update pet request", extra=request_log_context(event, context))

    principal = require_principal(event)
    pet_id = path_parameter(event, "pet_id")
    request = validate_request(UpdatePetRequest, parse_json_body(event))

    pet = build_pet_gallery_service().update_pet(
        pet_id=pet_id,
        principal=principal,
        changes=request.changes(),
        image=request.image.to_upload() if request.image else None,
    )

    if request.image:
        metrics.add_metric(name="ImagesUploaded", unit=MetricUnit.Count, value=1)

    return ResponseBuilder.ok({"message": "Pet updated successfully", "pet": pet.to_response()})
