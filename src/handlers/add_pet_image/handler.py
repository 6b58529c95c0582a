"""
Lambda handler responsible for adding an image to a pet's gallery.
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

from .models import AddPetImageRequest

logger = Logger(UTC=True)
tracer = Tracer()
metrics = Metrics()


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """Upload an image and attach it to the pet (creator or admin only)."""
    logger.info("Received add pet image request", extra=request_log_context(event, context))

    principal = require_principal(event)
    pet_id = path_parameter(event, "pet_id")
    request = validate_request(AddPetImageRequest, parse_json_body(event))

    pet, descriptor = build_pet_gallery_service().add_image(
        pet_id=pet_id,
        principal=principal,
        upload=request.to_upload(),
        make_main=request.make_main,
    )

    metrics.add_metric(name="ImagesUploaded", unit=MetricUnit.Count, value=1)

    return ResponseBuilder.created(
        {
            "message": "Image added successfully",
            "image": descriptor.model_dump(by_alias=True, mode="json"),
            "pet": pet.to_response(),
        }
    )
