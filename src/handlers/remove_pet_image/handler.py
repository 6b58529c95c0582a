"""
Lambda handler responsible for removing an image from a pet's gallery.
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

logger = Logger(UTC=True)
tracer = Tracer()
metrics = Metrics()


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Remove an image from a pet.

    The descriptor is always removed, even when the stored object cannot be
    deleted. If it was the main image the earliest remaining image becomes
    main.
    """
    logger.info("Received remove pet image request", extra=request_log_context(event, context))

    principal = require_principal(event)
    pet_id = path_parameter(event, "pet_id")
    object_key = path_parameter(event, "key")

    pet = build_pet_gallery_service().remove_image(
        pet_id=pet_id,
        principal=principal,
        object_key=object_key,
    )

    metrics.add_metric(name="ImagesDeleted", unit=MetricUnit.Count, value=1)

    return ResponseBuilder.ok({"message": "Image removed successfully", "pet": pet.to_response()})
