"""
Lambda handler responsible for deleting a pet and all of its images.
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
from core.utils.time import utc_now_iso

logger = Logger(UTC=True)
tracer = Tracer()
metrics = Metrics()


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Delete a pet (creator or admin only).

    Every stored image is deleted concurrently first; objects that cannot be
    deleted are logged and left behind so the pet deletion still succeeds.
    """
    logger.info("Received delete pet request", extra=request_log_context(event, context))

    principal = require_principal(event)
    pet_id = path_parameter(event, "pet_id")

    image_count = build_pet_gallery_service().delete_pet(pet_id=pet_id, principal=principal)

    metrics.add_metric(name="PetsDeleted", unit=MetricUnit.Count, value=1)

    return ResponseBuilder.ok(
        {
            "message": "Pet deleted successfully",
            "pet_id": pet_id,
            "images_deleted": image_count,
            "deleted_at": utc_now_iso(),
        }
    )
