"""
Lambda handler returning a pet with its image gallery.
"""

from typing import Any

from aws_lambda_powertools import Logger, Tracer
from aws_lambda_powertools.utilities.typing import LambdaContext

from core.services.pet_gallery import build_pet_gallery_service
from core.utils.decorators import api_gateway_handler
from core.utils.request import path_parameter, request_log_context
from core.utils.response import ResponseBuilder

logger = Logger(UTC=True)
tracer = Tracer()


@api_gateway_handler
@tracer.capture_lambda_handler
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """Public read of a pet; 404 when it does not exist."""
    logger.info("Received get pet request", extra=request_log_context(event, context))

    pet_id = path_parameter(event, "pet_id")
    pet = build_pet_gallery_service().get_pet(pet_id)

    return ResponseBuilder.ok({"pet": pet.to_response()})
