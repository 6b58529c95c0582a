"""
Lambda handler responsible for choosing a pet's main image.
"""

from typing import Any

from aws_lambda_powertools import Logger, Tracer
from aws_lambda_powertools.utilities.typing import LambdaContext

from core.services.pet_gallery import build_pet_gallery_service
from core.utils.authorization import require_principal
from core.utils.decorators import api_gateway_handler
from core.utils.request import path_parameter, request_log_context
from core.utils.response import ResponseBuilder
from core.utils.validators import parse_json_body, validate_request

from .models import SetMainImageRequest

logger = Logger(UTC=True)
tracer = Tracer()


@api_gateway_handler
@tracer.capture_lambda_handler
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """Make one gallery image the main image; 404 if the key is not in the gallery."""
    logger.info("Received set main image request", extra=request_log_context(event, context))

    principal = require_principal(event)
    pet_id = path_parameter(event, "pet_id")
    request = validate_request(SetMainImageRequest, parse_json_body(event))

    pet = build_pet_gallery_service().set_main_image(
        pet_id=pet_id,
        principal=principal,
        object_key=request.object_key,
    )

    return ResponseBuilder.ok({"message": "Main image updated", "pet": pet.to_response()})
