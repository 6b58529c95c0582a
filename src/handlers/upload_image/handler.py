"""
Lambda handler responsible for uploading a single image to the bucket.
"""

from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.metrics import MetricUnit
from aws_lambda_powertools.utilities.typing import LambdaContext

from core.services.image_assets import build_image_asset_manager
from core.utils.authorization import require_principal
from core.utils.decorators import api_gateway_handler
from core.utils.request import request_log_context
from core.utils.response import ResponseBuilder
from core.utils.validators import decode_base64_file, parse_json_body, validate_request

from .models import ImageUploadRequest, ImageUploadResponse

logger = Logger(UTC=True)
tracer = Tracer()
metrics = Metrics()


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle image upload requests.

    The handler decodes the base64-encoded image, uploads it with a
    best-effort thumbnail and returns its descriptor. The image is not
    attached to any pet; ``pet_id`` only becomes the key's owner segment.

    Expected API Gateway event structure:
    {
        "body": "{\"file\": \"...\", \"original_name\": \"rex.png\", \"folder\": \"pets\"}",
        "requestContext": {"authorizer": {"user_id": "...", "role": "..."}}
    }
    """
    logger.info("Received image upload request", extra=request_log_context(event, context))

    principal = require_principal(event)
    request = validate_request(ImageUploadRequest, parse_json_body(event))

    assets = build_image_asset_manager()
    descriptor = assets.upload_one(
        decode_base64_file(request.file),
        request.original_name,
        request.folder,
        request.pet_id,
        thumbnail=True,
    )

    metrics.add_metric(name="ImagesUploaded", unit=MetricUnit.Count, value=1)
    logger.info(
        "Image upload completed",
        extra={"key": descriptor.object_key, "user_id": principal.user_id},
    )

    response = ImageUploadResponse(
        message="Image uploaded successfully",
        image=descriptor.model_dump(by_alias=True, mode="json"),
    )

    return ResponseBuilder.created(response.model_dump())
