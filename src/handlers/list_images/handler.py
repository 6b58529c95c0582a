"""
Lambda handler responsible for listing stored images under a folder.
"""

from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.utilities.typing import LambdaContext

from core.infrastructure.aws.s3_object_store import S3ObjectStore
from core.utils.authorization import require_principal
from core.utils.decorators import api_gateway_handler
from core.utils.request import query_parameters, request_log_context
from core.utils.response import ResponseBuilder
from core.utils.validators import validate_request

from .models import ListImagesRequest, ListImagesResponse

logger = Logger(UTC=True)
tracer = Tracer()
metrics = Metrics()


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle requests to list images.

    Query parameters:
    - folder: key prefix (a trailing slash is added when missing)
    - limit: 1-1000, default 100
    """
    logger.info("Received list images request", extra=request_log_context(event, context))

    require_principal(event)
    request = validate_request(ListImagesRequest, query_parameters(event))

    prefix = request.folder.strip("/")
    if prefix:
        prefix = f"{prefix}/"

    store = S3ObjectStore()
    images = store.list_objects(prefix=prefix, limit=request.limit)

    response = ListImagesResponse(images=images, count=len(images))

    return ResponseBuilder.ok(response.model_dump())
