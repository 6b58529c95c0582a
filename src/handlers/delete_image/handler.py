"""
Lambda handler responsible for deleting a stored image object.
"""

from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.metrics import MetricUnit
from aws_lambda_powertools.utilities.typing import LambdaContext

from core.utils.authorization import require_principal
from core.utils.decorators import api_gateway_handler
from core.utils.request import path_parameter, request_log_context
from core.utils.response import ResponseBuilder
from core.utils.validators import validate_request

from .models import DeleteImageRequest, DeleteImageResponse
from .service import DeleteService

logger = Logger(UTC=True)
tracer = Tracer()
metrics = Metrics()


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle image deletion requests.

    This function:
    - Extracts the URL-encoded object key from the path
    - Delegates the idempotent delete to the service layer
    """
    logger.info("Received image delete request", extra=request_log_context(event, context))

    require_principal(event)
    request = validate_request(DeleteImageRequest, {"key": path_parameter(event, "key")})

    delete_result = DeleteService().delete_image(request.key)
    metrics.add_metric(name="ImagesDeleted", unit=MetricUnit.Count, value=1)

    response = DeleteImageResponse(
        key=delete_result["key"],
        message="Image deleted successfully",
        deleted_at=delete_result["deleted_at"],
    )

    return ResponseBuilder.ok(response.model_dump())
