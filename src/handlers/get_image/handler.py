"""
Lambda handler responsible for signed image access.
"""

from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.utilities.typing import LambdaContext

from core.utils.authorization import require_principal
from core.utils.decorators import api_gateway_handler
from core.utils.request import path_parameter, query_flag, query_parameters, request_log_context
from core.utils.response import ResponseBuilder
from core.utils.validators import validate_request

from .models import GetImageRequest, GetImageResponse
from .service import GetService

logger = Logger(UTC=True)
tracer = Tracer()
metrics = Metrics()


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle signed URL requests for a stored image.

    - ``ttl_minutes``: URL lifetime, default 60
    - ``metadata=true``: include the stored object metadata
    """
    logger.info("Received signed URL request", extra=request_log_context(event, context))

    require_principal(event)

    query_params = query_parameters(event)
    params: dict[str, Any] = {
        "key": path_parameter(event, "key"),
        "metadata": query_flag(query_params, "metadata"),
    }
    if query_params.get("ttl_minutes"):
        params["ttl_minutes"] = query_params["ttl_minutes"]

    request = validate_request(GetImageRequest, params)

    url, metadata = GetService().generate_image_url(
        request.key,
        ttl_minutes=request.ttl_minutes,
        include_metadata=request.metadata,
    )

    response = GetImageResponse(
        key=request.key,
        url=url,
        expires_in_minutes=request.ttl_minutes,
        metadata=metadata,
    )

    return ResponseBuilder.ok(response.model_dump(exclude_none=True))
