"""
Lambda handler reporting whether the image bucket is reachable.
"""

from http import HTTPStatus
from typing import Any

from aws_lambda_powertools import Logger, Tracer
from aws_lambda_powertools.utilities.typing import LambdaContext

from core.infrastructure.aws.s3_object_store import S3ObjectStore
from core.utils.constants import ERROR_CODE_STORE_UNAVAILABLE
from core.utils.decorators import api_gateway_handler
from core.utils.request import request_log_context
from core.utils.response import ResponseBuilder
from core.utils.time import utc_now_iso

logger = Logger(UTC=True)
tracer = Tracer()


@api_gateway_handler
@tracer.capture_lambda_handler
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """Public health probe: 200 when the bucket exists, 503 otherwise."""
    logger.debug("Received bucket health request", extra=request_log_context(event, context))

    store = S3ObjectStore()

    if not store.bucket_exists():
        return ResponseBuilder.error(
            status=HTTPStatus.SERVICE_UNAVAILABLE,
            error=ERROR_CODE_STORE_UNAVAILABLE,
            message="Image storage is unavailable",
            details={"bucket": store.bucket_name},
        )

    return ResponseBuilder.ok(
        {
            "status": "healthy",
            "bucket": store.bucket_name,
            "timestamp": utc_now_iso(),
        }
    )
