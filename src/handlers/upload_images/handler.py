"""
Lambda handler responsible for multi-file image uploads.
"""

from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.metrics import MetricUnit
from aws_lambda_powertools.utilities.typing import LambdaContext

from core.services.image_assets import build_image_asset_manager
from core.services.pet_gallery import build_pet_gallery_service
from core.utils.authorization import require_principal
from core.utils.constants import ERROR_CODE_PARTIAL_FAILURE
from core.utils.decorators import api_gateway_handler
from core.utils.request import request_log_context
from core.utils.response import ResponseBuilder
from core.utils.validators import parse_json_body, validate_request

from .models import BatchUploadRequest, BatchUploadResponse
from .service import BatchUploadService

logger = Logger(UTC=True)
tracer = Tracer()
metrics = Metrics()


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle batch upload requests (up to five files).

    Files are uploaded one by one and fail independently:
    - 201 when every file was stored
    - 207 when some files failed
    - 422 when every file failed

    With ``pet_id`` the stored files are attached to that pet's gallery,
    which requires the caller to be the pet's creator or an admin.
    """
    logger.info("Received batch upload request", extra=request_log_context(event, context))

    principal = require_principal(event)
    request = validate_request(BatchUploadRequest, parse_json_body(event))

    assets = build_image_asset_manager()
    gallery = build_pet_gallery_service(assets=assets) if request.pet_id else None

    result, pet = BatchUploadService(assets, gallery).upload(
        files=request.files,
        folder=request.folder,
        principal=principal,
        pet_id=request.pet_id,
    )

    metrics.add_metric(name="ImagesUploaded", unit=MetricUnit.Count, value=len(result.succeeded))
    if result.failed:
        metrics.add_metric(name="ImageUploadFailures", unit=MetricUnit.Count, value=len(result.failed))

    partial_failure = result.partial_failure()

    if not result.succeeded:
        logger.warning("Every file in the batch failed", extra={"failed": len(result.failed)})
        return ResponseBuilder.validation_error(
            message="No images could be uploaded",
            error=ERROR_CODE_PARTIAL_FAILURE,
            details={"failed": [item.model_dump(by_alias=True) for item in result.failed]},
        )

    response = BatchUploadResponse(
        message=partial_failure.message if partial_failure else "Images uploaded successfully",
        succeeded=[d.model_dump(by_alias=True, mode="json") for d in result.succeeded],
        failed=[item.model_dump(by_alias=True) for item in result.failed],
        total=result.total,
        pet=pet.to_response() if pet else None,
    )

    if partial_failure:
        return ResponseBuilder.multi_status(response.model_dump())

    return ResponseBuilder.created(response.model_dump())
