"""
Lambda handler recording a user's star rating of a pet.
"""

from typing import Any

from aws_lambda_powertools import Logger, Metrics, Tracer
from aws_lambda_powertools.metrics import MetricUnit
from aws_lambda_powertools.utilities.typing import LambdaContext

from core.services.pet_gallery import build_pet_gallery_service
from core.utils.authorization import require_principal
from core.utils.constants import RECENT_RATINGS_COUNT
from core.utils.decorators import api_gateway_handler
from core.utils.request import path_parameter, request_log_context
from core.utils.response import ResponseBuilder
from core.utils.validators import parse_json_body, validate_request

from .models import RatePetRequest

logger = Logger(UTC=True)
tracer = Tracer()
metrics = Metrics()


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """Add or replace the caller's 1-5 rating with an optional comment."""
    logger.info("Received rate request", extra=request_log_context(event, context))

    principal = require_principal(event)
    pet_id = path_parameter(event, "pet_id")
    request = validate_request(RatePetRequest, parse_json_body(event))

    pet, replaced = build_pet_gallery_service().rate_pet(
        pet_id=pet_id,
        principal=principal,
        rating=request.rating,
        comment=request.comment,
    )

    metrics.add_metric(name="PetRatings", unit=MetricUnit.Count, value=1)

    recent = pet.ratings[-RECENT_RATINGS_COUNT:]

    return ResponseBuilder.ok(
        {
            "message": "Rating updated successfully" if replaced else "Rating submitted successfully",
            "averageRating": pet.average_rating,
            "totalRatings": len(pet.ratings),
            "userRating": request.rating,
            "ratings": [rating.model_dump(by_alias=True) for rating in recent],
        }
    )
