"""
Lambda handler recording a user's up or down vote on a pet.
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
from core.utils.validators import parse_json_body, validate_request

from .models import VotePetRequest

logger = Logger(UTC=True)
tracer = Tracer()
metrics = Metrics()


@api_gateway_handler
@tracer.capture_lambda_handler
@metrics.log_metrics()
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Handle a vote on a pet.

    Each user holds at most one vote. Sending the same vote again withdraws
    it; sending the other vote switches it.
    """
    logger.info("Received vote request", extra=request_log_context(event, context))

    principal = require_principal(event)
    pet_id = path_parameter(event, "pet_id")
    request = validate_request(VotePetRequest, parse_json_body(event))

    pet, user_vote = build_pet_gallery_service().vote_pet(
        pet_id=pet_id,
        principal=principal,
        vote_type=request.vote_type,
    )

    metrics.add_metric(name="PetVotes", unit=MetricUnit.Count, value=1)

    return ResponseBuilder.ok(
        {
            "message": "Vote recorded successfully",
            "votes": pet.votes.model_dump(),
            "userVote": user_vote,
        }
    )
