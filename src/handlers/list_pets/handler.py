"""
Lambda handler listing pets: all, by type, or featured.
"""

from typing import Any

from aws_lambda_powertools import Logger, Tracer
from aws_lambda_powertools.utilities.typing import LambdaContext

from core.services.pet_gallery import build_pet_gallery_service
from core.utils.constants import FEATURED_PETS_LIMIT
from core.utils.decorators import api_gateway_handler
from core.utils.request import query_parameters, request_log_context
from core.utils.response import ResponseBuilder
from core.utils.validators import validate_request

from .models import ListPetsRequest, ListPetsResponse

logger = Logger(UTC=True)
tracer = Tracer()

FEATURED_RESOURCE_SUFFIX = "/featured"


@api_gateway_handler
@tracer.capture_lambda_handler
def handler(event: dict[str, Any], context: LambdaContext) -> dict[str, Any]:
    """
    Public pet listing.

    Serves three routes:
    - GET /pets?type=&featured=&sort=&limit=
    - GET /pets/type/{type}, 404 when no pet has that type
    - GET /pets/featured, featured pets only, at most 10 unless a limit is given

    Sort options: newest, oldest, priceHigh, priceLow.
    """
    logger.info("Received list pets request", extra=request_log_context(event, context))

    params: dict[str, Any] = query_parameters(event)

    path_type = (event.get("pathParameters") or {}).get("type")
    if path_type:
        params["type"] = path_type

    if str(event.get("resource", "")).endswith(FEATURED_RESOURCE_SUFFIX):
        params["featured"] = True
        params.setdefault("limit", FEATURED_PETS_LIMIT)

    request = validate_request(ListPetsRequest, params)

    pets = build_pet_gallery_service().list_pets(
        pet_type=request.pet_type,
        featured=request.featured,
        sort=request.sort,
        limit=request.limit,
    )

    response = ListPetsResponse(pets=[pet.to_response() for pet in pets], count=len(pets))

    return ResponseBuilder.ok(response.model_dump())
