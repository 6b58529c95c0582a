import json
from http import HTTPStatus
from typing import Any, cast

import pytest

from core.models.errors import (
    FileSizeError,
    ForbiddenError,
    NotFoundError,
    ObjectStoreError,
    PartialFailureError,
    PersistenceError,
    PetGalleryError,
    StoreUnavailableError,
    ValidationError,
)
from core.utils.response import ResponseBuilder, status_for_error


def parse_body(resp: dict[str, Any]) -> dict[str, Any]:
    body = resp.get("body")
    if not body:
        return {}

    return cast(dict[str, Any], json.loads(body))


def test_ok_response() -> None:
    resp = ResponseBuilder.ok({"foo": "bar"}, request_id="req-1", cors_origin="*")
    parsed = parse_body(resp)

    assert resp["statusCode"] == HTTPStatus.OK
    assert parsed["foo"] == "bar"
    assert parsed["request_id"] == "req-1"
    assert resp["headers"]["Access-Control-Allow-Origin"] == "*"


def test_created_and_multi_status() -> None:
    assert ResponseBuilder.created({"id": 1})["statusCode"] == HTTPStatus.CREATED
    assert ResponseBuilder.multi_status({"id": 1})["statusCode"] == HTTPStatus.MULTI_STATUS


def test_no_content_response() -> None:
    resp = ResponseBuilder.no_content(cors_origin="https://example.com")

    assert resp["statusCode"] == HTTPStatus.NO_CONTENT
    assert resp["body"] == ""
    assert resp["headers"]["Access-Control-Allow-Origin"] == "https://example.com"


@pytest.mark.parametrize(
    "func,status,error_name",
    [
        (ResponseBuilder.bad_request, HTTPStatus.BAD_REQUEST, "BAD_REQUEST"),
        (ResponseBuilder.forbidden, HTTPStatus.FORBIDDEN, "FORBIDDEN"),
        (
            ResponseBuilder.internal_error,
            HTTPStatus.INTERNAL_SERVER_ERROR,
            "INTERNAL_SERVER_ERROR",
        ),
    ],
)
def test_error_responses_use_explicit_message(func, status, error_name) -> None:
    resp = func("bad", request_id="req-x", cors_origin="*")
    parsed = parse_body(resp)

    assert resp["statusCode"] == status
    assert parsed["error"] == error_name
    assert parsed["message"] == "bad"
    assert parsed["request_id"] == "req-x"
    assert "timestamp" in parsed


def test_validation_error() -> None:
    resp = ResponseBuilder.validation_error(
        message="Invalid input",
        details={"field": "name"},
        request_id="req-val",
    )
    parsed = parse_body(resp)

    assert resp["statusCode"] == HTTPStatus.UNPROCESSABLE_ENTITY
    assert parsed["error"] == "VALIDATION_FAILED"
    assert parsed["details"]["field"] == "name"


def test_body_serializes_decimals() -> None:
    from decimal import Decimal

    parsed = parse_body(ResponseBuilder.ok({"price": Decimal("9.50")}))

    assert parsed["price"] == "9.50"


@pytest.mark.parametrize(
    "error,status",
    [
        (ValidationError(message="x"), HTTPStatus.UNPROCESSABLE_ENTITY),
        (FileSizeError(message="x"), HTTPStatus.UNPROCESSABLE_ENTITY),
        (NotFoundError(message="x"), HTTPStatus.NOT_FOUND),
        (ForbiddenError(message="x"), HTTPStatus.FORBIDDEN),
        (StoreUnavailableError(message="x"), HTTPStatus.SERVICE_UNAVAILABLE),
        (ObjectStoreError(message="x"), HTTPStatus.INTERNAL_SERVER_ERROR),
        (PersistenceError(message="x"), HTTPStatus.INTERNAL_SERVER_ERROR),
        (PartialFailureError(message="x"), HTTPStatus.MULTI_STATUS),
        (PetGalleryError(message="x", error_code="OTHER"), HTTPStatus.INTERNAL_SERVER_ERROR),
    ],
)
def test_status_for_error(error: PetGalleryError, status: HTTPStatus) -> None:
    assert status_for_error(error) == status


def test_from_error_carries_code_and_details() -> None:
    resp = ResponseBuilder.from_error(
        NotFoundError(message="Pet not found", error_code="PET_NOT_FOUND", details={"pet_id": "p1"}),
        request_id="req-nf",
    )
    parsed = parse_body(resp)

    assert resp["statusCode"] == HTTPStatus.NOT_FOUND
    assert parsed["error"] == "PET_NOT_FOUND"
    assert parsed["message"] == "Pet not found"
    assert parsed["details"] == {"pet_id": "p1"}
    assert parsed["request_id"] == "req-nf"
