import json
from unittest.mock import patch

import pytest

from handlers.rate_pet.handler import handler


def parse_body(response):
    return json.loads(response["body"])


def invoke(event, context, gallery):
    with patch("handlers.rate_pet.handler.build_pet_gallery_service", return_value=gallery):
        return handler(event, context)


class TestRatePetHandler:
    def test_new_rating(self, api_event, lambda_context, gallery, stored_pet) -> None:
        event = api_event(path={"pet_id": "pet-42"}, body={"rating": 5, "comment": " Lovely dog "}, user_id="user-2")

        response = invoke(event, lambda_context, gallery)

        assert response["statusCode"] == 200
        body = parse_body(response)
        assert body["message"] == "Rating submitted successfully"
        assert body["averageRating"] == 5.0
        assert body["totalRatings"] == 1
        assert body["userRating"] == 5
        assert body["ratings"][0]["userId"] == "user-2"
        assert body["ratings"][0]["comment"] == "Lovely dog"

    def test_second_rating_replaces_first(self, api_event, lambda_context, gallery, stored_pet) -> None:
        for value in (5, 2):
            event = api_event(path={"pet_id": "pet-42"}, body={"rating": value}, user_id="user-2")
            response = invoke(event, lambda_context, gallery)

        body = parse_body(response)
        assert body["message"] == "Rating updated successfully"
        assert body["averageRating"] == 2.0
        assert body["totalRatings"] == 1

    def test_average_across_users(self, api_event, lambda_context, gallery, stored_pet) -> None:
        for user, value in (("user-2", 4), ("user-3", 5)):
            event = api_event(path={"pet_id": "pet-42"}, body={"rating": value}, user_id=user)
            response = invoke(event, lambda_context, gallery)

        assert parse_body(response)["averageRating"] == 4.5

    @pytest.mark.parametrize("body", [{"rating": 6}, {"rating": 0}, {"rating": 4.5}, {"rating": "4"}, {}])
    def test_invalid_rating_returns_422(self, api_event, lambda_context, gallery, memory_pets, stored_pet, body) -> None:
        response = invoke(api_event(path={"pet_id": "pet-42"}, body=body), lambda_context, gallery)

        assert response["statusCode"] == 422
        assert parse_body(response)["error"] == "VALIDATION_FAILED"
        assert memory_pets.saves == 0

    def test_comment_too_long_returns_422(self, api_event, lambda_context, gallery, stored_pet) -> None:
        event = api_event(path={"pet_id": "pet-42"}, body={"rating": 3, "comment": "x" * 501})

        assert invoke(event, lambda_context, gallery)["statusCode"] == 422

    def test_anonymous_rating_is_rejected(self, api_event, lambda_context, gallery, stored_pet) -> None:
        event = api_event(path={"pet_id": "pet-42"}, body={"rating": 3}, user_id=None)

        assert invoke(event, lambda_context, gallery)["statusCode"] == 403
