import json
from decimal import Decimal
from unittest.mock import patch

import pytest

from handlers.list_pets.handler import handler


def parse_body(response):
    return json.loads(response["body"])


@pytest.fixture
def catalogue(memory_pets, make_pet):
    for pet in (
        make_pet(pet_id="pet-1", pet_type="dog", price=Decimal("300"), created_at="2024-01-01T00:00:00Z"),
        make_pet(pet_id="pet-2", pet_type="cat", price=Decimal("50"), featured=True),
        make_pet(pet_id="pet-3", pet_type="dog", price=Decimal("120"), featured=True),
    ):
        memory_pets.items[pet.pet_id] = pet.to_item()


def invoke(event, context, gallery):
    with patch("handlers.list_pets.handler.build_pet_gallery_service", return_value=gallery):
        return handler(event, context)


class TestListPetsHandler:
    def test_lists_all_pets_anonymously(self, api_event, lambda_context, gallery, catalogue) -> None:
        response = invoke(api_event(method="GET", user_id=None), lambda_context, gallery)

        assert response["statusCode"] == 200
        body = parse_body(response)
        assert body["count"] == 3
        assert {pet["petId"] for pet in body["pets"]} == {"pet-1", "pet-2", "pet-3"}
        assert body["pets"][0]["averageRating"] == 0.0

    def test_query_filters_and_sort(self, api_event, lambda_context, gallery, catalogue) -> None:
        event = api_event(method="GET", query={"type": "dog", "sort": "priceLow"})

        body = parse_body(invoke(event, lambda_context, gallery))

        assert [pet["petId"] for pet in body["pets"]] == ["pet-3", "pet-1"]

    def test_type_path_parameter(self, api_event, lambda_context, gallery, catalogue) -> None:
        event = api_event(method="GET", path={"type": "Cat"})

        body = parse_body(invoke(event, lambda_context, gallery))

        assert [pet["petId"] for pet in body["pets"]] == ["pet-2"]

    def test_unknown_type_returns_404(self, api_event, lambda_context, gallery, catalogue) -> None:
        event = api_event(method="GET", path={"type": "parrot"})

        response = invoke(event, lambda_context, gallery)

        assert response["statusCode"] == 404
        assert parse_body(response)["error"] == "NO_PETS_FOUND"

    def test_featured_route(self, api_event, lambda_context, gallery, catalogue) -> None:
        event = api_event(method="GET")
        event["resource"] = "/pets/featured"

        body = parse_body(invoke(event, lambda_context, gallery))

        assert sorted(pet["petId"] for pet in body["pets"]) == ["pet-2", "pet-3"]
        assert all(pet["featured"] for pet in body["pets"])

    def test_featured_route_respects_limit(self, api_event, lambda_context, gallery, catalogue) -> None:
        event = api_event(method="GET", query={"limit": "1"})
        event["resource"] = "/pets/featured"

        body = parse_body(invoke(event, lambda_context, gallery))

        assert body["count"] == 1

    @pytest.mark.parametrize("query", [{"sort": "cheapest"}, {"limit": "0"}, {"limit": "501"}])
    def test_invalid_query_returns_422(self, api_event, lambda_context, gallery, catalogue, query) -> None:
        response = invoke(api_event(method="GET", query=query), lambda_context, gallery)

        assert response["statusCode"] == 422
        assert parse_body(response)["error"] == "VALIDATION_FAILED"
