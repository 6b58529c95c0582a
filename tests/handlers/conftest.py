import base64
import json
from collections.abc import Callable
from types import SimpleNamespace
from typing import Any

import pytest

from core.services.image_assets import ImageAssetManager
from core.services.pet_gallery import PetGalleryService


@pytest.fixture
def lambda_context(monkeypatch):
    context = SimpleNamespace(
        aws_request_id="test-request-id",
        function_name="test-function",
        memory_limit_in_mb=256,
        invoked_function_arn="arn:aws:lambda:us-east-1:000000000000:function:test",
        log_group_name="/aws/lambda/test-function",
        log_stream_name="2024/01/01/[$LATEST]test",
    )

    monkeypatch.setattr(
        "aws_lambda_powertools.utilities.typing.LambdaContext",
        lambda: context,
        raising=False,
    )

    return context


@pytest.fixture
def api_event() -> Callable[..., dict[str, Any]]:
    """
    Build an API Gateway proxy event.

    Usage:
        event = api_event(body={"object_key": "k"}, path={"pet_id": "pet-42"})
        anonymous = api_event(user_id=None)
    """

    def _make(
        *,
        body: dict[str, Any] | None = None,
        path: dict[str, str] | None = None,
        query: dict[str, str] | None = None,
        user_id: str | None = "user-1",
        role: str | None = None,
        method: str = "POST",
    ) -> dict[str, Any]:
        authorizer: dict[str, Any] = {}
        if user_id:
            authorizer["user_id"] = user_id
        if role:
            authorizer["role"] = role

        return {
            "httpMethod": method,
            "body": json.dumps(body) if body is not None else None,
            "pathParameters": path,
            "queryStringParameters": query,
            "headers": {"Content-Type": "application/json"},
            "requestContext": {"authorizer": authorizer, "requestId": "api-request-id"},
        }

    return _make


@pytest.fixture
def encode() -> Callable[[bytes], str]:
    return lambda data: base64.b64encode(data).decode("utf-8")


@pytest.fixture
def assets(memory_store) -> ImageAssetManager:
    return ImageAssetManager(memory_store)


@pytest.fixture
def gallery(memory_pets, assets) -> PetGalleryService:
    return PetGalleryService(memory_pets, assets)


@pytest.fixture
def stored_pet(memory_pets, make_pet):
    pet = make_pet()
    memory_pets.items[pet.pet_id] = pet.to_item()
    return pet
