"""Request validation utilities."""

import base64
import binascii
import json
from pathlib import PurePosixPath
from typing import Any, TypeVar

from pydantic import BaseModel
from pydantic import ValidationError as PydanticValidationError

from core.models.errors import ValidationError
from core.utils.constants import ALLOWED_EXTENSIONS, MAX_FILE_SIZE, get_max_file_size_mb

ModelT = TypeVar("ModelT", bound=BaseModel)


def sanitize_validation_errors(errors: list[dict[str, Any]]) -> list[dict[str, str]]:
    """Sanitize Pydantic validation errors for API responses.

    Removes sensitive/internal fields like:
    - url
    - ctx
    - input
    - internal exception details
    """
    sanitized: list[dict[str, str]] = []

    for err in errors:
        field = ".".join(str(x) for x in err.get("loc", [])) or "body"
        raw_msg = err.get("msg", "Invalid value")

        # Remove noisy prefixes
        msg = raw_msg.replace("Value error,", "").strip()

        # Friendly rewrites for common cases
        msg_lower = msg.lower()
        if "base64" in msg_lower:
            msg = "File must be a valid Base64-encoded string"
        elif "field required" in msg_lower:
            msg = "This field is required"
        elif "type" in msg_lower:
            msg = "Invalid value type"

        sanitized.append(
            {
                "field": field,
                "message": msg,
            }
        )

    return sanitized


def validate_request(model: type[ModelT], data: dict[str, Any]) -> ModelT:
    """Validate request data against a Pydantic model.

    Raises:
        ValidationError: With sanitized field errors in ``details``
    """
    try:
        return model.model_validate(data)
    except PydanticValidationError as exc:
        raise ValidationError(
            message="Invalid request payload",
            details={"errors": sanitize_validation_errors(exc.errors())},
        ) from exc


def parse_json_body(event: dict[str, Any]) -> dict[str, Any]:
    """Decode the JSON object body of an API Gateway proxy event.

    Raises:
        ValidationError: If the body is not a JSON object
    """
    raw = event.get("body") or "{}"

    if event.get("isBase64Encoded"):
        try:
            raw = base64.b64decode(raw).decode("utf-8")
        except (binascii.Error, UnicodeDecodeError) as exc:
            raise ValidationError(message="Invalid request body encoding") from exc

    try:
        body = json.loads(raw)
    except json.JSONDecodeError as exc:
        raise ValidationError(message="Invalid JSON body") from exc

    if not isinstance(body, dict):
        raise ValidationError(message="Request body must be a JSON object")

    return body


def decode_base64_file(encoded: str) -> bytes:
    """Decode a base64 file payload, accepting an optional data URL prefix.

    Raises:
        ValidationError: If the payload is not valid base64
    """
    if encoded.startswith("data:") and "," in encoded:
        encoded = encoded.split(",", 1)[1]

    try:
        return base64.b64decode(encoded, validate=True)
    except (binascii.Error, ValueError) as exc:
        raise ValidationError(
            message="Invalid base64 encoded file",
            details={"encoding": "base64"},
        ) from exc


def check_image_name(value: str) -> str:
    """Field check: the file name carries an allowed image extension."""
    suffix = PurePosixPath(value).suffix.lower().lstrip(".")

    if not suffix:
        raise ValueError("Image name must have an extension")

    if suffix not in ALLOWED_EXTENSIONS:
        raise ValueError(
            f"Invalid image extension '{suffix}'. "
            f"Allowed extensions: {', '.join(sorted(ALLOWED_EXTENSIONS))}"
        )

    return value


def check_image_payload(value: str) -> str:
    """Field check: non-empty base64 that decodes within the size limit."""
    if not value:
        raise ValueError("file must not be empty")

    try:
        file_data = decode_base64_file(value)
    except ValidationError as exc:
        raise ValueError("Invalid base64 encoded file") from exc

    if not file_data:
        raise ValueError("Decoded file is empty")

    if len(file_data) > MAX_FILE_SIZE:
        raise ValueError(f"File size exceeds {get_max_file_size_mb()}MB limit")

    return value
