"""Helpers for reading API Gateway proxy events."""

from typing import Any
from urllib.parse import unquote

from aws_lambda_powertools.utilities.typing import LambdaContext

from core.models.errors import ValidationError


def request_log_context(event: dict[str, Any], context: LambdaContext | Any) -> dict[str, Any]:
    """Structured fields logged when a handler receives a request."""
    return {
        "http_method": event.get("httpMethod"),
        "path": event.get("path"),
        "query_params": event.get("queryStringParameters"),
        "request_id": getattr(context, "aws_request_id", None),
        "function_name": getattr(context, "function_name", None),
        "remaining_time_ms": context.get_remaining_time_in_millis()
        if hasattr(context, "get_remaining_time_in_millis")
        else None,
    }


def path_parameter(event: dict[str, Any], name: str) -> str:
    """Return a URL-decoded path parameter.

    Object keys contain slashes, so clients send them percent-encoded.

    Raises:
        ValidationError: If the parameter is missing or blank
    """
    value = (event.get("pathParameters") or {}).get(name)
    if not value or not str(value).strip():
        raise ValidationError(
            message=f"Missing path parameter '{name}'",
            details={"parameter": name},
        )
    return unquote(str(value)).strip()


def query_parameters(event: dict[str, Any]) -> dict[str, str]:
    return dict(event.get("queryStringParameters") or {})


def query_flag(params: dict[str, str], name: str) -> bool:
    return str(params.get(name, "false")).strip().lower() == "true"
