"""
Decorator shared by every API Gateway Lambda handler in the pet gallery.
"""

from __future__ import annotations

import traceback
from collections.abc import Callable
from functools import wraps
from http import HTTPStatus
from typing import Any

from aws_lambda_powertools import Logger

from core.models.errors import PetGalleryError
from core.utils.response import ResponseBuilder, status_for_error

logger = Logger(service="api-gateway-handler", UTC=True)

JsonDict = dict[str, Any]

# Messages raised by our own validators are safe to show to the caller
CLIENT_MESSAGE_PREFIXES = (
    "Invalid",
    "Missing",
    "Request body",
    "Image",
    "File",
    "Pet",
    "At least one",
    "Decoded",
    "Unsupported",
)

BAD_REQUEST_ERRORS = (ValueError, KeyError, TypeError, UnicodeDecodeError)


def _client_message(exc: Exception) -> str:
    text = str(exc)
    if text and text.startswith(CLIENT_MESSAGE_PREFIXES):
        return text

    if isinstance(exc, KeyError):
        return "A required field is missing from the request."

    return "The request could not be processed. Check the payload and try again."


def _log_failure(
    message: str,
    *,
    handler_name: str,
    request_id: str | None,
    exc: Exception,
    server_side: bool = False,
) -> None:
    log_extra: dict[str, Any] = {
        "handler": handler_name,
        "request_id": request_id,
        "error": str(exc),
        "error_type": type(exc).__name__,
    }

    if isinstance(exc, PetGalleryError):
        log_extra["error_code"] = exc.error_code

    if server_side:
        logger.exception(message, extra=log_extra)
    else:
        log_extra["traceback"] = traceback.format_exc()
        logger.warning(message, extra=log_extra)


def api_gateway_handler(
    func: Callable[..., JsonDict],
) -> Callable[..., JsonDict]:
    """
    Wrap a pet gallery handler with preflight handling and error mapping.

    - OPTIONS requests get an empty 204 with CORS headers
    - PetGalleryError subclasses become their own status and error code
      (validation 422, not found 404, forbidden 403, store unavailable 503)
    - ValueError, KeyError, TypeError and UnicodeDecodeError become 400
    - PermissionError becomes 403
    - anything else is logged with its traceback and becomes a generic 500

    Example:
        @api_gateway_handler
        def handler(event, context):
            return ResponseBuilder.ok({"pet": ...})
    """

    @wraps(func)
    def wrapper(
        event: Any,
        context: Any,
        *,
        cors_origin: str | None = None,
    ) -> JsonDict:
        if event.get("httpMethod") == "OPTIONS":
            return ResponseBuilder.no_content(cors_origin=cors_origin)

        request_id = getattr(context, "aws_request_id", None)

        try:
            return func(event, context)

        except PetGalleryError as exc:
            _log_failure(
                "Pet gallery error in handler",
                handler_name=func.__name__,
                request_id=request_id,
                exc=exc,
                server_side=status_for_error(exc) >= HTTPStatus.INTERNAL_SERVER_ERROR,
            )
            return ResponseBuilder.from_error(
                exc,
                request_id=request_id,
                cors_origin=cors_origin,
            )

        except BAD_REQUEST_ERRORS as exc:
            _log_failure(
                "Malformed request",
                handler_name=func.__name__,
                request_id=request_id,
                exc=exc,
            )
            return ResponseBuilder.bad_request(
                _client_message(exc),
                request_id=request_id,
                cors_origin=cors_origin,
            )

        except PermissionError as exc:
            _log_failure(
                "Permission denied in handler",
                handler_name=func.__name__,
                request_id=request_id,
                exc=exc,
            )
            return ResponseBuilder.forbidden(
                "You don't have permission to modify this pet.",
                request_id=request_id,
                cors_origin=cors_origin,
            )

        except Exception as exc:
            _log_failure(
                "Unexpected error in handler",
                handler_name=func.__name__,
                request_id=request_id,
                exc=exc,
                server_side=True,
            )
            return ResponseBuilder.internal_error(
                "Something went wrong on our side. Please try again shortly.",
                request_id=request_id,
                cors_origin=cors_origin,
            )

    return wrapper
