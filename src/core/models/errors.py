"""Custom exception classes for the pet gallery service."""

from typing import Any

from core.utils.constants import (
    ERROR_CODE_FILE_SIZE_EXCEEDED,
    ERROR_CODE_FORBIDDEN,
    ERROR_CODE_INCONSISTENT_STATE,
    ERROR_CODE_PARTIAL_FAILURE,
    ERROR_CODE_PERSISTENCE,
    ERROR_CODE_RESOURCE_NOT_FOUND,
    ERROR_CODE_STORE,
    ERROR_CODE_STORE_UNAVAILABLE,
    ERROR_CODE_UNSUPPORTED_MIME_TYPE,
    ERROR_CODE_VALIDATION_FAILED,
)


class PetGalleryError(Exception):
    """
    Base exception for all pet gallery errors.

    All custom errors must inherit from this class.
    Callers must explicitly provide a message and error code.
    Optional contextual information can be supplied via `details`.
    """

    message: str
    error_code: str
    details: dict[str, Any]

    def __init__(
        self,
        *,
        message: str,
        error_code: str,
        details: dict[str, Any] | None = None,
    ) -> None:
        self.message = message
        self.error_code = error_code
        self.details = details or {}

        super().__init__(self.message)

    def to_dict(self) -> dict[str, Any]:
        """Serializable view used in logs and response bodies."""
        return {
            "error": self.error_code,
            "message": self.message,
            "details": self.details,
        }


class ValidationError(PetGalleryError):
    """Raised when input is malformed. No side effect has occurred."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_VALIDATION_FAILED,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )


class MIMETypeError(ValidationError):
    """Raised when the image content or extension is not supported."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_UNSUPPORTED_MIME_TYPE,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )


class FileSizeError(ValidationError):
    """Raised when file size exceeds the allowed limit."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_FILE_SIZE_EXCEEDED,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )


class NotFoundError(PetGalleryError):
    """Raised when a pet or image descriptor does not exist."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_RESOURCE_NOT_FOUND,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )


class ForbiddenError(PetGalleryError):
    """Raised when the acting principal may not modify a pet."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_FORBIDDEN,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )


class ObjectStoreError(PetGalleryError):
    """Raised when an object store operation fails.

    After a failed write the object state is unknown, not absent.
    """

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_STORE,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )


class StoreUnavailableError(ObjectStoreError):
    """Raised when the object store cannot be reached or authenticated.

    Safe to retry.
    """

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_STORE_UNAVAILABLE,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )


class PersistenceError(PetGalleryError):
    """Raised when a pet record operation fails."""

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_PERSISTENCE,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )


class PartialFailureError(PetGalleryError):
    """Describes the failed items of a batch upload.

    Carried in batch results; the asset manager never raises it.
    """

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_PARTIAL_FAILURE,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )


class InconsistentStateWarning(PetGalleryError):
    """A store delete failed while the descriptor was removed anyway.

    Only ever logged: an orphaned object is accepted, a dangling
    descriptor is not.
    """

    def __init__(
        self,
        *,
        message: str,
        error_code: str = ERROR_CODE_INCONSISTENT_STATE,
        details: dict[str, Any] | None = None,
    ) -> None:
        super().__init__(
            message=message,
            error_code=error_code,
            details=details,
        )
