"""Global constants used throughout the application.

This module centralizes all magic numbers, string literals, and configuration
values that are used across multiple modules. Using constants prevents hardcoding
values and makes it easy to change them globally.
"""

from typing import Final

# ============================================================================
# Error Codes
# ============================================================================


# Validation Errors
ERROR_CODE_VALIDATION_FAILED = "VALIDATION_FAILED"
ERROR_CODE_UNSUPPORTED_MIME_TYPE = "UNSUPPORTED_MIME_TYPE"
ERROR_CODE_FILE_SIZE_EXCEEDED = "FILE_SIZE_EXCEEDED"

# Not Found / Authorization Errors
ERROR_CODE_RESOURCE_NOT_FOUND = "NOT_FOUND"
ERROR_CODE_IMAGE_NOT_FOUND = "IMAGE_NOT_FOUND"
ERROR_CODE_PET_NOT_FOUND = "PET_NOT_FOUND"
ERROR_CODE_FORBIDDEN = "FORBIDDEN"
ERROR_CODE_UNAUTHENTICATED = "UNAUTHENTICATED"

# Object Store Errors
ERROR_CODE_STORE = "STORE_ERROR"
ERROR_CODE_STORE_UNAVAILABLE = "STORE_UNAVAILABLE"
ERROR_CODE_IMAGE_UPLOAD_FAILED = "IMAGE_UPLOAD_FAILED"
ERROR_CODE_IMAGE_DELETE_FAILED = "IMAGE_DELETE_FAILED"
ERROR_CODE_IMAGE_LIST_FAILED = "IMAGE_LIST_FAILED"
ERROR_CODE_IMAGE_METADATA_FAILED = "IMAGE_METADATA_FAILED"
ERROR_CODE_IMAGE_PRESIGNED_URL_FAILED = "PRESIGNED_URL_FAILED"

# Batch / Consistency
ERROR_CODE_PARTIAL_FAILURE = "PARTIAL_FAILURE"
ERROR_CODE_INCONSISTENT_STATE = "INCONSISTENT_STATE"

# Pet record persistence
ERROR_CODE_PERSISTENCE = "PERSISTENCE_ERROR"
ERROR_CODE_PET_FETCH_FAILED = "PET_FETCH_FAILED"
ERROR_CODE_PET_SAVE_FAILED = "PET_SAVE_FAILED"
ERROR_CODE_PET_DELETE_FAILED = "PET_DELETE_FAILED"
ERROR_CODE_PET_LIST_FAILED = "PET_LIST_FAILED"
ERROR_CODE_NO_PETS_FOUND = "NO_PETS_FOUND"

# Internal / Unexpected
ERROR_CODE_INTERNAL_ERROR = "INTERNAL_ERROR"

# S3 error codes meaning the store cannot be reached or used at all
STORE_UNAVAILABLE_CODES: Final[frozenset[str]] = frozenset(
    {
        "AccessDenied",
        "InvalidAccessKeyId",
        "SignatureDoesNotMatch",
        "ExpiredToken",
        "NoSuchBucket",
        "ServiceUnavailable",
        "SlowDown",
        "RequestTimeout",
    }
)


# ============================================================================
# File Upload Constraints
# ============================================================================

MAX_FILE_SIZE = 10 * 1024 * 1024  # 10MB in bytes
MAX_BATCH_FILES = 5

CACHE_CONTROL_LONG_LIVED = "public, max-age=31536000"

# Extensions accepted by uploads
ALLOWED_EXTENSIONS: Final[frozenset[str]] = frozenset(
    {"jpg", "jpeg", "png", "gif", "webp"}
)

ALLOWED_MIME_TYPES: Final[frozenset[str]] = frozenset(
    {"image/jpeg", "image/png", "image/gif", "image/webp"}
)

# Content type lookup used for keys; unknown extensions fall back to JPEG
EXTENSION_CONTENT_TYPES: Final[dict[str, str]] = {
    ".jpg": "image/jpeg",
    ".jpeg": "image/jpeg",
    ".png": "image/png",
    ".gif": "image/gif",
    ".webp": "image/webp",
    ".bmp": "image/bmp",
    ".svg": "image/svg+xml",
}

DEFAULT_IMAGE_CONTENT_TYPE = "image/jpeg"


# ============================================================================
# Folders / Thumbnails
# ============================================================================

DEFAULT_FOLDER = "pets"
THUMBNAIL_SUBFOLDER = "thumbnails"
THUMBNAIL_PREFIX = "thumb-"
THUMBNAIL_CONTENT_TYPE = "image/jpeg"
THUMBNAIL_MAX_WIDTH = 300
THUMBNAIL_MAX_HEIGHT = 300
THUMBNAIL_QUALITY = 80
THUMBNAIL_BACKGROUND = (255, 255, 255)

FOLDER_PATTERN = r"^[a-zA-Z0-9_-]+(/[a-zA-Z0-9_-]+)*$"
OWNER_ID_PATTERN = r"^[A-Za-z0-9_-]+$"

# ============================================================================
# Listing / Signed URL Constraints
# ============================================================================

DEFAULT_LIST_LIMIT = 100
MIN_LIST_LIMIT = 1
MAX_LIST_LIMIT = 1000

DEFAULT_SIGNED_URL_TTL_MINUTES = 60
MAX_SIGNED_URL_TTL_MINUTES = 7 * 24 * 60

PURGE_MAX_WORKERS = 8

# ============================================================================
# Pet Listings / Feedback
# ============================================================================

DEFAULT_PET_LIST_LIMIT = 100
MAX_PET_LIST_LIMIT = 500
FEATURED_PETS_LIMIT = 10

SORT_NEWEST = "newest"
SORT_OLDEST = "oldest"
SORT_PRICE_HIGH = "priceHigh"
SORT_PRICE_LOW = "priceLow"

VOTE_UP = "up"
VOTE_DOWN = "down"

MIN_RATING = 1
MAX_RATING = 5
MAX_RATING_COMMENT_LENGTH = 500
RECENT_RATINGS_COUNT = 5

# ============================================================================
# Authorization
# ============================================================================

ADMIN_ROLE = "admin"

# ============================================================================
# API Gateway Configuration
# ============================================================================

CORS_ORIGIN = "*"
CORS_METHODS = "GET,POST,PUT,DELETE,OPTIONS"
CORS_HEADERS = "Content-Type,Authorization,X-Api-Key"
EXPOSE_HEADERS = "Content-Type,Content-Length"
DEFAULT_CONTENT_TYPE = "application/json"

# ============================================================================
# Environment Variable Names
# ============================================================================

ENV_AWS_ENDPOINT_URL = "AWS_ENDPOINT_URL"
ENV_AWS_REGION = "AWS_REGION"
ENV_IMAGE_S3_BUCKET_NAME = "IMAGE_S3_BUCKET_NAME"
ENV_PETS_TABLE_NAME = "PETS_TABLE_NAME"
ENV_THUMBNAILS_ENABLED = "THUMBNAILS_ENABLED"
ENV_THUMBNAIL_MAX_WIDTH = "THUMBNAIL_MAX_WIDTH"
ENV_THUMBNAIL_MAX_HEIGHT = "THUMBNAIL_MAX_HEIGHT"
ENV_PUBLIC_READ_UPLOADS = "PUBLIC_READ_UPLOADS"
ENV_APP_RUNTIME = "APP_RUNTIME"
LOCALSTACK_URL = "http://localstack"
LOCALHOST_URL = "http://localhost"

# ============================================================================
# Helper Functions
# ============================================================================


def get_max_file_size_mb() -> int:
    """Get maximum file size in megabytes."""
    return MAX_FILE_SIZE // (1024 * 1024)
