from collections.abc import Mapping
from pathlib import PurePosixPath

from core.utils.constants import DEFAULT_IMAGE_CONTENT_TYPE, EXTENSION_CONTENT_TYPES

MAGIC_BYTES: Mapping[bytes, str] = {
    b"\xff\xd8\xff": "image/jpeg",
    b"\x89PNG\r\n\x1a\n": "image/png",
    b"GIF87a": "image/gif",
    b"GIF89a": "image/gif",
    b"BM": "image/bmp",
}


def detect_mime_type(file_data: bytes) -> str:
    """Sniff the image type from the leading bytes of the buffer."""
    # RIFF container is only an image when the form type is WEBP
    if file_data[:4] == b"RIFF" and file_data[8:12] == b"WEBP":
        return "image/webp"

    for signature, mime in MAGIC_BYTES.items():
        if file_data.startswith(signature):
            return mime

    raise ValueError("Unsupported or unknown file type")


def file_extension(file_name: str) -> str:
    """Return the lower-cased extension including the dot, or ''."""
    return PurePosixPath(file_name.strip()).suffix.lower()


def content_type_for_extension(extension: str) -> str:
    return EXTENSION_CONTENT_TYPES.get(extension.lower(), DEFAULT_IMAGE_CONTENT_TYPE)
