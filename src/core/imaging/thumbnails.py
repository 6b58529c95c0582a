"""Best-effort thumbnail derivation.

A thumbnail never blocks an upload: every failure turns into ``None``.
"""

from abc import ABC, abstractmethod
from io import BytesIO

from aws_lambda_powertools import Logger
from PIL import Image, ImageOps

from core.utils.constants import THUMBNAIL_BACKGROUND, THUMBNAIL_QUALITY
from core.utils.settings import StorageSettings

logger = Logger(UTC=True)


class ThumbnailDeriver(ABC):
    """Capability producing a smaller JPEG copy of an image."""

    @abstractmethod
    def derive(self, image_data: bytes, max_width: int, max_height: int) -> bytes | None:
        """Return the thumbnail bytes, or None if none could be produced."""


class NullThumbnailDeriver(ThumbnailDeriver):
    """Used when thumbnails are disabled."""

    def derive(self, image_data: bytes, max_width: int, max_height: int) -> bytes | None:
        return None


class PillowThumbnailDeriver(ThumbnailDeriver):
    """Pillow-based deriver.

    Fits the image inside ``max_width`` x ``max_height`` keeping the aspect
    ratio and never enlarging it, flattens transparency onto a white
    background and re-encodes as JPEG.
    """

    def __init__(self, *, quality: int = THUMBNAIL_QUALITY) -> None:
        self._quality = quality

    def derive(self, image_data: bytes, max_width: int, max_height: int) -> bytes | None:
        try:
            with Image.open(BytesIO(image_data)) as source:
                source.load()
                image = ImageOps.exif_transpose(source)
                image.thumbnail((max_width, max_height), Image.Resampling.LANCZOS)
                flattened = self._flatten(image)

                output = BytesIO()
                flattened.save(output, format="JPEG", quality=self._quality, optimize=True)
                thumbnail = output.getvalue()

        except Exception as exc:
            logger.warning(
                "Thumbnail derivation failed",
                extra={"error": str(exc), "error_type": type(exc).__name__},
            )
            return None

        logger.debug(
            "Thumbnail derived",
            extra={"source_size": len(image_data), "thumbnail_size": len(thumbnail)},
        )
        return thumbnail

    @staticmethod
    def _flatten(image: Image.Image) -> Image.Image:
        if image.mode in ("RGBA", "LA") or (image.mode == "P" and "transparency" in image.info):
            rgba = image.convert("RGBA")
            background = Image.new("RGB", rgba.size, THUMBNAIL_BACKGROUND)
            background.paste(rgba, mask=rgba.getchannel("A"))
            return background

        if image.mode != "RGB":
            return image.convert("RGB")

        return image


def build_thumbnail_deriver(settings: StorageSettings) -> ThumbnailDeriver:
    """Select the deriver once at startup."""
    if settings.thumbnails_enabled:
        return PillowThumbnailDeriver()
    return NullThumbnailDeriver()
