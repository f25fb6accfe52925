"""
JPEG re-encoding service.

Decodes an image, draws it onto an RGB surface at its native size and encodes
it as baseline JPEG at a caller-chosen quality. Size reduction comes from the
JPEG quantisation alone; there is no resizing and no target-size search.
"""

from __future__ import annotations

import io
import logging
import time
from typing import Optional

from PIL import Image, ImageOps

from ..core.errors import DecodeError, ValidationError
from ..models.images import CompressionResult

logger = logging.getLogger(__name__)

MIN_QUALITY = 1
MAX_QUALITY = 100

# Range exposed to users by the compress route and CLI
QUALITY_FLOOR = 10
QUALITY_CEILING = 100
DEFAULT_QUALITY = 80

_SIZE_UNITS = ("Bytes", "KB", "MB", "GB")


def clamp_quality(
    value: int,
    minimum: int = QUALITY_FLOOR,
    maximum: int = QUALITY_CEILING,
) -> int:
    """Clamp a quality factor into [minimum, maximum]."""
    return max(minimum, min(maximum, int(value)))


def decode_image(data: bytes) -> Image.Image:
    """
    Decode image bytes into a fully loaded PIL Image.

    Args:
        data: Encoded image bytes (any format Pillow can read)

    Returns:
        PIL Image with EXIF orientation applied (first frame for animations)

    Raises:
        DecodeError: If the bytes are empty, corrupt or in an unsupported format
    """
    if not data:
        raise DecodeError("Image data is empty")

    try:
        image = Image.open(io.BytesIO(data))
        # Force a full decode so truncated files fail here, not during encode
        image.load()
    except (OSError, ValueError, SyntaxError, Image.DecompressionBombError) as exc:
        raise DecodeError(f"Unable to decode image: {exc}") from exc

    try:
        return ImageOps.exif_transpose(image)
    except Exception as exc:
        # Malformed EXIF only affects orientation; the pixels already decoded
        logger.warning(f"⚠️ Ignoring unreadable EXIF orientation: {exc}")
        return image


def _to_rgb_surface(image: Image.Image) -> Image.Image:
    """Flatten onto an opaque RGB surface; transparent areas become white."""
    if image.mode in ("RGBA", "LA", "P", "PA"):
        rgba = image.convert("RGBA")
        white_bg = Image.new("RGBA", rgba.size, (255, 255, 255, 255))
        return Image.alpha_composite(white_bg, rgba).convert("RGB")
    if image.mode != "RGB":
        return image.convert("RGB")
    return image


def compress_image(data: bytes, quality: int = DEFAULT_QUALITY) -> CompressionResult:
    """
    Re-encode an image as JPEG at the given quality.

    Args:
        data: Source image bytes; never modified
        quality: JPEG quality factor, 1-100 inclusive

    Returns:
        CompressionResult holding the new bytes and the (unchanged) dimensions

    Raises:
        ValidationError: If quality is outside 1-100
        DecodeError: If the source cannot be decoded
    """
    if isinstance(quality, bool) or not isinstance(quality, int):
        raise ValidationError(f"Quality must be an integer, got {quality!r}")
    if not MIN_QUALITY <= quality <= MAX_QUALITY:
        raise ValidationError(
            f"Quality must be between {MIN_QUALITY} and {MAX_QUALITY}, got {quality}"
        )

    image = decode_image(data)
    surface = _to_rgb_surface(image)
    width, height = surface.size

    buffer = io.BytesIO()
    surface.save(buffer, format="JPEG", quality=quality)
    encoded = buffer.getvalue()

    logger.info(
        f"Compressed {width}x{height} image at quality {quality}: "
        f"{format_file_size(len(data))} -> {format_file_size(len(encoded))}"
    )

    return CompressionResult(
        data=encoded,
        width=width,
        height=height,
        quality=quality,
        original_size=len(data),
    )


def format_file_size(num_bytes: int) -> str:
    """
    Human-readable size using 1024-based units and two decimals.

    >>> format_file_size(0)
    '0 Bytes'
    >>> format_file_size(1536)
    '1.5 KB'
    """
    if num_bytes <= 0:
        return "0 Bytes"
    index = 0
    while num_bytes >= 1024 ** (index + 1) and index < len(_SIZE_UNITS) - 1:
        index += 1
    value = round(num_bytes / (1024 ** index), 2)
    return f"{value:g} {_SIZE_UNITS[index]}"


def compressed_filename(timestamp_ms: Optional[int] = None) -> str:
    """Download name for a compressed image, e.g. ``compressed_1700000000000.jpg``."""
    if timestamp_ms is None:
        timestamp_ms = int(time.time() * 1000)
    return f"compressed_{timestamp_ms}.jpg"
