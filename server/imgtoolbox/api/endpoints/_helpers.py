"""
Shared helper functions for API endpoints.

- Dependency accessors for the settings and vendor clients stored on app.state
- Upload reading and validation
"""
from __future__ import annotations

import logging
from typing import Optional

from fastapi import Request, UploadFile

from ...clients import VendorClients
from ...core.config import Settings
from ...core.errors import ValidationError
from ...models.images import ImageBuffer

logger = logging.getLogger(__name__)

# Some clients send no specific type for files; let the decoder/vendor decide
_GENERIC_CONTENT_TYPES = ("", "application/octet-stream")


def get_app_settings(request: Request) -> Settings:
    return request.app.state.settings


def get_vendor_clients(request: Request) -> VendorClients:
    return request.app.state.clients


async def read_image_upload(
    upload: Optional[UploadFile],
    max_bytes: int,
) -> ImageBuffer:
    """
    Read an uploaded image into memory.

    Args:
        upload: The ``image_file`` form field (None when absent)
        max_bytes: Largest accepted upload

    Returns:
        ImageBuffer with the upload's bytes, content type and filename

    Raises:
        ValidationError: If the file is missing, empty, not an image or too large
    """
    if upload is None:
        raise ValidationError("Please upload an image file.")

    content_type = (upload.content_type or "").lower()
    if content_type not in _GENERIC_CONTENT_TYPES and not content_type.startswith("image/"):
        raise ValidationError("Please select an image file.")

    # Read one byte past the limit so oversize uploads are detected without reading them whole
    data = await upload.read(max_bytes + 1)
    if not data:
        raise ValidationError("Please upload an image file.")
    if len(data) > max_bytes:
        logger.warning(f"⚠️ Rejected upload '{upload.filename}' over {max_bytes} bytes")
        raise ValidationError(
            f"Image file is too large (limit {max_bytes} bytes).", status_code=413
        )

    return ImageBuffer(data=data, mime_type=content_type or None, filename=upload.filename)
