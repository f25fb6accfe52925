"""
JPEG compression endpoint.

Re-encodes the upload at the requested quality and returns the JPEG bytes,
with size and dimension details in response headers.
"""

from __future__ import annotations

import logging
from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import Response

from ...core.config import Settings
from ...services.compression import (
    DEFAULT_QUALITY,
    clamp_quality,
    compress_image,
    compressed_filename,
)
from ._helpers import get_app_settings, read_image_upload

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["compress"])


@router.post(
    "/compress",
    response_class=Response,
    responses={200: {"content": {"image/jpeg": {}}}},
)
async def compress(
    image_file: Optional[UploadFile] = File(default=None),
    quality: int = Form(default=DEFAULT_QUALITY),
    settings: Settings = Depends(get_app_settings),
):
    """
    Compress an image to JPEG.

    ``quality`` is clamped to 10-100. Response headers:
    X-Original-Size, X-Compressed-Size, X-Image-Width, X-Image-Height, X-Quality.
    """
    image = await read_image_upload(image_file, settings.max_upload_bytes)
    effective_quality = clamp_quality(quality)
    if effective_quality != quality:
        logger.info(f"Quality {quality} clamped to {effective_quality}")

    # Pillow encoding is CPU-bound
    result = await run_in_threadpool(compress_image, image.data, effective_quality)

    return Response(
        content=result.data,
        media_type=result.mime_type,
        headers={
            "Content-Disposition": f'inline; filename="{compressed_filename()}"',
            "X-Original-Size": str(result.original_size),
            "X-Compressed-Size": str(result.compressed_size),
            "X-Image-Width": str(result.width),
            "X-Image-Height": str(result.height),
            "X-Quality": str(result.quality),
        },
    )
