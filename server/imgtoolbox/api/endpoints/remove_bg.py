"""
Background removal endpoint.

Success is a binary passthrough of the vendor's PNG, not JSON.
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, File, UploadFile
from fastapi.responses import Response

from ...clients import VendorClients
from ...core.config import Settings
from ._helpers import get_app_settings, get_vendor_clients, read_image_upload

router = APIRouter(prefix="/api", tags=["remove-bg"])


@router.post(
    "/remove-bg",
    response_class=Response,
    responses={200: {"content": {"image/png": {}}}},
)
async def remove_background(
    image_file: Optional[UploadFile] = File(default=None),
    settings: Settings = Depends(get_app_settings),
    clients: VendorClients = Depends(get_vendor_clients),
):
    image = await read_image_upload(image_file, settings.max_upload_bytes)
    png_bytes = await clients.remover.remove_background(image)
    return Response(content=png_bytes, media_type="image/png")
