"""
Vision recognition endpoint.
"""

from __future__ import annotations

from typing import Optional

from fastapi import APIRouter, Depends, File, Form, UploadFile

from ...clients import VendorClients
from ...core.config import Settings
from ...models import RecognitionResponse
from ._helpers import get_app_settings, get_vendor_clients, read_image_upload

router = APIRouter(prefix="/api", tags=["recognition"])


@router.post("/recognition", response_model=RecognitionResponse)
async def recognize_image(
    image_file: Optional[UploadFile] = File(default=None),
    prompt: Optional[str] = Form(default=None),
    settings: Settings = Depends(get_app_settings),
    clients: VendorClients = Depends(get_vendor_clients),
):
    """
    Describe an uploaded image with the multimodal model.

    ``prompt`` is optional; the describer falls back to its default instruction
    when it is missing or blank.
    """
    image = await read_image_upload(image_file, settings.max_upload_bytes)
    result = await clients.describer.describe(image, prompt)

    return RecognitionResponse(success=True, result=result.text, usage=result.usage)
