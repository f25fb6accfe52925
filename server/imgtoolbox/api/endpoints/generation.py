"""
Text-to-image generation endpoint.
"""

from __future__ import annotations

import logging

from fastapi import APIRouter, Depends

from ...clients import VendorClients
from ...core.errors import ValidationError
from ...models import AIGenerateRequest, AIGenerateResponse
from ._helpers import get_vendor_clients

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api", tags=["generation"])


@router.post("/ai-generate", response_model=AIGenerateResponse)
async def ai_generate(
    request: AIGenerateRequest,
    clients: VendorClients = Depends(get_vendor_clients),
):
    """
    Generate one image from a text prompt.

    Returns the vendor-hosted image URL plus the vendor's revised prompt, if any.
    """
    if not request.prompt or not request.prompt.strip():
        raise ValidationError("Please enter a prompt.")

    result = await clients.generator.generate(request.prompt, request.size)

    return AIGenerateResponse(
        success=True,
        imageUrl=result.image_url,
        revisedPrompt=result.revised_prompt,
        usage=result.usage,
    )
