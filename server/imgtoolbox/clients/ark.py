"""
Volcengine Ark client: text-to-image generation and multimodal chat.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional

import httpx

from ..core.config import DEFAULT_ARK_BASE_URL, DEFAULT_RECOGNITION_PROMPT
from ..core.errors import UpstreamError
from ..models.images import DescriptionResult, GenerationResult, ImageBuffer
from .base import VendorClient, json_or_error

logger = logging.getLogger(__name__)

GENERATION_FAILED_MESSAGE = "Image generation failed, please try again later."
NO_IMAGE_MESSAGE = "Failed to obtain the generated image."
RECOGNITION_FAILED_MESSAGE = "Image recognition failed, please try again later."
UNRECOGNIZED_RESULT = "Unable to recognize the image content."


def extract_ark_error(body: Any) -> Optional[str]:
    """Pull ``error.message`` out of an Ark error body."""
    if not isinstance(body, dict):
        return None
    error = body.get("error")
    if isinstance(error, dict):
        message = error.get("message")
        if isinstance(message, str) and message.strip():
            return message
    return None


class ArkClient(VendorClient):
    """Implements ImageGenerator and ImageDescriber against the Ark v3 API."""

    vendor_name = "Ark"

    def __init__(
        self,
        api_key: Optional[str],
        base_url: str = DEFAULT_ARK_BASE_URL,
        generation_model: str = "",
        vision_model: str = "",
        default_prompt: str = DEFAULT_RECOGNITION_PROMPT,
        timeout: float = 120.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        super().__init__(api_key, timeout=timeout, transport=transport)
        self.base_url = base_url.rstrip("/")
        self.generation_model = generation_model
        self.vision_model = vision_model
        self.default_prompt = default_prompt

    def _headers(self) -> Dict[str, str]:
        return {
            "Content-Type": "application/json",
            "Authorization": f"Bearer {self.require_api_key()}",
        }

    async def generate(self, prompt: str, size: str = "2K") -> GenerationResult:
        """
        Generate one image from a text prompt.

        Returns:
            GenerationResult with the vendor-hosted image URL

        Raises:
            ConfigError: If no API key is configured
            UpstreamError: On vendor failure or a response without an image URL
        """
        headers = self._headers()
        logger.info(f"🎨 Generating image ({size}) with prompt: {prompt}")

        response = await self._post(
            f"{self.base_url}/images/generations",
            headers=headers,
            json={
                "model": self.generation_model,
                "prompt": prompt,
                "sequential_image_generation": "disabled",
                "response_format": "url",
                "size": size,
                "stream": False,
                "watermark": True,
            },
        )
        self.raise_for_vendor_status(response, GENERATION_FAILED_MESSAGE, extract_ark_error)

        payload = json_or_error(response, self.vendor_name)
        images = payload.get("data") or []
        first = images[0] if images and isinstance(images[0], dict) else {}
        image_url = first.get("url")
        if not image_url:
            logger.error(f"❌ [Ark] No image URL in response: {payload}")
            raise UpstreamError(NO_IMAGE_MESSAGE, status_code=500)

        logger.info("✅ Image generated successfully")
        return GenerationResult(
            image_url=image_url,
            revised_prompt=first.get("revised_prompt"),
            usage=payload.get("usage"),
        )

    async def describe(self, image: ImageBuffer, prompt: Optional[str] = None) -> DescriptionResult:
        """
        Ask the vision model about an image.

        The image is sent inline as a format-tagged base64 data URL, together
        with the instruction, as a single user turn.
        """
        headers = self._headers()
        instruction = prompt if prompt and prompt.strip() else self.default_prompt
        logger.info(
            f"🔍 Recognizing {image.format_tag} image ({image.byte_length} bytes)"
        )

        response = await self._post(
            f"{self.base_url}/chat/completions",
            headers=headers,
            json={
                "model": self.vision_model,
                "messages": [
                    {
                        "role": "user",
                        "content": [
                            {"type": "text", "text": instruction},
                            {"type": "image_url", "image_url": {"url": image.to_data_url()}},
                        ],
                    }
                ],
            },
        )
        self.raise_for_vendor_status(response, RECOGNITION_FAILED_MESSAGE, extract_ark_error)

        payload = json_or_error(response, self.vendor_name)
        choices = payload.get("choices") or []
        message = (choices[0].get("message") or {}) if choices and isinstance(choices[0], dict) else {}
        text = message.get("content") or UNRECOGNIZED_RESULT

        return DescriptionResult(text=text, usage=payload.get("usage"))
