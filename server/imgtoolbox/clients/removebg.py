"""
remove.bg client for background removal.
"""

from __future__ import annotations

import logging
from typing import Any, Optional

import httpx

from ..core.config import DEFAULT_REMOVE_BG_URL
from ..models.images import ImageBuffer
from .base import VendorClient

logger = logging.getLogger(__name__)

REMOVAL_FAILED_MESSAGE = "Background removal failed, please try again later."


def extract_remove_bg_error(body: Any) -> Optional[str]:
    """Pull ``errors[0].title`` out of a remove.bg error body."""
    if not isinstance(body, dict):
        return None
    errors = body.get("errors")
    if isinstance(errors, list) and errors and isinstance(errors[0], dict):
        title = errors[0].get("title")
        if isinstance(title, str) and title.strip():
            return title
    return None


class RemoveBgClient(VendorClient):
    """Implements BackgroundRemover against the remove.bg v1.0 API."""

    vendor_name = "remove.bg"

    def __init__(
        self,
        api_key: Optional[str],
        url: str = DEFAULT_REMOVE_BG_URL,
        timeout: float = 120.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        super().__init__(api_key, timeout=timeout, transport=transport)
        self.url = url

    async def remove_background(self, image: ImageBuffer) -> bytes:
        """
        Remove the background of an image.

        Returns:
            PNG bytes exactly as returned by the vendor

        Raises:
            ConfigError: If no API key is configured
            UpstreamError: If the vendor call fails (status mirrors the vendor's)
        """
        api_key = self.require_api_key()
        logger.info(f"✂️ Removing background ({image.byte_length} bytes)")

        response = await self._post(
            self.url,
            headers={"X-Api-Key": api_key},
            data={"size": "auto"},
            files={
                "image_file": (
                    image.filename or "image",
                    image.data,
                    image.mime_type or "application/octet-stream",
                )
            },
        )
        self.raise_for_vendor_status(response, REMOVAL_FAILED_MESSAGE, extract_remove_bg_error)

        logger.info(f"✅ Background removal successful. Output size: {len(response.content)} bytes")
        return response.content
