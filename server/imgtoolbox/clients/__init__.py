"""
Vendor capability interfaces and their HTTP implementations.

Routes depend only on the three Protocols below, so tests can hand
``create_app`` fakes instead of network clients.
"""

from __future__ import annotations

from dataclasses import dataclass
from typing import Optional, Protocol

import httpx

from ..core.config import Settings
from ..models.images import DescriptionResult, GenerationResult, ImageBuffer
from .ark import ArkClient
from .removebg import RemoveBgClient


class ImageGenerator(Protocol):
    async def generate(self, prompt: str, size: str = "2K") -> GenerationResult: ...


class ImageDescriber(Protocol):
    async def describe(self, image: ImageBuffer, prompt: Optional[str] = None) -> DescriptionResult: ...


class BackgroundRemover(Protocol):
    async def remove_background(self, image: ImageBuffer) -> bytes: ...


@dataclass
class VendorClients:
    generator: ImageGenerator
    describer: ImageDescriber
    remover: BackgroundRemover

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> "VendorClients":
        """Build the HTTP-backed clients from explicit settings."""
        ark = ArkClient(
            api_key=settings.ark_api_key,
            base_url=settings.ark_base_url,
            generation_model=settings.ark_generation_model,
            vision_model=settings.ark_vision_model,
            default_prompt=settings.recognition_default_prompt,
            timeout=settings.vendor_timeout_seconds,
            transport=transport,
        )
        remover = RemoveBgClient(
            api_key=settings.remove_bg_api_key,
            url=settings.remove_bg_url,
            timeout=settings.vendor_timeout_seconds,
            transport=transport,
        )
        return cls(generator=ark, describer=ark, remover=remover)


__all__ = [
    "ArkClient",
    "BackgroundRemover",
    "ImageDescriber",
    "ImageGenerator",
    "RemoveBgClient",
    "VendorClients",
]
