"""
In-memory image records passed between routes, services and vendor clients.

All records are frozen; derived buffers never share state with their source.
"""

from __future__ import annotations

import base64
from dataclasses import dataclass, field
from typing import Any, Dict, Optional

# MIME type -> format tag used in data URLs sent to the vision model
_FORMAT_TAGS: Dict[str, str] = {
    "image/png": "png",
    "image/webp": "webp",
    "image/jpeg": "jpeg",
    "image/jpg": "jpeg",
}


@dataclass(frozen=True)
class ImageBuffer:
    """Raw bytes of an uploaded or generated image."""

    data: bytes
    mime_type: Optional[str] = None
    filename: Optional[str] = None

    @property
    def byte_length(self) -> int:
        return len(self.data)

    @property
    def format_tag(self) -> str:
        """Format tag for the vendor payload; unknown types fall back to jpeg."""
        return _FORMAT_TAGS.get((self.mime_type or "").lower(), "jpeg")

    def to_base64(self) -> str:
        return base64.b64encode(self.data).decode("utf-8")

    def to_data_url(self) -> str:
        return f"data:image/{self.format_tag};base64,{self.to_base64()}"


@dataclass(frozen=True)
class CompressionResult:
    """A re-encoded JPEG derived from a source image."""

    data: bytes
    width: int
    height: int
    quality: int
    original_size: int
    mime_type: str = "image/jpeg"

    @property
    def compressed_size(self) -> int:
        return len(self.data)

    @property
    def saved_percent(self) -> float:
        """Size reduction relative to the source, in percent (negative if larger)."""
        if self.original_size == 0:
            return 0.0
        return round((1 - self.compressed_size / self.original_size) * 100, 2)

    def to_data_url(self) -> str:
        encoded = base64.b64encode(self.data).decode("utf-8")
        return f"data:{self.mime_type};base64,{encoded}"


@dataclass(frozen=True)
class GenerationResult:
    image_url: str
    revised_prompt: Optional[str] = None
    usage: Optional[Dict[str, Any]] = field(default=None)


@dataclass(frozen=True)
class DescriptionResult:
    text: str
    usage: Optional[Dict[str, Any]] = field(default=None)
