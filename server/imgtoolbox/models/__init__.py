"""
Models package for the image toolbox.

- images: In-memory image records (uploads, compression output, vendor results)
- schemas: Pydantic request/response models for the HTTP API
"""

from .images import CompressionResult, DescriptionResult, GenerationResult, ImageBuffer
from .schemas import (
    AIGenerateRequest,
    AIGenerateResponse,
    ErrorResponse,
    HealthResponse,
    RecognitionResponse,
)

__all__ = [
    "AIGenerateRequest",
    "AIGenerateResponse",
    "CompressionResult",
    "DescriptionResult",
    "ErrorResponse",
    "GenerationResult",
    "HealthResponse",
    "ImageBuffer",
    "RecognitionResponse",
]
