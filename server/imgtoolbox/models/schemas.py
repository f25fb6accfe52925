from __future__ import annotations

from typing import Any, Dict, Literal, Optional

from pydantic import BaseModel, Field

ImageSize = Literal["1K", "2K", "4K"]


class AIGenerateRequest(BaseModel):
    prompt: str = Field(default="", description="Text description of the image to generate")
    size: ImageSize = Field(default="2K", description="Output size token: '1K', '2K' or '4K'")


class AIGenerateResponse(BaseModel):
    success: bool = True
    imageUrl: str = Field(..., description="URL of the generated image (hosted by the vendor)")
    revisedPrompt: Optional[str] = Field(default=None, description="Prompt as rewritten by the vendor")
    usage: Optional[Dict[str, Any]] = Field(default=None, description="Vendor token usage")


class RecognitionResponse(BaseModel):
    success: bool = True
    result: str = Field(..., description="Text produced by the vision model")
    usage: Optional[Dict[str, Any]] = Field(default=None, description="Vendor token usage")


class ErrorResponse(BaseModel):
    error: str


class HealthResponse(BaseModel):
    status: str
    version: str
    vendors: Dict[str, bool] = Field(
        default_factory=dict,
        description="Whether each vendor credential is configured",
    )
