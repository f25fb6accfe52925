from __future__ import annotations

from functools import lru_cache
from typing import List, Optional

from pydantic import Field, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


DEFAULT_ARK_BASE_URL = "https://ark.cn-beijing.volces.com/api/v3"
DEFAULT_REMOVE_BG_URL = "https://api.remove.bg/v1.0/removebg"
DEFAULT_RECOGNITION_PROMPT = "Describe this image in detail."

VALID_LOG_LEVELS = ("CRITICAL", "ERROR", "WARNING", "INFO", "DEBUG")


class Settings(BaseSettings):
    """Application settings loaded from environment variables."""

    model_config = SettingsConfigDict(
        env_file=".env",
        extra="ignore",
        populate_by_name=True,
    )

    app_name: str = "Image Toolbox API"
    description: str = "JPEG compression, background removal, image recognition and generation"
    version: str = "1.0.0"

    host: str = Field(default="0.0.0.0", alias="HOST")
    port: int = Field(default=8000, alias="PORT", ge=1, le=65535)
    debug: bool = Field(default=False, alias="DEBUG")
    log_level: str = Field(default="INFO", alias="LOG_LEVEL")
    allowed_origins: str = Field(
        default="http://localhost:3000",
        alias="ALLOWED_ORIGINS",
        description="Comma-separated list of CORS origins",
    )

    # Volcengine Ark (image generation + vision chat)
    ark_api_key: Optional[str] = Field(default=None, alias="ARK_API_KEY")
    ark_base_url: str = Field(default=DEFAULT_ARK_BASE_URL, alias="ARK_BASE_URL")
    ark_generation_model: str = Field(
        default="ep-20251008215753-dnhpt", alias="ARK_GENERATION_MODEL",
        description="Endpoint id of the text-to-image model"
    )
    ark_vision_model: str = Field(
        default="ep-20251008195447-nkrrc", alias="ARK_VISION_MODEL",
        description="Endpoint id of the multimodal chat model"
    )

    # remove.bg
    remove_bg_api_key: Optional[str] = Field(default=None, alias="REMOVE_BG_API_KEY")
    remove_bg_url: str = Field(default=DEFAULT_REMOVE_BG_URL, alias="REMOVE_BG_URL")

    vendor_timeout_seconds: float = Field(
        default=120.0, alias="VENDOR_TIMEOUT_SECONDS", gt=0.0, le=600.0
    )
    recognition_default_prompt: str = Field(
        default=DEFAULT_RECOGNITION_PROMPT, alias="RECOGNITION_DEFAULT_PROMPT"
    )
    max_upload_bytes: int = Field(
        default=20 * 1024 * 1024, alias="MAX_UPLOAD_BYTES", ge=1024
    )

    @field_validator("ark_api_key", "remove_bg_api_key", mode="before")
    @classmethod
    def blank_key_is_missing(cls, value: Optional[str]) -> Optional[str]:
        """Treat empty or whitespace-only credentials as not configured."""
        if value is None:
            return None
        value = str(value).strip()
        return value or None

    @field_validator("log_level", mode="before")
    @classmethod
    def validate_log_level(cls, value: str) -> str:
        if not value:
            return "INFO"
        normalized = str(value).strip().upper()
        if normalized not in VALID_LOG_LEVELS:
            raise ValueError(
                f"Invalid LOG_LEVEL '{value}'. "
                f"Valid options: {', '.join(VALID_LOG_LEVELS)}"
            )
        return normalized

    @property
    def cors_origins(self) -> List[str]:
        """Parsed ALLOWED_ORIGINS."""
        return [
            origin.strip()
            for origin in self.allowed_origins.split(",")
            if origin.strip()
        ]

    @property
    def ark_configured(self) -> bool:
        return self.ark_api_key is not None

    @property
    def remove_bg_configured(self) -> bool:
        return self.remove_bg_api_key is not None


@lru_cache
def get_settings() -> Settings:
    """Return the process settings, loaded once."""
    return Settings()
