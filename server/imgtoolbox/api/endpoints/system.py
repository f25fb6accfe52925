"""
System endpoints for health checks.

Reports whether each vendor credential is configured; never calls the vendors.
"""

from __future__ import annotations

from fastapi import APIRouter, Depends

from ...core.config import Settings
from ...models import HealthResponse
from ._helpers import get_app_settings

router = APIRouter(prefix="/api", tags=["system"])


@router.get("/health", response_model=HealthResponse)
async def health_check(settings: Settings = Depends(get_app_settings)):
    return HealthResponse(
        status="healthy",
        version=settings.version,
        vendors={
            "ark": settings.ark_configured,
            "remove_bg": settings.remove_bg_configured,
        },
    )


@router.get("/")
async def root(settings: Settings = Depends(get_app_settings)):
    """Root endpoint for testing."""
    return {"message": f"{settings.app_name} is running", "version": settings.version}
