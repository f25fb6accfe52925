"""Image toolbox backend: JPEG compression plus vendor proxies for generation, recognition and background removal."""

from __future__ import annotations

from .main import create_app

__all__ = ["create_app"]
