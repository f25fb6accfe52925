"""
Error taxonomy shared by services, vendor clients and API routes.

Every error carries the HTTP status it maps to at the route boundary, where
it is rendered as ``{"error": message}``.
"""

from __future__ import annotations

from typing import Optional


class ToolboxError(Exception):
    """Base class for all expected failures."""

    default_status_code = 500

    def __init__(self, message: str, status_code: Optional[int] = None) -> None:
        super().__init__(message)
        self.message = message
        self.status_code = status_code or self.default_status_code


class ValidationError(ToolboxError):
    """Missing, empty or invalid client input."""

    default_status_code = 400


class ConfigError(ToolboxError):
    """A server-side credential or setting is missing."""

    default_status_code = 500


class UpstreamError(ToolboxError):
    """A vendor call failed or returned an unusable payload.

    ``status_code`` mirrors the vendor's HTTP status when there was one.
    """

    default_status_code = 500


class DecodeError(ToolboxError):
    """Image bytes could not be decoded."""

    default_status_code = 400
