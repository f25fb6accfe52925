"""
HTTP plumbing shared by the vendor clients.

This module provides a VendorClient base class wrapping httpx with timeout
handling, error logging, and translation of transport failures and vendor
error statuses into UpstreamError.
"""

from __future__ import annotations

import logging
from typing import Any, Callable, Dict, Optional

import httpx

from ..core.errors import ConfigError, UpstreamError

logger = logging.getLogger(__name__)

ErrorMessageExtractor = Callable[[Any], Optional[str]]


class VendorClient:
    """
    Base class for third-party API clients.

    Handles:
    - One httpx.AsyncClient per call (no pooling across requests)
    - Configurable timeouts
    - Credential presence checks
    - Mapping of network errors and non-2xx statuses to UpstreamError
    """

    vendor_name = "vendor"

    def __init__(
        self,
        api_key: Optional[str],
        timeout: float = 120.0,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        """
        Initialize vendor client.

        Args:
            api_key: Vendor credential; None means not configured
            timeout: Request timeout in seconds (applied to all timeout types)
            transport: Optional httpx transport (tests pass httpx.MockTransport)
        """
        self.api_key = api_key
        self.timeout = timeout
        self._transport = transport

    @property
    def configured(self) -> bool:
        return bool(self.api_key)

    def require_api_key(self) -> str:
        """
        Return the credential or raise ConfigError.

        The user-facing message stays generic; details go to the log.
        """
        if not self.api_key:
            logger.error(f"❌ [{self.vendor_name}] API key is not configured")
            raise ConfigError("API configuration error, please contact the administrator.")
        return self.api_key

    def _session(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(
            timeout=httpx.Timeout(self.timeout),
            transport=self._transport,
            follow_redirects=True,
        )

    async def _post(
        self,
        url: str,
        *,
        headers: Dict[str, str],
        json: Optional[Dict[str, Any]] = None,
        data: Optional[Dict[str, Any]] = None,
        files: Optional[Dict[str, Any]] = None,
    ) -> httpx.Response:
        """
        POST to the vendor and return the raw response.

        Raises:
            UpstreamError: If the request could not be completed (network error, timeout)
        """
        logger.info(f"🌐 [{self.vendor_name}] POST {url}")
        try:
            async with self._session() as client:
                response = await client.post(
                    url, headers=headers, json=json, data=data, files=files
                )
        except httpx.RequestError as e:
            error_type = type(e).__name__
            logger.error(f"❌ [{self.vendor_name}] POST {url} failed: {error_type}: {str(e)}")
            raise UpstreamError(
                "Server error, please try again later.", status_code=500
            ) from e

        logger.info(f"📡 [{self.vendor_name}] POST {url} returned HTTP {response.status_code}")
        return response

    def raise_for_vendor_status(
        self,
        response: httpx.Response,
        fallback_message: str,
        extract_message: ErrorMessageExtractor,
    ) -> None:
        """
        Raise UpstreamError for a non-2xx vendor response.

        The vendor body is logged. The raised message is the vendor's own
        message when ``extract_message`` finds one, otherwise ``fallback_message``.
        The status mirrors the vendor's.
        """
        if response.is_success:
            return

        try:
            body: Any = response.json()
        except ValueError:
            body = response.text

        logger.error(
            f"❌ [{self.vendor_name}] API error HTTP {response.status_code}: {str(body)[:500]}"
        )
        message = extract_message(body) if body else None
        raise UpstreamError(message or fallback_message, status_code=response.status_code)


def json_or_error(response: httpx.Response, vendor_name: str) -> Dict[str, Any]:
    """Parse a successful vendor response as a JSON object."""
    try:
        payload = response.json()
    except ValueError as e:
        logger.error(f"❌ [{vendor_name}] Response is not valid JSON: {response.text[:500]}")
        raise UpstreamError("Vendor returned an unreadable response.") from e
    if not isinstance(payload, dict):
        raise UpstreamError("Vendor returned an unreadable response.")
    return payload
