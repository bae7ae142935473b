"""
HTTP client for the external GKP backend that receives credential bundles.
"""

from __future__ import annotations

import logging
from typing import Optional

import httpx
from pydantic import ValidationError as PydanticValidationError

from app.core.config import BackendSettings
from app.core.errors import HandoffError
from app.schemas.handoff import BackendCallbackResponse, CredentialBundle

logger = logging.getLogger(__name__)

_UNKNOWN_FAILURE = "An unknown error occurred on the server."


class GKPBackendClient:
    """Deliver a composed ``CredentialBundle`` to ``<backend>/callback``."""

    def __init__(
        self,
        settings: BackendSettings,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._settings = settings
        self._transport = transport

    def callback_url(self, original_query: str) -> str:
        """Backend callback URL with the caller's original query appended as-is."""
        base = self._settings.callback_url
        return f"{base}?{original_query}" if original_query else base

    async def submit_bundle(
        self, bundle: CredentialBundle, *, original_query: str
    ) -> str:
        """POST the bundle once and return the redirect URL the backend chose."""
        url = self.callback_url(original_query)
        payload = bundle.model_dump(mode="json", exclude_none=True)
        try:
            async with httpx.AsyncClient(timeout=10.0, transport=self._transport) as client:
                response = await client.post(url, json=payload)
        except httpx.HTTPError as exc:
            logger.warning("GKP backend unreachable: %s", exc)
            raise HandoffError(f"Failed to reach the GKP backend: {exc}") from exc

        try:
            result = BackendCallbackResponse.model_validate(response.json())
        except (ValueError, PydanticValidationError):
            logger.warning(
                "GKP backend returned an unreadable body (status %s)",
                response.status_code,
            )
            raise HandoffError(_UNKNOWN_FAILURE)

        if not response.is_success or not result.success:
            logger.warning(
                "GKP backend rejected bundle (status %s): %s",
                response.status_code,
                result.message,
            )
            raise HandoffError(result.message or _UNKNOWN_FAILURE)

        if not result.redirect_url:
            raise HandoffError("GKP backend did not return a redirect URL.")

        return result.redirect_url


__all__ = ["GKPBackendClient"]
