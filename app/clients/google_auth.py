"""
Google OAuth utilities.

These helpers build the consent URL, exchange authorization codes and fetch
the signed-in user's profile.
"""

from __future__ import annotations

import logging
from typing import Any, Dict, Optional
from urllib.parse import urlencode

import httpx

from app.core.config import GoogleSettings, OAuthSettings
from app.core.errors import ConfigurationError, ExchangeError
from app.schemas.auth import Profile, TokenSet

logger = logging.getLogger(__name__)


class GoogleOAuthClient:
    """Build Google authorization URLs, exchange codes and read user info."""

    AUTH_BASE_URL = "https://accounts.google.com/o/oauth2/v2/auth"
    TOKEN_URL = "https://oauth2.googleapis.com/token"
    USERINFO_URL = "https://www.googleapis.com/oauth2/v2/userinfo"

    def __init__(
        self,
        google_settings: GoogleSettings,
        oauth_settings: OAuthSettings,
        redirect_uri: str,
        transport: Optional[httpx.AsyncBaseTransport] = None,
    ) -> None:
        self._google = google_settings
        self._oauth = oauth_settings
        self._redirect_uri = redirect_uri
        self._transport = transport

    def build_authorization_url(self, state: str) -> str:
        """Construct the Google OAuth consent URL carrying ``state`` verbatim."""
        if not self._google.client_id:
            raise ConfigurationError(
                "Google Client ID not configured. Please check environment variables."
            )

        params = {
            "client_id": self._google.client_id,
            "redirect_uri": self._redirect_uri,
            "scope": " ".join(self._oauth.scopes),
            "response_type": "code",
            "access_type": "offline",
            "prompt": "consent",
            "state": state,
        }
        return f"{self.AUTH_BASE_URL}?{urlencode(params)}"

    async def exchange_authorization_code(self, code: str) -> TokenSet:
        """Exchange an authorization code for Google's token set."""
        payload = {
            "client_id": self._google.client_id or "",
            "client_secret": self._google.client_secret,
            "code": code,
            "grant_type": "authorization_code",
            "redirect_uri": self._redirect_uri,
        }

        try:
            async with self._client() as client:
                response = await client.post(self.TOKEN_URL, data=payload)
        except httpx.HTTPError as exc:
            logger.warning("Token endpoint unreachable: %s", exc)
            raise ExchangeError(f"Failed to reach Google token endpoint: {exc}") from exc

        body = _json_or_empty(response)
        if not response.is_success:
            logger.warning(
                "Token exchange rejected with status %s (%s)",
                response.status_code,
                body.get("error"),
            )
            raise ExchangeError(_provider_message(body, "Failed to exchange code for tokens"))

        if not body.get("access_token"):
            raise ExchangeError("Incomplete token payload returned from Google.")

        return TokenSet.model_validate(body)

    async def fetch_profile(self, access_token: str) -> Profile:
        """Fetch the user's profile with a bearer access token."""
        headers = {"Authorization": f"Bearer {access_token}"}
        try:
            async with self._client() as client:
                response = await client.get(self.USERINFO_URL, headers=headers)
        except httpx.HTTPError as exc:
            logger.warning("User-info endpoint unreachable: %s", exc)
            raise ExchangeError(f"Failed to reach Google user-info endpoint: {exc}") from exc

        body = _json_or_empty(response)
        if not response.is_success or not body.get("id"):
            logger.warning("Profile fetch failed with status %s", response.status_code)
            raise ExchangeError(_provider_message(body, "Failed to fetch user profile"))

        return Profile.from_userinfo(body)

    def _client(self) -> httpx.AsyncClient:
        return httpx.AsyncClient(timeout=10.0, transport=self._transport)


def _json_or_empty(response: httpx.Response) -> Dict[str, Any]:
    try:
        body = response.json()
    except ValueError:
        return {}
    return body if isinstance(body, dict) else {}


def _provider_message(body: Dict[str, Any], fallback: str) -> str:
    error = body.get("error")
    if isinstance(error, dict):
        # userinfo errors use the Google API envelope {"error": {"message": ...}}
        return error.get("message") or fallback
    return body.get("error_description") or error or fallback


__all__ = ["GoogleOAuthClient"]
