"""
Second step of the relay: trade an authorization code for tokens and profile.
"""

from __future__ import annotations

import logging
from typing import Optional

from app.clients.google_auth import GoogleOAuthClient
from app.core.errors import ValidationError
from app.schemas.auth import ExchangeResult

logger = logging.getLogger(__name__)


class CodeExchanger:
    """Runs the token exchange and the dependent profile lookup in order."""

    def __init__(self, oauth_client: GoogleOAuthClient) -> None:
        self._oauth = oauth_client

    async def exchange(self, code: Optional[str], state: Optional[str] = None) -> ExchangeResult:
        """
        Exchange ``code`` and fetch the profile with the resulting token.

        ``state`` is accepted for symmetry with the callback and not
        interpreted here. Nothing is stored; the caller owns the result.
        """
        if not code or not code.strip():
            raise ValidationError("Authorization code is required")

        logger.info("Exchanging authorization code for tokens")
        tokens = await self._oauth.exchange_authorization_code(code)
        logger.info("Tokens received, fetching user profile")
        profile = await self._oauth.fetch_profile(tokens.access_token)
        logger.info("User profile retrieved")
        return ExchangeResult(tokens=tokens, profile=profile)


__all__ = ["CodeExchanger"]
