"""
First step of the relay: send the browser to Google's consent screen.
"""

from __future__ import annotations

import logging

from app.clients.google_auth import GoogleOAuthClient
from app.schemas.flow import FlowSession, Redirect

logger = logging.getLogger(__name__)


class AuthorizationInitiator:
    """Start a flow by building the consent URL around the caller's query."""

    def __init__(self, oauth_client: GoogleOAuthClient) -> None:
        self._oauth = oauth_client

    def initiate(self, original_query: str) -> tuple[Redirect, FlowSession]:
        """
        Return the consent redirect plus a fresh flow session.

        ``original_query`` becomes the OAuth ``state`` untouched so it comes
        back on the callback exactly as sent. Raises ``ConfigurationError``
        before anything else happens when no client id is configured.
        """
        url = self._oauth.build_authorization_url(state=original_query)
        session = FlowSession(original_query=original_query)
        logger.info("Starting Google sign-in for flow %s", session.flow_id)
        return Redirect(url=url), session


__all__ = ["AuthorizationInitiator"]
