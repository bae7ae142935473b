"""
Final step of the relay: collect the Apify token and hand the bundle off.

The composer never touches cookies or responses. It reads the ``FlowSession``
it is given and returns either a new state or a new session; the route
decides how to persist or render those.
"""

from __future__ import annotations

import logging

from app.clients.gkp_backend import GKPBackendClient
from app.core.config import OAuthSettings
from app.core.errors import ValidationError
from app.schemas.flow import (
    AwaitingGoogleAuth,
    AwaitingSecondaryToken,
    FlowSession,
    FlowState,
    Submitted,
)
from app.schemas.handoff import (
    BundleSession,
    BundleUser,
    CredentialBundle,
    GoogleCredentials,
    GoogleProfile,
)

logger = logging.getLogger(__name__)


class CredentialComposer:
    """Drives ``AwaitingGoogleAuth -> AwaitingSecondaryToken -> Submitted``."""

    def __init__(self, backend_client: GKPBackendClient, oauth_settings: OAuthSettings) -> None:
        self._backend = backend_client
        self._oauth = oauth_settings

    @staticmethod
    def state_for(session: FlowSession | None) -> FlowState:
        """The step a session is at, judged by whether the exchange completed."""
        if session is not None and session.has_google_credentials:
            return AwaitingSecondaryToken(profile=session.profile)
        return AwaitingGoogleAuth()

    def validate_secondary_token(self, secondary_token: str | None) -> str:
        token = (secondary_token or "").strip()
        if not token:
            raise ValidationError(
                "Please enter your Apify API token to complete the GKP integration setup."
            )
        prefix = self._oauth.secondary_token_prefix
        if not token.startswith(prefix):
            raise ValidationError(
                f"Invalid Apify token format. Your token should start with '{prefix}' "
                "followed by your unique identifier."
            )
        return token

    def compose_bundle(self, session: FlowSession, secondary_token: str) -> CredentialBundle:
        tokens, profile = session.tokens, session.profile
        if tokens is None or profile is None:
            raise ValidationError("Authentication data lost. Please sign in again.")

        expires_in = tokens.expires_in
        if expires_in is None:
            expires_in = self._oauth.default_expires_in
            logger.info(
                "Google omitted expires_in for flow %s; forwarding default of %s seconds",
                session.flow_id,
                expires_in,
            )

        return CredentialBundle(
            session=BundleSession(
                access_token=tokens.access_token,
                user=BundleUser(id=profile.sub, email=profile.email),
            ),
            google_credentials=GoogleCredentials(
                access_token=tokens.access_token,
                refresh_token=tokens.refresh_token,
                expires_in=expires_in,
                scope=tokens.scope,
            ),
            google_profile=GoogleProfile(
                id=profile.sub, email=profile.email, name=profile.name
            ),
            apify_token=secondary_token,
        )

    async def submit(
        self, session: FlowSession | None, secondary_token: str | None
    ) -> Submitted:
        """
        Validate the token, deliver the bundle and return the terminal state.

        Token checks run before any network call. On ``HandoffError`` the
        session is untouched so the user can retry without signing in again;
        on success the caller is expected to discard the session.
        """
        token = self.validate_secondary_token(secondary_token)
        if session is None:
            raise ValidationError("Authentication data lost. Please sign in again.")

        bundle = self.compose_bundle(session, token)
        logger.info("Submitting credential bundle for flow %s", session.flow_id)
        redirect_url = await self._backend.submit_bundle(
            bundle, original_query=session.original_query
        )
        logger.info("GKP backend accepted flow %s", session.flow_id)
        return Submitted(redirect_url=redirect_url)

    @staticmethod
    def start_over(session: FlowSession | None) -> FlowSession:
        """Drop Google credentials and profile, keeping only the flow identity."""
        if session is None:
            return FlowSession()
        return FlowSession(flow_id=session.flow_id, original_query=session.original_query)


__all__ = ["CredentialComposer"]
