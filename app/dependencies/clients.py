"""
Factory functions to provide shared clients and services as FastAPI dependencies.
"""

from functools import lru_cache
from typing import Annotated

from fastapi import Depends

from app.clients import GKPBackendClient, GoogleOAuthClient
from app.core.config import AppSettings, get_settings
from app.services import (
    AuthorizationInitiator,
    CodeExchanger,
    CredentialComposer,
    FlowSessionCodec,
)


def get_app_settings() -> AppSettings:
    """FastAPI dependency returning application settings."""
    return get_settings()


@lru_cache()
def get_google_oauth_client() -> GoogleOAuthClient:
    """Create a singleton Google OAuth client."""
    settings = get_settings()
    return GoogleOAuthClient(
        settings.google, settings.oauth, redirect_uri=settings.redirect_uri
    )


@lru_cache()
def get_gkp_backend_client() -> GKPBackendClient:
    """Create a singleton client for the external GKP backend."""
    return GKPBackendClient(get_settings().backend)


@lru_cache()
def get_flow_session_codec() -> FlowSessionCodec:
    """Provide the flow cookie codec, falling back to the client secret as key material."""
    settings = get_settings()
    secret = settings.security.session_secret or settings.google.client_secret
    return FlowSessionCodec(
        secret=secret, ttl_seconds=settings.security.session_ttl_seconds
    )


def get_authorization_initiator(
    oauth_client: Annotated[GoogleOAuthClient, Depends(get_google_oauth_client)],
) -> AuthorizationInitiator:
    return AuthorizationInitiator(oauth_client)


def get_code_exchanger(
    oauth_client: Annotated[GoogleOAuthClient, Depends(get_google_oauth_client)],
) -> CodeExchanger:
    return CodeExchanger(oauth_client)


def get_credential_composer(
    backend_client: Annotated[GKPBackendClient, Depends(get_gkp_backend_client)],
    settings: Annotated[AppSettings, Depends(get_app_settings)],
) -> CredentialComposer:
    """Build the composer from the backend client and OAuth settings."""
    return CredentialComposer(backend_client, settings.oauth)


__all__ = [
    "get_app_settings",
    "get_authorization_initiator",
    "get_code_exchanger",
    "get_credential_composer",
    "get_flow_session_codec",
    "get_gkp_backend_client",
    "get_google_oauth_client",
]
