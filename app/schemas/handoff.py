"""
Pydantic models for the payload exchanged with the external GKP backend.
"""

from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field


class BundleUser(BaseModel):
    id: str
    email: Optional[str] = None


class BundleSession(BaseModel):
    """Session identity the backend keys the integration on."""

    access_token: str
    user: BundleUser


class GoogleCredentials(BaseModel):
    access_token: str
    refresh_token: Optional[str] = None
    expires_in: int = Field(..., description="Access token lifetime in seconds.")
    scope: Optional[str] = None


class GoogleProfile(BaseModel):
    id: str
    email: Optional[str] = None
    name: Optional[str] = None


class CredentialBundle(BaseModel):
    """Composed payload POSTed once to ``<backend>/callback``."""

    session: BundleSession
    google_credentials: GoogleCredentials
    google_profile: GoogleProfile
    client_metadata: Dict[str, Any] = Field(default_factory=dict)
    apify_token: str


class BackendCallbackResponse(BaseModel):
    """Response body of the backend callback endpoint."""

    model_config = ConfigDict(extra="ignore", populate_by_name=True)

    success: bool = False
    redirect_url: Optional[str] = Field(None, alias="redirectUrl")
    message: Optional[str] = None


__all__ = [
    "BackendCallbackResponse",
    "BundleSession",
    "BundleUser",
    "CredentialBundle",
    "GoogleCredentials",
    "GoogleProfile",
]
