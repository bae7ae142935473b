"""
Models describing a single relay flow.

``FlowSession`` replaces browser-local storage: it travels in an encrypted
cookie and is handed to the services explicitly. ``FlowState`` is the
composer's state, a union discriminated by ``kind``.
"""

from __future__ import annotations

import uuid
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, Field

from .auth import Profile, TokenSet


class FlowSession(BaseModel):
    """Per-browser flow data, created when the user starts Google sign-in."""

    flow_id: str = Field(default_factory=lambda: uuid.uuid4().hex)
    original_query: str = Field(
        "", description="Caller's raw query string, replayed to the backend."
    )
    tokens: Optional[TokenSet] = None
    profile: Optional[Profile] = None

    @property
    def has_google_credentials(self) -> bool:
        return self.tokens is not None and self.profile is not None


class AwaitingGoogleAuth(BaseModel):
    kind: Literal["awaiting_google_auth"] = "awaiting_google_auth"


class AwaitingSecondaryToken(BaseModel):
    kind: Literal["awaiting_secondary_token"] = "awaiting_secondary_token"
    profile: Profile


class Submitted(BaseModel):
    kind: Literal["submitted"] = "submitted"
    redirect_url: str


FlowState = Annotated[
    Union[AwaitingGoogleAuth, AwaitingSecondaryToken, Submitted],
    Field(discriminator="kind"),
]


class Redirect(BaseModel):
    """A navigation the caller should perform; routes turn it into a response."""

    url: str


class FlowStatusResponse(BaseModel):
    """Body returned by the browser-facing ``/authorize`` routes."""

    state: FlowState
    error: Optional[str] = None


class SecondaryTokenSubmission(BaseModel):
    """Body of ``POST /authorize/complete``."""

    secondary_token: str = Field(
        "", description="User-supplied Apify API token (``apify_api_...``)."
    )


__all__ = [
    "AwaitingGoogleAuth",
    "AwaitingSecondaryToken",
    "FlowSession",
    "FlowState",
    "FlowStatusResponse",
    "Redirect",
    "SecondaryTokenSubmission",
    "Submitted",
]
