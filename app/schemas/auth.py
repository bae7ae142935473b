"""Schemas related to the Google OAuth code exchange."""

from __future__ import annotations

from typing import Any, Optional

from pydantic import BaseModel, ConfigDict, Field


class TokenSet(BaseModel):
    """Token response from Google's token endpoint, passed through as given."""

    model_config = ConfigDict(extra="ignore")

    access_token: str
    refresh_token: Optional[str] = None
    expires_in: Optional[int] = None
    scope: Optional[str] = None
    token_type: Optional[str] = None


class Profile(BaseModel):
    """Minimal identity projection of Google's user-info response."""

    sub: str = Field(..., description="Google account id (the userinfo ``id`` field).")
    email: Optional[str] = None
    name: Optional[str] = None
    picture: Optional[str] = None

    @classmethod
    def from_userinfo(cls, payload: dict[str, Any]) -> "Profile":
        return cls(
            sub=str(payload["id"]),
            email=payload.get("email"),
            name=payload.get("name"),
            picture=payload.get("picture"),
        )


class OAuthExchangeRequest(BaseModel):
    """Body of ``POST /api/oauth/exchange``."""

    code: Optional[str] = Field(None, description="Authorization code returned by Google.")
    state: Optional[str] = Field(
        None, description="Original query string echoed back through OAuth state."
    )


class ExchangeResult(BaseModel):
    """Outcome of a successful code exchange."""

    tokens: TokenSet
    profile: Profile


class OAuthExchangeResponse(BaseModel):
    """Envelope returned by the exchange endpoint; failures are not raised."""

    success: bool
    tokens: Optional[TokenSet] = None
    profile: Optional[Profile] = None
    message: Optional[str] = None


__all__ = [
    "ExchangeResult",
    "OAuthExchangeRequest",
    "OAuthExchangeResponse",
    "Profile",
    "TokenSet",
]
