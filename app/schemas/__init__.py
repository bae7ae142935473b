"""Public schema exports."""

from .auth import (
    ExchangeResult,
    OAuthExchangeRequest,
    OAuthExchangeResponse,
    Profile,
    TokenSet,
)
from .flow import (
    AwaitingGoogleAuth,
    AwaitingSecondaryToken,
    FlowSession,
    FlowState,
    FlowStatusResponse,
    Redirect,
    SecondaryTokenSubmission,
    Submitted,
)
from .handoff import BackendCallbackResponse, CredentialBundle

__all__ = [
    "AwaitingGoogleAuth",
    "AwaitingSecondaryToken",
    "BackendCallbackResponse",
    "CredentialBundle",
    "ExchangeResult",
    "FlowSession",
    "FlowState",
    "FlowStatusResponse",
    "OAuthExchangeRequest",
    "OAuthExchangeResponse",
    "Profile",
    "Redirect",
    "SecondaryTokenSubmission",
    "Submitted",
    "TokenSet",
]
