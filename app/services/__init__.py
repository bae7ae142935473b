"""Service layer exports."""

from .authorization import AuthorizationInitiator
from .code_exchange import CodeExchanger
from .credential_composer import CredentialComposer
from .flow_session import FlowSessionCodec

__all__ = [
    "AuthorizationInitiator",
    "CodeExchanger",
    "CredentialComposer",
    "FlowSessionCodec",
]
