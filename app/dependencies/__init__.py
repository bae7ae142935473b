"""Expose dependency helpers for FastAPI routers."""

from .clients import (
    get_app_settings,
    get_authorization_initiator,
    get_code_exchanger,
    get_credential_composer,
    get_flow_session_codec,
    get_gkp_backend_client,
    get_google_oauth_client,
)
from .session import clear_flow_session, get_flow_session, store_flow_session

__all__ = [
    "clear_flow_session",
    "get_app_settings",
    "get_authorization_initiator",
    "get_code_exchanger",
    "get_credential_composer",
    "get_flow_session",
    "get_flow_session_codec",
    "get_gkp_backend_client",
    "get_google_oauth_client",
    "store_flow_session",
]
