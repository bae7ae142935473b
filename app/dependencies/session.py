"""
Request-scoped access to the encrypted flow-session cookie.

Routes receive the decoded ``FlowSession`` through ``get_flow_session`` and
write changes back with ``store_flow_session`` / ``clear_flow_session`` on the
response they return.
"""

from typing import Annotated, Optional

from fastapi import Depends, Request, Response

from app.core.config import AppSettings
from app.schemas.flow import FlowSession
from app.services import FlowSessionCodec

from .clients import get_app_settings, get_flow_session_codec


def get_flow_session(
    request: Request,
    codec: Annotated[FlowSessionCodec, Depends(get_flow_session_codec)],
    settings: Annotated[AppSettings, Depends(get_app_settings)],
) -> Optional[FlowSession]:
    """Decode the flow cookie, yielding ``None`` when missing or unusable."""
    return codec.decode(request.cookies.get(settings.security.session_cookie_name))


def store_flow_session(
    response: Response,
    session: FlowSession,
    *,
    codec: FlowSessionCodec,
    settings: AppSettings,
) -> None:
    response.set_cookie(
        key=settings.security.session_cookie_name,
        value=codec.encode(session),
        max_age=codec.ttl_seconds,
        httponly=True,
        secure=settings.security.session_cookie_secure,
        samesite="lax",
    )


def clear_flow_session(response: Response, *, settings: AppSettings) -> None:
    response.delete_cookie(
        key=settings.security.session_cookie_name,
        httponly=True,
        secure=settings.security.session_cookie_secure,
        samesite="lax",
    )


__all__ = ["clear_flow_session", "get_flow_session", "store_flow_session"]
