"""
JSON API routes for the OAuth relay.
"""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Annotated

from fastapi import APIRouter, Depends

from app.core.errors import RelayError
from app.dependencies import get_code_exchanger
from app.schemas import OAuthExchangeRequest, OAuthExchangeResponse
from app.services import CodeExchanger

router = APIRouter()
logger = logging.getLogger(__name__)


@router.get("/health", status_code=HTTPStatus.OK)
async def healthcheck() -> dict:
    """Simple health endpoint for monitoring."""
    return {"status": "ok"}


@router.post(
    "/oauth/exchange",
    response_model=OAuthExchangeResponse,
    response_model_exclude_none=True,
    status_code=HTTPStatus.OK,
)
async def exchange_authorization_code(
    payload: OAuthExchangeRequest,
    exchanger: Annotated[CodeExchanger, Depends(get_code_exchanger)],
) -> OAuthExchangeResponse:
    """
    Trade an authorization code for Google tokens and the user's profile.

    Failures are reported in the body with ``success: false`` rather than as
    an HTTP error so browser callers handle a single response shape.
    """
    try:
        result = await exchanger.exchange(payload.code, payload.state)
    except RelayError as exc:
        logger.warning("Token exchange error: %s", exc.message)
        return OAuthExchangeResponse(success=False, message=exc.message)

    return OAuthExchangeResponse(success=True, tokens=result.tokens, profile=result.profile)
