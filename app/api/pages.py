"""
Browser-facing routes that walk a user through the relay.

These answer with redirects for browsers (``Accept: text/html``) and with JSON
flow descriptions otherwise; rendering a UI on top is left to the frontend.
"""

from __future__ import annotations

import logging
from http import HTTPStatus
from typing import Annotated, Optional

from fastapi import APIRouter, Depends, Query, Request
from fastapi.responses import JSONResponse, RedirectResponse, Response

from app.core.config import AppSettings
from app.core.errors import RelayError
from app.dependencies import (
    clear_flow_session,
    get_app_settings,
    get_authorization_initiator,
    get_code_exchanger,
    get_credential_composer,
    get_flow_session,
    get_flow_session_codec,
    store_flow_session,
)
from app.schemas import (
    AwaitingGoogleAuth,
    FlowSession,
    FlowStatusResponse,
    SecondaryTokenSubmission,
)
from app.services import (
    AuthorizationInitiator,
    CodeExchanger,
    CredentialComposer,
    FlowSessionCodec,
)
from app.utils.redirects import (
    SECONDARY_STEP,
    authorize_url_for_step,
    authorize_url_with_error,
)

router = APIRouter()
logger = logging.getLogger(__name__)

SESSION_EXPIRED_MESSAGE = "Sign-in session expired. Please start again."
SESSION_LOST_MESSAGE = "Authentication data lost. Please sign in again."


def _wants_html(request: Request) -> bool:
    return "text/html" in request.headers.get("accept", "").lower()


@router.get("/authorize", response_model=FlowStatusResponse, response_model_exclude_none=True)
async def show_authorization_step(
    composer: Annotated[CredentialComposer, Depends(get_credential_composer)],
    session: Annotated[Optional[FlowSession], Depends(get_flow_session)],
    step: Optional[str] = Query(None, description="Step the callback sent the browser to."),
    error: Optional[str] = Query(None, description="Error carried over a redirect."),
) -> FlowStatusResponse:
    """Describe where the current browser is in the flow."""
    state = composer.state_for(session)
    if error is None and step == SECONDARY_STEP and isinstance(state, AwaitingGoogleAuth):
        error = SESSION_LOST_MESSAGE
    return FlowStatusResponse(state=state, error=error)


@router.get("/authorize/google")
async def start_google_sign_in(
    request: Request,
    initiator: Annotated[AuthorizationInitiator, Depends(get_authorization_initiator)],
    codec: Annotated[FlowSessionCodec, Depends(get_flow_session_codec)],
    settings: Annotated[AppSettings, Depends(get_app_settings)],
) -> Response:
    """
    Send the browser to Google, carrying this request's raw query as state.

    A missing client id surfaces as a configuration error and no redirect.
    """
    redirect, session = initiator.initiate(request.url.query)

    if _wants_html(request):
        response: Response = RedirectResponse(
            url=redirect.url, status_code=HTTPStatus.TEMPORARY_REDIRECT
        )
    else:
        response = JSONResponse(content={"authorization_url": redirect.url})
    store_flow_session(response, session, codec=codec, settings=settings)
    return response


@router.get("/oauth/callback")
async def handle_google_callback(
    exchanger: Annotated[CodeExchanger, Depends(get_code_exchanger)],
    codec: Annotated[FlowSessionCodec, Depends(get_flow_session_codec)],
    settings: Annotated[AppSettings, Depends(get_app_settings)],
    session: Annotated[Optional[FlowSession], Depends(get_flow_session)],
    code: Optional[str] = Query(None, description="Authorization code returned by Google."),
    state: Optional[str] = Query(None, description="Original query string echoed back."),
    error: Optional[str] = Query(None, description="Error reported by Google."),
) -> RedirectResponse:
    """Complete the exchange and send the browser on to the Apify step."""
    if error:
        logger.warning("Google returned an OAuth error: %s", error)
        return RedirectResponse(
            url=authorize_url_with_error(error), status_code=HTTPStatus.TEMPORARY_REDIRECT
        )

    if session is None or session.original_query != (state or ""):
        logger.warning("Callback does not match a sign-in started by this browser")
        return RedirectResponse(
            url=authorize_url_with_error(SESSION_EXPIRED_MESSAGE),
            status_code=HTTPStatus.TEMPORARY_REDIRECT,
        )

    try:
        result = await exchanger.exchange(code, state)
    except RelayError as exc:
        return RedirectResponse(
            url=authorize_url_with_error(exc.message),
            status_code=HTTPStatus.TEMPORARY_REDIRECT,
        )

    updated = session.model_copy(
        update={"tokens": result.tokens, "profile": result.profile}
    )

    response = RedirectResponse(
        url=authorize_url_for_step(), status_code=HTTPStatus.TEMPORARY_REDIRECT
    )
    store_flow_session(response, updated, codec=codec, settings=settings)
    return response


@router.post("/authorize/complete")
async def complete_authorization(
    request: Request,
    payload: SecondaryTokenSubmission,
    composer: Annotated[CredentialComposer, Depends(get_credential_composer)],
    settings: Annotated[AppSettings, Depends(get_app_settings)],
    session: Annotated[Optional[FlowSession], Depends(get_flow_session)],
) -> Response:
    """
    Hand the credential bundle to the GKP backend and follow its redirect.

    Validation and handoff errors leave the flow cookie in place so the user
    can correct the token and retry without signing in to Google again.
    """
    submitted = await composer.submit(session, payload.secondary_token)

    if _wants_html(request):
        response: Response = RedirectResponse(
            url=submitted.redirect_url, status_code=HTTPStatus.SEE_OTHER
        )
    else:
        response = JSONResponse(
            content={
                "success": True,
                "redirectUrl": submitted.redirect_url,
                "state": submitted.model_dump(),
            }
        )
    clear_flow_session(response, settings=settings)
    return response


@router.post(
    "/authorize/start-over",
    response_model=FlowStatusResponse,
    response_model_exclude_none=True,
)
async def start_over(
    response: Response,
    composer: Annotated[CredentialComposer, Depends(get_credential_composer)],
    codec: Annotated[FlowSessionCodec, Depends(get_flow_session_codec)],
    settings: Annotated[AppSettings, Depends(get_app_settings)],
    session: Annotated[Optional[FlowSession], Depends(get_flow_session)],
) -> FlowStatusResponse:
    """Forget the Google credentials so the user can sign in again."""
    reset = composer.start_over(session)
    store_flow_session(response, reset, codec=codec, settings=settings)
    return FlowStatusResponse(state=AwaitingGoogleAuth())
