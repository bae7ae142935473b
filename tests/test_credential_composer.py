try:
    from . import _bootstrap  # noqa: F401
except Exception:  # pragma: no cover
    import _bootstrap  # type: ignore # noqa: F401

import pytest

from app.core.errors import HandoffError, ValidationError
from app.schemas import (
    AwaitingGoogleAuth,
    AwaitingSecondaryToken,
    FlowSession,
    Profile,
    Submitted,
    TokenSet,
)
from app.services import CredentialComposer

try:
    from ._providers import DEFAULT_TOKENS
except ImportError:  # pragma: no cover
    from _providers import DEFAULT_TOKENS  # type: ignore


def _signed_in_session(**token_overrides) -> FlowSession:
    tokens = {**DEFAULT_TOKENS, **token_overrides}
    return FlowSession(
        flow_id="flow-1",
        original_query="foo=bar&client_id=mcp",
        tokens=TokenSet(**tokens),
        profile=Profile(sub="1", email="u@x.com", name="Una User"),
    )


@pytest.fixture()
def composer(backend_client, settings) -> CredentialComposer:
    return CredentialComposer(backend_client, settings.oauth)


def test_state_waits_for_google_until_exchange_completes(composer) -> None:
    assert composer.state_for(None) == AwaitingGoogleAuth()
    assert composer.state_for(FlowSession(original_query="foo=bar")) == AwaitingGoogleAuth()

    session = _signed_in_session()
    state = composer.state_for(session)

    assert isinstance(state, AwaitingSecondaryToken)
    assert state.profile == session.profile


@pytest.mark.anyio
@pytest.mark.parametrize("token", ["not-a-token", "", "   ", "APIFY_API_xyz"])
async def test_invalid_secondary_token_is_rejected_without_network(
    composer, fake_backend, token
) -> None:
    session = _signed_in_session()

    with pytest.raises(ValidationError):
        await composer.submit(session, token)

    assert fake_backend.requests == []


@pytest.mark.anyio
async def test_valid_token_posts_bundle_exactly_once(composer, fake_backend) -> None:
    submitted = await composer.submit(_signed_in_session(), "apify_api_xyz")

    assert submitted == Submitted(redirect_url="https://host/done")
    assert len(fake_backend.requests) == 1
    request = fake_backend.requests[0]
    assert request.method == "POST"
    assert str(request.url) == "https://gkp.example.com/callback?foo=bar&client_id=mcp"
    assert fake_backend.payloads()[0] == {
        "session": {
            "access_token": "ya29.access",
            "user": {"id": "1", "email": "u@x.com"},
        },
        "google_credentials": {
            "access_token": "ya29.access",
            "refresh_token": "1//refresh",
            "expires_in": 3599,
            "scope": "openid https://www.googleapis.com/auth/userinfo.email",
        },
        "google_profile": {"id": "1", "email": "u@x.com", "name": "Una User"},
        "client_metadata": {},
        "apify_token": "apify_api_xyz",
    }


@pytest.mark.anyio
async def test_missing_expires_in_uses_documented_default(composer, fake_backend) -> None:
    await composer.submit(_signed_in_session(expires_in=None), "apify_api_xyz")

    assert fake_backend.payloads()[0]["google_credentials"]["expires_in"] == 3600


@pytest.mark.anyio
async def test_lost_session_is_a_validation_error(composer, fake_backend) -> None:
    with pytest.raises(ValidationError) as excinfo:
        await composer.submit(None, "apify_api_xyz")

    assert "sign in again" in excinfo.value.message
    assert fake_backend.requests == []


@pytest.mark.anyio
async def test_backend_rejection_raises_handoff_error_and_keeps_session(
    composer, fake_backend
) -> None:
    fake_backend.status = 400
    fake_backend.body = {"success": False, "message": "Apify token rejected"}
    session = _signed_in_session()
    before = session.model_copy(deep=True)

    with pytest.raises(HandoffError) as excinfo:
        await composer.submit(session, "apify_api_xyz")

    assert excinfo.value.message == "Apify token rejected"
    assert session == before
    assert isinstance(composer.state_for(session), AwaitingSecondaryToken)


@pytest.mark.anyio
@pytest.mark.parametrize(
    "status, body, message",
    [
        (200, {"success": False}, "An unknown error occurred on the server."),
        (200, {"redirectUrl": "https://host/done"}, "An unknown error occurred on the server."),
        (200, {"success": True}, "GKP backend did not return a redirect URL."),
        (502, "<html>Bad Gateway</html>", "An unknown error occurred on the server."),
    ],
)
async def test_backend_failure_shapes_raise_handoff_error(
    composer, fake_backend, status, body, message
) -> None:
    fake_backend.status = status
    fake_backend.body = body

    with pytest.raises(HandoffError) as excinfo:
        await composer.submit(_signed_in_session(), "apify_api_xyz")

    assert excinfo.value.message == message
    assert len(fake_backend.requests) == 1


def test_start_over_drops_google_state_only(composer) -> None:
    reset = composer.start_over(_signed_in_session())

    assert reset.tokens is None
    assert reset.profile is None
    assert reset.flow_id == "flow-1"
    assert reset.original_query == "foo=bar&client_id=mcp"
    assert composer.state_for(reset) == AwaitingGoogleAuth()


def test_start_over_without_session_never_raises(composer) -> None:
    reset = composer.start_over(None)

    assert composer.state_for(reset) == AwaitingGoogleAuth()
