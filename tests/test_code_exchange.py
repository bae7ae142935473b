try:
    from . import _bootstrap  # noqa: F401
except Exception:  # pragma: no cover
    import _bootstrap  # type: ignore # noqa: F401

from urllib.parse import parse_qs

import httpx
import pytest

from app.clients import GoogleOAuthClient
from app.core.errors import ExchangeError, ValidationError
from app.services import CodeExchanger

try:
    from ._providers import FakeGoogle
except ImportError:  # pragma: no cover
    from _providers import FakeGoogle  # type: ignore


pytestmark = pytest.mark.anyio


def _exchanger(settings, fake_google: FakeGoogle) -> CodeExchanger:
    client = GoogleOAuthClient(
        settings.google,
        settings.oauth,
        redirect_uri=settings.redirect_uri,
        transport=fake_google.transport,
    )
    return CodeExchanger(client)


async def test_exchange_renames_id_to_sub_and_passes_tokens_through(settings) -> None:
    google = FakeGoogle(userinfo_body={"id": "123", "email": "a@b.com"})

    result = await _exchanger(settings, google).exchange("abc", "foo=bar")

    assert result.profile.model_dump(exclude_none=True) == {"sub": "123", "email": "a@b.com"}
    assert result.tokens.model_dump() == google.token_body


async def test_exchange_posts_confidential_client_form_then_bearer_lookup(settings) -> None:
    google = FakeGoogle()

    await _exchanger(settings, google).exchange("abc")

    token_request, profile_request = google.requests
    assert token_request.method == "POST"
    assert str(token_request.url) == GoogleOAuthClient.TOKEN_URL
    form = parse_qs(token_request.content.decode())
    assert form == {
        "client_id": ["test-client-id"],
        "client_secret": ["test-client-secret"],
        "code": ["abc"],
        "grant_type": ["authorization_code"],
        "redirect_uri": ["https://relay.example.com/oauth/callback"],
    }

    assert profile_request.method == "GET"
    assert str(profile_request.url) == GoogleOAuthClient.USERINFO_URL
    assert profile_request.headers["authorization"] == "Bearer ya29.access"


@pytest.mark.parametrize("code", [None, "", "   "])
async def test_missing_code_is_rejected_before_any_call(settings, code) -> None:
    google = FakeGoogle()

    with pytest.raises(ValidationError):
        await _exchanger(settings, google).exchange(code, "foo=bar")

    assert google.requests == []


async def test_token_error_surfaces_provider_description(settings) -> None:
    google = FakeGoogle(
        token_status=400,
        token_body={"error": "invalid_grant", "error_description": "bad code"},
    )

    with pytest.raises(ExchangeError) as excinfo:
        await _exchanger(settings, google).exchange("abc")

    assert excinfo.value.message == "bad code"
    assert len(google.requests) == 1


async def test_profile_failure_is_an_exchange_error(settings) -> None:
    google = FakeGoogle(userinfo_status=401, userinfo_body={})

    with pytest.raises(ExchangeError) as excinfo:
        await _exchanger(settings, google).exchange("abc")

    assert excinfo.value.message == "Failed to fetch user profile"


@pytest.mark.parametrize("userinfo", [{"id": None, "email": "a@b.com"}, {"id": ""}])
async def test_profile_without_account_id_is_an_exchange_error(settings, userinfo) -> None:
    google = FakeGoogle(userinfo_body=userinfo)

    with pytest.raises(ExchangeError) as excinfo:
        await _exchanger(settings, google).exchange("abc")

    assert excinfo.value.message == "Failed to fetch user profile"


async def test_network_failure_is_an_exchange_error(settings) -> None:
    def refuse(request: httpx.Request) -> httpx.Response:
        raise httpx.ConnectError("connection refused", request=request)

    client = GoogleOAuthClient(
        settings.google,
        settings.oauth,
        redirect_uri=settings.redirect_uri,
        transport=httpx.MockTransport(refuse),
    )

    with pytest.raises(ExchangeError):
        await CodeExchanger(client).exchange("abc")


async def test_exchange_endpoint_reports_provider_error_in_body(relay_app, fake_google) -> None:
    fake_google.token_status = 400
    fake_google.token_body = {"error_description": "bad code"}

    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=relay_app), base_url="http://testserver"
    ) as client:
        response = await client.post(
            "/api/oauth/exchange", json={"code": "abc", "state": "foo=bar"}
        )

    assert response.status_code == 200
    assert response.json() == {"success": False, "message": "bad code"}


async def test_exchange_endpoint_returns_tokens_and_profile(relay_app, fake_google) -> None:
    fake_google.userinfo_body = {"id": "123", "email": "a@b.com"}

    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=relay_app), base_url="http://testserver"
    ) as client:
        response = await client.post(
            "/api/oauth/exchange", json={"code": "abc", "state": "foo=bar"}
        )

    body = response.json()
    assert body["success"] is True
    assert body["profile"] == {"sub": "123", "email": "a@b.com"}
    assert body["tokens"]["access_token"] == "ya29.access"
    assert body["tokens"]["refresh_token"] == "1//refresh"


async def test_exchange_endpoint_requires_code(relay_app, fake_google) -> None:
    async with httpx.AsyncClient(
        transport=httpx.ASGITransport(app=relay_app), base_url="http://testserver"
    ) as client:
        response = await client.post("/api/oauth/exchange", json={"state": "foo=bar"})

    assert response.json() == {
        "success": False,
        "message": "Authorization code is required",
    }
    assert fake_google.requests == []
