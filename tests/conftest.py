"""Pytest configuration shared across the suite."""

try:
    from . import _bootstrap  # noqa: F401
except Exception:  # pragma: no cover - fallback for rootdir-relative imports
    import _bootstrap  # type: ignore # noqa: F401

import pytest

from app.clients import GKPBackendClient, GoogleOAuthClient
from app.core.config import AppSettings, get_settings

try:
    from ._providers import FakeBackend, FakeGoogle
except ImportError:  # pragma: no cover
    from _providers import FakeBackend, FakeGoogle  # type: ignore


@pytest.fixture
def anyio_backend() -> str:
    """Force AnyIO-powered tests to run against asyncio backend only."""
    return "asyncio"


@pytest.fixture()
def settings() -> AppSettings:
    return get_settings()


@pytest.fixture()
def fake_google() -> FakeGoogle:
    return FakeGoogle()


@pytest.fixture()
def fake_backend() -> FakeBackend:
    return FakeBackend()


@pytest.fixture()
def oauth_client(settings: AppSettings, fake_google: FakeGoogle) -> GoogleOAuthClient:
    return GoogleOAuthClient(
        settings.google,
        settings.oauth,
        redirect_uri=settings.redirect_uri,
        transport=fake_google.transport,
    )


@pytest.fixture()
def backend_client(settings: AppSettings, fake_backend: FakeBackend) -> GKPBackendClient:
    return GKPBackendClient(settings.backend, transport=fake_backend.transport)


@pytest.fixture()
def relay_app(oauth_client: GoogleOAuthClient, backend_client: GKPBackendClient):
    """The ASGI app wired to the fake Google and backend transports."""
    from app import dependencies
    from app.main import app

    app.dependency_overrides.update(
        {
            dependencies.get_google_oauth_client: lambda: oauth_client,
            dependencies.get_gkp_backend_client: lambda: backend_client,
        }
    )
    yield app
    app.dependency_overrides.clear()
