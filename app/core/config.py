"""
Application configuration models and helpers.

Centralizes settings management so the relay routes, the services behind them
and the ``check_env`` script share a consistent configuration surface.
"""

from functools import lru_cache
from pathlib import Path
from typing import Optional

import os

from pydantic import AnyHttpUrl, Field
from pydantic_settings import BaseSettings, SettingsConfigDict


def load_env_file(path: str = ".env") -> None:
    """Best-effort load key=value pairs from a .env file into the environment."""
    env_path = Path(path)
    if not env_path.exists():
        return
    for raw_line in env_path.read_text().splitlines():
        line = raw_line.strip()
        if not line or line.startswith("#"):
            continue
        key, sep, value = line.partition("=")
        if not sep:
            continue
        key = key.strip()
        if not key or key in os.environ:
            continue
        cleaned = value.strip().strip('"').strip("'")
        os.environ[key] = cleaned


load_env_file()


class GoogleSettings(BaseSettings):
    """Configuration required for the Google OAuth client."""

    model_config = SettingsConfigDict(extra="ignore")

    client_id: Optional[str] = Field(
        None,
        validation_alias="GOOGLE_CLIENT_ID",
        description="Public OAuth client identifier; checked when a flow starts.",
    )
    client_secret: str = Field(..., validation_alias="GOOGLE_CLIENT_SECRET")


class BackendSettings(BaseSettings):
    """Settings for the external backend that receives credential bundles."""

    model_config = SettingsConfigDict(extra="ignore")

    base_url: AnyHttpUrl = Field(..., validation_alias="GKP_BACKEND_URL")

    @property
    def callback_url(self) -> str:
        return f"{str(self.base_url).rstrip('/')}/callback"


class SecuritySettings(BaseSettings):
    """Flow-session cookie configuration."""

    model_config = SettingsConfigDict(extra="ignore")

    session_secret: Optional[str] = Field(
        None,
        validation_alias="SESSION_SECRET",
        description=(
            "Secret used to derive the key that encrypts the flow-session cookie."
        ),
    )
    session_ttl_seconds: int = Field(900, validation_alias="SESSION_TTL")
    session_cookie_name: str = Field("relay_flow", validation_alias="SESSION_COOKIE_NAME")
    session_cookie_secure: bool = Field(True, validation_alias="SESSION_COOKIE_SECURE")


class OAuthSettings(BaseSettings):
    """OAuth flow configuration."""

    model_config = SettingsConfigDict(extra="ignore")

    scopes: tuple[str, ...] = ("openid", "email", "profile")
    secondary_token_prefix: str = Field(
        "apify_api_", validation_alias="SECONDARY_TOKEN_PREFIX"
    )
    default_expires_in: int = Field(
        3600,
        validation_alias="DEFAULT_TOKEN_EXPIRES_IN",
        description="Lifetime forwarded to the backend when Google omits expires_in.",
    )


class AppSettings(BaseSettings):
    """Root settings object for the FastAPI application."""

    model_config = SettingsConfigDict(
        env_file=".env", env_file_encoding="utf-8", extra="ignore"
    )

    environment: str = Field("development", validation_alias="APP_ENV")
    log_level: str = Field("INFO", validation_alias="APP_LOG_LEVEL")
    frontend_base_url: AnyHttpUrl = Field(
        ...,
        validation_alias="FRONTEND_BASE_URL",
        description="Public URL of this service; the OAuth redirect URI hangs off it.",
    )
    security: SecuritySettings = Field(default_factory=SecuritySettings)
    oauth: OAuthSettings = Field(default_factory=OAuthSettings)
    google: GoogleSettings = Field(default_factory=GoogleSettings)
    backend: BackendSettings = Field(default_factory=BackendSettings)

    @property
    def redirect_uri(self) -> str:
        return f"{str(self.frontend_base_url).rstrip('/')}/oauth/callback"


@lru_cache()
def get_settings() -> AppSettings:
    """Return a cached settings object."""
    return AppSettings()  # type: ignore[call-arg]


__all__ = [
    "AppSettings",
    "BackendSettings",
    "GoogleSettings",
    "OAuthSettings",
    "SecuritySettings",
    "get_settings",
]
