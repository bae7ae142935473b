"""
Error taxonomy for the OAuth relay.

Each error carries a user-facing ``message`` and the HTTP status it maps to;
``app.main`` renders them as ``{"success": false, "message": ...}``.
"""

from __future__ import annotations

from http import HTTPStatus


class RelayError(Exception):
    """Base class for errors that end the current step of the flow."""

    status_code: int = HTTPStatus.INTERNAL_SERVER_ERROR

    def __init__(self, message: str) -> None:
        super().__init__(message)
        self.message = message


class ConfigurationError(RelayError):
    """Required configuration (the Google client id) is missing."""

    status_code = HTTPStatus.INTERNAL_SERVER_ERROR


class ValidationError(RelayError):
    """User or caller input was rejected before any outbound call."""

    status_code = HTTPStatus.UNPROCESSABLE_ENTITY


class ExchangeError(RelayError):
    """Google rejected the authorization code or the profile lookup failed."""

    status_code = HTTPStatus.BAD_GATEWAY


class HandoffError(RelayError):
    """The external backend rejected the credential bundle."""

    status_code = HTTPStatus.BAD_GATEWAY


__all__ = [
    "ConfigurationError",
    "ExchangeError",
    "HandoffError",
    "RelayError",
    "ValidationError",
]
