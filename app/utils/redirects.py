"""Helpers for carrying flow errors across full-page redirects."""

from __future__ import annotations

from urllib.parse import urlencode

AUTHORIZE_PATH = "/authorize"
SECONDARY_STEP = "apify"


def authorize_url_with_error(message: str, path: str = AUTHORIZE_PATH) -> str:
    """Relative URL of the authorize page with ``message`` in its ``error`` param."""
    return f"{path}?{urlencode({'error': message})}"


def authorize_url_for_step(step: str = SECONDARY_STEP, path: str = AUTHORIZE_PATH) -> str:
    return f"{path}?{urlencode({'step': step})}"


__all__ = [
    "AUTHORIZE_PATH",
    "SECONDARY_STEP",
    "authorize_url_for_step",
    "authorize_url_with_error",
]
