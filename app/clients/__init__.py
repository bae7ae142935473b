"""Expose constructed client wrappers."""

from .gkp_backend import GKPBackendClient
from .google_auth import GoogleOAuthClient

__all__ = [
    "GKPBackendClient",
    "GoogleOAuthClient",
]
