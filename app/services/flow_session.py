"""Encrypted, time-limited serialization of a ``FlowSession`` for cookies."""

from __future__ import annotations

import base64
import hashlib
import logging
from typing import Optional

from cryptography.fernet import Fernet, InvalidToken
from pydantic import ValidationError as PydanticValidationError

from app.schemas.flow import FlowSession

logger = logging.getLogger(__name__)


class FlowSessionCodec:
    """Seal flow sessions with a Fernet key derived from a shared secret.

    Fernet both encrypts and authenticates, so the browser can carry the
    Google tokens without being able to read or alter them. Expiry uses the
    timestamp embedded in every Fernet token.
    """

    def __init__(self, *, secret: str, ttl_seconds: int) -> None:
        if not secret:
            raise ValueError("Flow session secret must be provided.")
        digest = hashlib.sha256(secret.encode("utf-8")).digest()
        self._fernet = Fernet(base64.urlsafe_b64encode(digest))
        self._ttl = ttl_seconds

    @property
    def ttl_seconds(self) -> int:
        return self._ttl

    def encode(self, session: FlowSession) -> str:
        serialized = session.model_dump_json(exclude_none=True)
        return self._fernet.encrypt(serialized.encode("utf-8")).decode("utf-8")

    def decode(self, token: Optional[str]) -> Optional[FlowSession]:
        """Return the session, or ``None`` when absent, tampered with or expired."""
        if not token:
            return None
        try:
            serialized = self._fernet.decrypt(token.encode("utf-8"), ttl=self._ttl)
        except InvalidToken:
            logger.info("Discarding invalid or expired flow session cookie")
            return None
        try:
            return FlowSession.model_validate_json(serialized)
        except PydanticValidationError:
            logger.warning("Flow session cookie decrypted but failed validation")
            return None


__all__ = ["FlowSessionCodec"]
