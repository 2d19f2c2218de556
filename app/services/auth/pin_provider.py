"""Shared-PIN authentication provider."""
import logging
import secrets
from typing import Optional

import bcrypt
from fastapi import Request
from sqlalchemy.orm import Session as DBSession

from app.config import settings
from app.services.auth.base import AuthProvider
from app.services.session_service import IssuedSession, session_service

logger = logging.getLogger(__name__)


class PinAuthProvider(AuthProvider):
    """
    Authentication against the household PIN, with database sessions.

    The PIN is read from settings: a bcrypt ``pin_hash`` when configured,
    otherwise the plaintext ``pin``. With neither set nobody can log in.
    """

    def __init__(self, pin: Optional[str] = None, pin_hash: Optional[str] = None):
        self._pin = pin
        self._pin_hash = pin_hash

    @property
    def pin(self) -> str:
        return (self._pin if self._pin is not None else settings.pin).strip()

    @property
    def pin_hash(self) -> str:
        return (self._pin_hash if self._pin_hash is not None else settings.pin_hash).strip()

    @staticmethod
    def hash_pin(pin: str) -> str:
        """Hash a PIN using bcrypt."""
        return bcrypt.hashpw(pin.strip().encode("utf-8"), bcrypt.gensalt()).decode("utf-8")

    def _verify_hash(self, plain_pin: str, hashed_pin: str) -> bool:
        try:
            return bcrypt.checkpw(plain_pin.encode("utf-8"), hashed_pin.encode("utf-8"))
        except ValueError:
            logger.error("PIN_HASH is not a valid bcrypt hash")
            return False

    def authenticate(self, pin: Optional[str]) -> bool:
        submitted = (pin or "").strip()
        if not submitted:
            return False

        if self.pin_hash:
            return self._verify_hash(submitted, self.pin_hash)
        if self.pin:
            return secrets.compare_digest(submitted.encode("utf-8"), self.pin.encode("utf-8"))

        logger.warning("Login attempted but no PIN is configured (set PIN or PIN_HASH)")
        return False

    def get_token_from_request(self, request: Request) -> Optional[str]:
        token = request.cookies.get(settings.session_cookie_name)
        return token.strip() if token else None

    async def is_authenticated(self, db: DBSession, request: Request) -> bool:
        return session_service.validate(db, self.get_token_from_request(request))

    async def create_session(self, db: DBSession) -> IssuedSession:
        issued = session_service.issue(db)
        # Piggy-back expiry cleanup on logins
        session_service.sweep_expired(db)
        return issued

    async def revoke_session(self, db: DBSession, token: str) -> bool:
        return session_service.revoke(db, token)


# Singleton instance
pin_auth_provider = PinAuthProvider()
