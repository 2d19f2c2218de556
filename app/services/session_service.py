"""Server-side sessions backing the shared PIN login."""

import logging
import secrets
from dataclasses import dataclass
from datetime import datetime, timedelta, timezone
from typing import Optional

from sqlalchemy.orm import Session as DBSession

from app.config import settings
from app.models.session import Session

logger = logging.getLogger(__name__)

TOKEN_BYTES = 32


@dataclass
class IssuedSession:
    token: str
    expires_at: datetime


def _utcnow() -> datetime:
    return datetime.now(timezone.utc)


class SessionService:
    """
    Token store for logged-in browsers.

    Expired rows are removed by ``sweep_expired``, which runs opportunistically,
    so ``validate`` always checks the expiry itself instead of trusting that a
    row still existing means it is valid.
    """

    @staticmethod
    def generate_token() -> str:
        """256 random bits, hex encoded."""
        return secrets.token_hex(TOKEN_BYTES)

    @staticmethod
    def issue(db: DBSession, now: Optional[datetime] = None) -> IssuedSession:
        """Create a session valid for ``settings.session_max_age`` seconds."""
        token = SessionService.generate_token()
        expires_at = (now or _utcnow()) + timedelta(seconds=settings.session_max_age)

        db.add(Session(token=token, expires_at=expires_at))
        db.commit()

        return IssuedSession(token=token, expires_at=expires_at)

    @staticmethod
    def validate(
        db: DBSession, token: Optional[str], now: Optional[datetime] = None
    ) -> bool:
        """True only for a known token that expires strictly after now."""
        if not token:
            return False

        session = (
            db.query(Session)
            .filter(Session.token == token, Session.expires_at > (now or _utcnow()))
            .first()
        )
        return session is not None

    @staticmethod
    def revoke(db: DBSession, token: str) -> bool:
        """
        Delete a session by its token.

        Returns:
            True if a session was deleted, False if the token was unknown
        """
        deleted = (
            db.query(Session)
            .filter(Session.token == token)
            .delete(synchronize_session=False)
        )
        db.commit()
        return deleted > 0

    @staticmethod
    def sweep_expired(db: DBSession, now: Optional[datetime] = None) -> int:
        """Delete sessions that expired before now. Returns the number removed."""
        count = (
            db.query(Session)
            .filter(Session.expires_at < (now or _utcnow()))
            .delete(synchronize_session=False)
        )
        db.commit()
        if count:
            logger.info("Swept %d expired sessions", count)
        return count


# Singleton instance
session_service = SessionService()
