"""Abstract base class for authentication providers."""
from abc import ABC, abstractmethod
from typing import Optional

from fastapi import Request
from sqlalchemy.orm import Session as DBSession

from app.services.session_service import IssuedSession


class AuthProvider(ABC):
    """
    Abstract authentication provider interface.

    The household shares one secret, so providers answer "is this browser
    logged in" rather than "who is this".
    """

    @abstractmethod
    def authenticate(self, pin: Optional[str]) -> bool:
        """Return True if the submitted PIN is correct."""
        pass

    @abstractmethod
    def get_token_from_request(self, request: Request) -> Optional[str]:
        """Extract the session token carried by the request, if any."""
        pass

    @abstractmethod
    async def is_authenticated(self, db: DBSession, request: Request) -> bool:
        """Return True if the request carries a valid, unexpired session."""
        pass

    @abstractmethod
    async def create_session(self, db: DBSession) -> IssuedSession:
        """Issue a new session after a successful login."""
        pass

    @abstractmethod
    async def revoke_session(self, db: DBSession, token: str) -> bool:
        """
        Revoke/invalidate a session by its token.

        Returns True if session was revoked, False if not found.
        """
        pass
