"""FastAPI dependencies for authentication."""
from fastapi import Depends, HTTPException, Request, status
from sqlalchemy.orm import Session

from app.database import get_db
from app.services.auth import get_auth_provider


async def require_session(
    request: Request,
    db: Session = Depends(get_db)
) -> None:
    """
    Require a valid session cookie.

    Raises 401 if not authenticated. The app-level handler turns that into a
    redirect to the login page for browser requests.
    """
    auth_provider = get_auth_provider()
    if not await auth_provider.is_authenticated(db, request):
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Not authenticated"
        )


async def is_logged_in(
    request: Request,
    db: Session = Depends(get_db)
) -> bool:
    """
    True if the request has a valid session, without failing otherwise.

    Use for pages that work differently for logged in vs logged out visitors.
    """
    auth_provider = get_auth_provider()
    return await auth_provider.is_authenticated(db, request)
