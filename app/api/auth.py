"""Authentication routes for PIN login and logout."""

import logging
from typing import Optional

from fastapi import APIRouter, Depends, Form, Request, status
from fastapi.responses import HTMLResponse, RedirectResponse
from fastapi.templating import Jinja2Templates
from sqlalchemy.orm import Session

from app.config import TEMPLATES_DIR, settings
from app.database import get_db
from app.services.auth import get_auth_provider
from app.services.auth.dependencies import is_logged_in

logger = logging.getLogger(__name__)

router = APIRouter(tags=["auth"])
templates = Jinja2Templates(directory=str(TEMPLATES_DIR))


@router.get("/login", response_class=HTMLResponse)
async def login_page(request: Request, logged_in: bool = Depends(is_logged_in)):
    """Login page. Redirects to home if already logged in."""
    if logged_in:
        return RedirectResponse(url="/", status_code=status.HTTP_303_SEE_OTHER)

    return templates.TemplateResponse(
        request,
        "login.html", {"request": request, "error": None}
    )


@router.post("/login")
async def login(
    request: Request,
    pin: Optional[str] = Form(None),
    db: Session = Depends(get_db),
):
    """Check the PIN, start a session and set the cookie."""
    auth_provider = get_auth_provider()

    if not auth_provider.authenticate(pin):
        client = request.client.host if request.client else "unknown"
        logger.warning("Wrong PIN submitted from %s", client)
        return templates.TemplateResponse(
            request,
            "login.html",
            {"request": request, "error": "Wrong PIN"},
            status_code=status.HTTP_401_UNAUTHORIZED,
        )

    issued = await auth_provider.create_session(db)

    response = RedirectResponse(url="/", status_code=status.HTTP_303_SEE_OTHER)
    response.set_cookie(
        key=settings.session_cookie_name,
        value=issued.token,
        max_age=settings.session_max_age,
        expires=issued.expires_at,
        path="/",
        httponly=True,
        samesite="lax",
        secure=settings.session_cookie_secure,
    )
    return response


@router.get("/logout")
async def logout_page():
    """Logging out needs a POST; a plain visit just goes home."""
    return RedirectResponse(url="/", status_code=status.HTTP_303_SEE_OTHER)


@router.post("/logout")
async def logout(request: Request, db: Session = Depends(get_db)):
    """Logout and clear session."""
    auth_provider = get_auth_provider()

    token = auth_provider.get_token_from_request(request)
    if token:
        await auth_provider.revoke_session(db, token)

    # Clear cookie and redirect to login
    response = RedirectResponse(url="/login", status_code=status.HTTP_303_SEE_OTHER)
    response.delete_cookie(
        settings.session_cookie_name,
        path="/",
        httponly=True,
        samesite="lax",
        secure=settings.session_cookie_secure or request.url.scheme == "https",
    )
    return response
