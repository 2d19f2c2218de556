import logging
from urllib.parse import urlparse

from fastapi import FastAPI, Request, status
from fastapi.responses import JSONResponse, PlainTextResponse, RedirectResponse
from fastapi.exceptions import HTTPException
from sqlalchemy.exc import SQLAlchemyError
from starlette.middleware.base import BaseHTTPMiddleware

from app.api import auth, dinners, meals, photos
from app.config import settings

logging.basicConfig(
    level=settings.log_level.upper(),
    format="%(asctime)s %(levelname)s %(name)s: %(message)s",
)
logger = logging.getLogger(__name__)

app = FastAPI(title="Who's for Dinner", version="0.1.0")


# =============================================================================
# CSRF Origin Validation Middleware
# =============================================================================


class CSRFOriginMiddleware(BaseHTTPMiddleware):
    """
    Validate Origin/Referer headers on state-changing requests to prevent CSRF.

    - POST, PUT, PATCH, DELETE must include a matching Origin or Referer header
    - GET, HEAD, OPTIONS are always allowed (safe methods)
    - Health check endpoints are exempt
    """

    SAFE_METHODS = {"GET", "HEAD", "OPTIONS"}
    EXEMPT_PATHS = {"/health"}

    async def dispatch(self, request: Request, call_next):
        if request.method in self.SAFE_METHODS:
            return await call_next(request)

        if request.url.path in self.EXEMPT_PATHS:
            return await call_next(request)

        expected_host = request.headers.get("host", "")

        # Origin first, Referer as fallback
        for header in ("origin", "referer"):
            value = request.headers.get(header)
            if not value:
                continue
            if urlparse(value).netloc != expected_host:
                logger.warning(
                    "CSRF %s mismatch: %s=%s, expected=%s, path=%s",
                    header,
                    header,
                    value,
                    expected_host,
                    request.url.path,
                )
                return JSONResponse(
                    status_code=403,
                    content={"detail": "Origin validation failed"},
                )
            return await call_next(request)

        logger.warning(
            "CSRF missing origin/referer: method=%s, path=%s",
            request.method,
            request.url.path,
        )
        return JSONResponse(
            status_code=403,
            content={"detail": "Origin validation failed"},
        )


# =============================================================================
# Locale gate
# =============================================================================


def accepts_british_english(accept_language: str) -> bool:
    """True if Accept-Language lists en-GB (or an en-GB subtag) at any quality."""
    languages = [
        part.split(";")[0].strip().lower() for part in accept_language.split(",")
    ]
    return any(lang == "en-gb" or lang.startswith("en-gb-") for lang in languages)


class EnglishLocaleMiddleware(BaseHTTPMiddleware):
    """Refuse to serve anything to browsers that don't ask for en-GB."""

    async def dispatch(self, request: Request, call_next):
        if not accepts_british_english(request.headers.get("accept-language", "")):
            return PlainTextResponse("Not accepted", status_code=406)
        return await call_next(request)


app.add_middleware(CSRFOriginMiddleware)
if settings.require_english_locale:
    app.add_middleware(EnglishLocaleMiddleware)


@app.exception_handler(HTTPException)
async def auth_exception_handler(request: Request, exc: HTTPException):
    """
    Redirect to login page for 401 errors on non-API requests.
    API requests (expecting JSON) still get the JSON error response.
    """
    if exc.status_code == status.HTTP_401_UNAUTHORIZED:
        accept = request.headers.get("accept", "")
        is_html_request = "text/html" in accept
        is_htmx = request.headers.get("hx-request") == "true"

        if is_html_request and not is_htmx:
            return RedirectResponse(url="/login", status_code=status.HTTP_303_SEE_OTHER)

    return JSONResponse(status_code=exc.status_code, content={"detail": exc.detail})


@app.exception_handler(SQLAlchemyError)
async def store_exception_handler(request: Request, exc: SQLAlchemyError):
    """Store failures are not retried; log them and answer with a generic error."""
    logger.exception("Database error on %s %s", request.method, request.url.path)
    return JSONResponse(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        content={"error": "Something went wrong"},
    )


# Include routers
app.include_router(auth.router)
app.include_router(dinners.router)
app.include_router(meals.router)
app.include_router(photos.router)


@app.get("/health")
async def health_check():
    return {"status": "healthy"}
