"""Helpers shared by the form action endpoints.

Actions answer JSON to scripts and fetch calls, and redirect plain browser
form posts back to the page they came from.
"""

from typing import Optional
from urllib.parse import urlencode

from fastapi import Request, status
from fastapi.responses import JSONResponse, RedirectResponse, Response

from app.services.errors import DinnerPlannerError, NotFoundError, ValidationError


def wants_html(request: Request) -> bool:
    """Plain browser form submissions (not fetch/htmx) expect a page back."""
    accept = request.headers.get("accept", "")
    is_htmx = request.headers.get("hx-request") == "true"
    return "text/html" in accept and not is_htmx


def parse_int(value: Optional[str], message: str) -> int:
    """
    Parse an integer form field.

    Raises:
        ValidationError: With ``message`` if the value is missing or not a number
    """
    try:
        return int(str(value).strip())
    except (TypeError, ValueError):
        raise ValidationError(message)


def ok(request: Request, redirect_url: str, **payload) -> Response:
    if wants_html(request):
        return RedirectResponse(url=redirect_url, status_code=status.HTTP_303_SEE_OTHER)
    return JSONResponse({"ok": True, **payload})


def error(request: Request, exc: DinnerPlannerError, redirect_url: str) -> Response:
    if wants_html(request):
        separator = "&" if "?" in redirect_url else "?"
        return RedirectResponse(
            url=f"{redirect_url}{separator}{urlencode({'error': exc.message})}",
            status_code=status.HTTP_303_SEE_OTHER,
        )
    status_code = (
        status.HTTP_404_NOT_FOUND
        if isinstance(exc, NotFoundError)
        else status.HTTP_400_BAD_REQUEST
    )
    return JSONResponse({"error": exc.message}, status_code=status_code)


def unknown_action(request: Request, redirect_url: str) -> Response:
    return error(request, ValidationError("Unknown action"), redirect_url)
