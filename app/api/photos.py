"""Authenticated access to stored meal photos."""

from fastapi import APIRouter, Depends
from fastapi.responses import PlainTextResponse, Response

from app.services.auth.dependencies import is_logged_in
from app.services.file_service import file_service, is_safe_key

router = APIRouter(prefix="/api", tags=["photos"])


@router.get("/meal-photo/{key}")
async def meal_photo(key: str, logged_in: bool = Depends(is_logged_in)):
    """Serve a meal photo by its key to logged in browsers."""
    if not is_safe_key(key):
        return PlainTextResponse("Invalid key", status_code=400)
    if not logged_in:
        return PlainTextResponse("Unauthorized", status_code=401)

    photo = file_service.get(key)
    if not photo:
        return PlainTextResponse("Not found", status_code=404)

    return Response(
        content=photo.body,
        media_type=photo.content_type,
        headers={"Cache-Control": "private, max-age=86400"},
    )
