"""Meal list page and its add/edit/delete/restore actions."""

from typing import Optional

from fastapi import APIRouter, Depends, File, Form, Query, Request, UploadFile
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates
from sqlalchemy.exc import SQLAlchemyError
from sqlalchemy.orm import Session

from app.api import actions
from app.config import TEMPLATES_DIR
from app.database import get_db
from app.services.auth.dependencies import require_session
from app.services.errors import DinnerPlannerError, ValidationError
from app.services.file_service import file_service, has_upload
from app.services.meal_service import meal_service

router = APIRouter(prefix="/meals", tags=["meals"], dependencies=[Depends(require_session)])
templates = Jinja2Templates(directory=str(TEMPLATES_DIR))

MEALS_URL = "/meals"


async def _store_photo(photo: UploadFile, meal_id: int) -> str:
    """Save an uploaded photo and return its new key."""
    key = meal_service.build_photo_key(meal_id, photo.filename)
    try:
        return await file_service.save_meal_photo(photo, key)
    except ValueError as e:
        raise ValidationError(str(e))


def _check_photo_type(photo: Optional[UploadFile]) -> None:
    if has_upload(photo):
        try:
            file_service.validate_content_type(photo.content_type)
        except ValueError as e:
            raise ValidationError(str(e))


@router.get("", response_class=HTMLResponse)
async def meals_page(
    request: Request,
    error: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    """Meal list, active meals first, archived after."""
    meals = meal_service.list_meals(db)

    return templates.TemplateResponse(
        request,
        "meals.html", {"request": request, "meals": meals, "error": error}
    )


@router.post("")
async def meal_action(
    request: Request,
    intent: Optional[str] = Form(None),
    id: Optional[str] = Form(None),
    name: Optional[str] = Form(None),
    description: Optional[str] = Form(None),
    shopping_list: Optional[str] = Form(None),
    photo: Optional[UploadFile] = File(None),
    db: Session = Depends(get_db),
):
    """
    Form actions for the meal list, dispatched on ``intent``.

    Returns: {"ok": true, ...} or {"error": message}
    """
    try:
        if intent == "add":
            _check_photo_type(photo)
            meal = meal_service.create_meal(
                db, name, description=description, shopping_list=shopping_list
            )
            if has_upload(photo):
                key = await _store_photo(photo, meal.id)
                try:
                    meal_service.set_photo_key(db, meal.id, key)
                except SQLAlchemyError:
                    file_service.delete(key)
                    raise
            return actions.ok(request, MEALS_URL, id=meal.id)

        if intent == "edit":
            meal_id = actions.parse_int(id, "Invalid id")
            existing = meal_service.get_meal_or_404(db, meal_id)
            _check_photo_type(photo)
            if not (name or "").strip():
                raise ValidationError("Name is required")

            old_photo_key = existing.photo_key
            photo_key = old_photo_key
            if has_upload(photo):
                photo_key = await _store_photo(photo, meal_id)

            try:
                meal_service.update_meal(
                    db, meal_id, name, photo_key, description, shopping_list
                )
            except SQLAlchemyError:
                if photo_key != old_photo_key:
                    file_service.delete(photo_key)
                raise
            if old_photo_key and old_photo_key != photo_key:
                file_service.delete(old_photo_key)
            return actions.ok(request, MEALS_URL, id=meal_id)

        if intent == "delete":
            meal_id = actions.parse_int(id, "Invalid id")
            photo_key = meal_service.get_meal_or_404(db, meal_id).photo_key
            deleted = meal_service.remove_meal(db, meal_id)
            if deleted and photo_key:
                file_service.delete(photo_key)
            return actions.ok(request, MEALS_URL, archived=not deleted)

        if intent == "restore":
            meal_id = actions.parse_int(id, "Invalid id")
            meal_service.restore_meal(db, meal_id)
            return actions.ok(request, MEALS_URL)

    except DinnerPlannerError as e:
        return actions.error(request, e, MEALS_URL)

    return actions.unknown_action(request, MEALS_URL)
