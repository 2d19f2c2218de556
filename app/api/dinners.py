"""Week view of upcoming dinners and its form actions."""

from datetime import date as calendar_date
from typing import Optional

from fastapi import APIRouter, Depends, Form, Query, Request
from fastapi.responses import HTMLResponse
from fastapi.templating import Jinja2Templates
from sqlalchemy.orm import Session

from app.api import actions
from app.config import TEMPLATES_DIR
from app.database import get_db
from app.models.attendance import MEMBERS
from app.services.attendance_messages import pick_attendance_message
from app.services.attendance_service import attendance_service, parse_member
from app.services.auth.dependencies import require_session
from app.services.dinner_service import dinner_service
from app.services.errors import DinnerPlannerError
from app.services.meal_service import meal_service
from app.services.week_service import (
    current_week,
    dates_for_week,
    day_label,
    next_week,
    parse_iso_date,
    previous_week,
    resolve_week,
    week_label,
)

router = APIRouter(tags=["dinners"], dependencies=[Depends(require_session)])
templates = Jinja2Templates(directory=str(TEMPLATES_DIR))
templates.env.filters["day_label"] = day_label


def _week_url(week: Optional[str]) -> str:
    return f"/?week={resolve_week(week).isoformat()}"


def _parse_meal_id(value: Optional[str]) -> Optional[int]:
    if value is None or value.strip() in ("", "none"):
        return None
    return actions.parse_int(value, "Invalid meal")


@router.get("/", response_class=HTMLResponse)
async def upcoming_dinners(
    request: Request,
    week: Optional[str] = Query(None),
    error: Optional[str] = Query(None),
    db: Session = Depends(get_db),
):
    """Dinners for one Monday-start week, created on first view."""
    start = resolve_week(week)
    dates = dates_for_week(start)

    for dinner_date in dates:
        dinner_service.ensure_dinner(db, dinner_date)
    dinners = dinner_service.list_with_details(db, dates)
    meals = meal_service.list_meals(db)

    return templates.TemplateResponse(
        request,
        "dinners.html",
        {
            "request": request,
            "week_start": start,
            "week_label": week_label(start),
            "previous_week": previous_week(start),
            "next_week": next_week(start),
            "this_week": current_week(),
            "today": calendar_date.today(),
            "dinners": dinners,
            "meals": meals,
            "members": MEMBERS,
            "error": error,
        },
    )


@router.post("/")
async def dinner_action(
    request: Request,
    intent: Optional[str] = Form(None),
    week: Optional[str] = Form(None),
    date: Optional[str] = Form(None),
    meal_id: Optional[str] = Form(None),
    dinner_id: Optional[str] = Form(None),
    member: Optional[str] = Form(None),
    attending: Optional[str] = Form(None),
    notes: Optional[str] = Form(None),
    extra_guests: Optional[str] = Form(None),
    db: Session = Depends(get_db),
):
    """
    Form actions for the week view, dispatched on ``intent``.

    Returns: {"ok": true, ...} or {"error": message}
    """
    redirect_url = _week_url(week or date)

    try:
        if intent == "setMeal":
            dinner_date = parse_iso_date(date)
            dinner_service.set_meal(db, dinner_date, _parse_meal_id(meal_id))
            return actions.ok(request, redirect_url)

        if intent == "toggleAttendance":
            dinner_pk = actions.parse_int(dinner_id, "Invalid input")
            household_member = parse_member(member)
            is_attending = attending == "1"
            attendance_service.set_attendance(
                db, dinner_pk, household_member, is_attending
            )
            return actions.ok(
                request,
                redirect_url,
                member=household_member.value,
                attending=is_attending,
                message=pick_attendance_message(household_member, is_attending),
            )

        if intent == "setNotes":
            dinner_pk = actions.parse_int(dinner_id, "Invalid input")
            dinner = dinner_service.set_notes(db, dinner_pk, notes)
            return actions.ok(request, redirect_url, notes=dinner.notes)

        if intent == "setExtraGuests":
            dinner_pk = actions.parse_int(dinner_id, "Invalid input")
            count = actions.parse_int(extra_guests, "Invalid number of guests")
            dinner = dinner_service.set_extra_guests(db, dinner_pk, count)
            return actions.ok(request, redirect_url, extra_guests=dinner.extra_guests)

    except DinnerPlannerError as e:
        return actions.error(request, e, redirect_url)

    return actions.unknown_action(request, redirect_url)
