"""Monday-start week arithmetic for the dinner planner."""

import re
from datetime import date, timedelta
from typing import List, Optional

from app.services.errors import ValidationError

DAYS_IN_WEEK = 7
ISO_DATE_RE = re.compile(r"^\d{4}-\d{2}-\d{2}$")

# English names regardless of the process locale
DAY_ABBREVIATIONS = ("Mon", "Tue", "Wed", "Thu", "Fri", "Sat", "Sun")
MONTH_ABBREVIATIONS = (
    "Jan", "Feb", "Mar", "Apr", "May", "Jun",
    "Jul", "Aug", "Sep", "Oct", "Nov", "Dec",
)


def week_start(reference: date) -> date:
    """Return the Monday on or before ``reference``."""
    # date.weekday() is already Monday=0 .. Sunday=6
    return reference - timedelta(days=reference.weekday())


def dates_for_week(start: date) -> List[date]:
    """The seven consecutive dates beginning at ``start``."""
    return [start + timedelta(days=i) for i in range(DAYS_IN_WEEK)]


def previous_week(start: date) -> date:
    return start - timedelta(days=DAYS_IN_WEEK)


def next_week(start: date) -> date:
    return start + timedelta(days=DAYS_IN_WEEK)


def current_week(today: Optional[date] = None) -> date:
    return week_start(today or date.today())


def parse_iso_date(value: Optional[str]) -> date:
    """
    Parse a strict YYYY-MM-DD string.

    Raises:
        ValidationError: If the value is missing, has the wrong shape or is not a real date
    """
    if not value or not ISO_DATE_RE.match(value):
        raise ValidationError("Invalid date")
    try:
        return date.fromisoformat(value)
    except ValueError:
        raise ValidationError("Invalid date")


def resolve_week(week_param: Optional[str], today: Optional[date] = None) -> date:
    """
    Week shown for a ``?week=`` query value.

    Any date inside a week selects that week; missing or malformed values
    fall back to the current week.
    """
    try:
        return week_start(parse_iso_date(week_param))
    except ValidationError:
        return current_week(today)


def week_label(start: date) -> str:
    """Human label such as ``3 Jun - 9 Jun``."""
    end = start + timedelta(days=DAYS_IN_WEEK - 1)
    return f"{_day_month(start)} - {_day_month(end)}"


def day_label(d: date) -> str:
    """Heading for one dinner, e.g. ``Mon 3 Jun``."""
    return f"{DAY_ABBREVIATIONS[d.weekday()]} {_day_month(d)}"


def _day_month(d: date) -> str:
    return f"{d.day} {MONTH_ABBREVIATIONS[d.month - 1]}"
