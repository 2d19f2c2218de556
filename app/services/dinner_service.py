"""Business logic for planning dinners by date."""

from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Dict, List, Optional, Sequence

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from app.models.attendance import Attendance, Member, PARENTS
from app.models.dinner import Dinner, MAX_EXTRA_GUESTS, MIN_EXTRA_GUESTS
from app.models.meal import Meal
from app.services.errors import NotFoundError


@dataclass
class DinnerDetails:
    """A dinner joined with its planned meal and who is attending."""

    id: int
    date: date
    meal_id: Optional[int]
    created_at: Optional[datetime]
    notes: Optional[str]
    extra_guests: int
    meal: Optional[Meal] = None
    attendance: List[Member] = field(default_factory=list)

    def is_attending(self, member: Member) -> bool:
        return member in self.attendance

    @property
    def headcount(self) -> int:
        return len(self.attendance) + self.extra_guests


def clamp_extra_guests(value: int) -> int:
    return max(MIN_EXTRA_GUESTS, min(MAX_EXTRA_GUESTS, value))


class DinnerService:
    """Service for dinner-related operations."""

    @staticmethod
    def get_dinner(db: Session, dinner_id: int) -> Optional[Dinner]:
        return db.query(Dinner).filter(Dinner.id == dinner_id).first()

    @staticmethod
    def get_dinner_or_404(db: Session, dinner_id: int) -> Dinner:
        dinner = DinnerService.get_dinner(db, dinner_id)
        if not dinner:
            raise NotFoundError("Dinner not found")
        return dinner

    @staticmethod
    def ensure_dinner(db: Session, dinner_date: date) -> Dinner:
        """
        Get the dinner for a date, creating it if needed.

        A newly created dinner starts with the parents attending. The dinner
        row and its default attendance are committed together, and an
        existing dinner is returned untouched, so calling this repeatedly
        never duplicates dinners or re-seeds attendance.

        Args:
            db: Database session
            dinner_date: Calendar date of the dinner

        Returns:
            The existing or newly created Dinner
        """
        dinner = db.query(Dinner).filter(Dinner.date == dinner_date).first()
        if dinner:
            return dinner

        try:
            dinner = Dinner(date=dinner_date, extra_guests=0)
            db.add(dinner)
            db.flush()
            for member in PARENTS:
                db.add(Attendance(dinner_id=dinner.id, member=member))
            db.commit()
        except IntegrityError:
            # Race condition: another request created it, rollback and fetch
            db.rollback()
            dinner = db.query(Dinner).filter(Dinner.date == dinner_date).one()
        return dinner

    @staticmethod
    def set_meal(db: Session, dinner_date: date, meal_id: Optional[int]) -> Dinner:
        """Plan a meal for a date. ``None`` clears the plan."""
        if meal_id is not None:
            exists = db.query(Meal.id).filter(Meal.id == meal_id).first()
            if not exists:
                raise NotFoundError("Meal not found")

        dinner = DinnerService.ensure_dinner(db, dinner_date)
        dinner.meal_id = meal_id
        db.commit()
        return dinner

    @staticmethod
    def set_notes(db: Session, dinner_id: int, notes: Optional[str]) -> Dinner:
        """Store trimmed notes; blank notes are stored as NULL."""
        dinner = DinnerService.get_dinner_or_404(db, dinner_id)
        dinner.notes = (notes or "").strip() or None
        db.commit()
        return dinner

    @staticmethod
    def set_extra_guests(db: Session, dinner_id: int, extra_guests: int) -> Dinner:
        """Store the number of guests on top of the household, clamped to 0-99."""
        dinner = DinnerService.get_dinner_or_404(db, dinner_id)
        dinner.extra_guests = clamp_extra_guests(extra_guests)
        db.commit()
        return dinner

    @staticmethod
    def list_with_details(
        db: Session, dates: Sequence[date]
    ) -> List[DinnerDetails]:
        """
        Dinners for the given dates with their meal and attendance.

        Two queries: dinners left-joined to meals, then all attendance rows
        for those dinners grouped in Python. Joining attendance directly
        would repeat each dinner once per attendee.
        """
        if not dates:
            return []

        rows = (
            db.query(Dinner, Meal)
            .outerjoin(Meal, Dinner.meal_id == Meal.id)
            .filter(Dinner.date.in_(list(dates)))
            .order_by(Dinner.date.asc())
            .all()
        )
        if not rows:
            return []

        dinner_ids = [dinner.id for dinner, _ in rows]
        attendance_by_dinner: Dict[int, List[Member]] = {}
        for attendance in (
            db.query(Attendance).filter(Attendance.dinner_id.in_(dinner_ids)).all()
        ):
            attendance_by_dinner.setdefault(attendance.dinner_id, []).append(
                Member(attendance.member)
            )

        return [
            DinnerDetails(
                id=dinner.id,
                date=dinner.date,
                meal_id=dinner.meal_id,
                created_at=dinner.created_at,
                notes=dinner.notes,
                extra_guests=dinner.extra_guests or 0,
                meal=meal,
                attendance=attendance_by_dinner.get(dinner.id, []),
            )
            for dinner, meal in rows
        ]


# Singleton instance
dinner_service = DinnerService()
