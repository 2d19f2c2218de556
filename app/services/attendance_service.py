"""Who is coming to which dinner."""

from typing import Union

from sqlalchemy.orm import Session

from app.models.attendance import Attendance, Member
from app.services.dinner_service import DinnerService
from app.services.errors import ValidationError


def parse_member(value: Union[str, Member, None]) -> Member:
    """
    Map form input onto the household.

    Raises:
        ValidationError: If the value is not one of the household members
    """
    try:
        return Member(value)
    except ValueError:
        raise ValidationError("Invalid member")


class AttendanceService:
    """Service for attendance toggles."""

    @staticmethod
    def set_attendance(
        db: Session, dinner_id: int, member: Member, attending: bool
    ) -> None:
        """
        Mark a member as attending or not.

        Both directions are idempotent: attending twice leaves one row,
        leaving twice is a no-op.
        """
        member = parse_member(member)
        DinnerService.get_dinner_or_404(db, dinner_id)

        existing = (
            db.query(Attendance)
            .filter(Attendance.dinner_id == dinner_id, Attendance.member == member)
            .first()
        )
        if attending and not existing:
            db.add(Attendance(dinner_id=dinner_id, member=member))
        elif not attending and existing:
            db.delete(existing)
        db.commit()


# Singleton instance
attendance_service = AttendanceService()
