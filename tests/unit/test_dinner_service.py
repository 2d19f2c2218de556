"""
Unit tests for DinnerService.

Tests dinner planning including:
- Get-or-create by date with default attendance
- Planning and clearing meals
- Notes and extra guest normalization
- Listing a week with meals and attendance
"""
from datetime import date

import pytest
from sqlalchemy.orm import Session

from app.models import Attendance, Dinner, Member
from app.services.dinner_service import DinnerService, clamp_extra_guests
from app.services.errors import NotFoundError
from app.services.meal_service import MealService
from tests.factories import create_dinner, create_meal

DAY = date(2024, 6, 3)


def _attendees(db: Session, dinner_id: int):
    return sorted(
        a.member.value
        for a in db.query(Attendance).filter(Attendance.dinner_id == dinner_id)
    )


class TestEnsureDinner:
    """Tests for get-or-create."""

    def test_creates_dinner_with_parents_attending(self, db: Session):
        dinner = DinnerService.ensure_dinner(db, DAY)

        assert dinner.id is not None
        assert dinner.date == DAY
        assert dinner.meal_id is None
        assert dinner.extra_guests == 0
        assert _attendees(db, dinner.id) == ["Dad", "Mum"]

    def test_second_call_returns_same_dinner(self, db: Session):
        first = DinnerService.ensure_dinner(db, DAY)
        second = DinnerService.ensure_dinner(db, DAY)

        assert first.id == second.id
        assert db.query(Dinner).filter(Dinner.date == DAY).count() == 1
        assert _attendees(db, first.id) == ["Dad", "Mum"]

    def test_existing_dinner_is_not_reseeded(self, db: Session):
        """Parents who opted out stay out when the week is viewed again."""
        dinner = DinnerService.ensure_dinner(db, DAY)
        db.query(Attendance).filter(Attendance.dinner_id == dinner.id).delete()
        db.commit()

        DinnerService.ensure_dinner(db, DAY)

        assert _attendees(db, dinner.id) == []

    def test_different_dates_get_different_dinners(self, db: Session):
        a = DinnerService.ensure_dinner(db, DAY)
        b = DinnerService.ensure_dinner(db, date(2024, 6, 4))

        assert a.id != b.id


class TestSetMeal:
    """Tests for planning a meal."""

    def test_set_meal_creates_dinner(self, db: Session):
        meal = create_meal(db, name="Tacos")

        dinner = DinnerService.set_meal(db, DAY, meal.id)

        assert dinner.meal_id == meal.id
        assert _attendees(db, dinner.id) == ["Dad", "Mum"]

    def test_set_meal_none_clears_plan(self, db: Session):
        meal = create_meal(db)
        DinnerService.set_meal(db, DAY, meal.id)

        dinner = DinnerService.set_meal(db, DAY, None)

        assert dinner.meal_id is None

    def test_set_meal_updates_existing_dinner(self, db: Session):
        first = create_meal(db)
        second = create_meal(db)
        DinnerService.set_meal(db, DAY, first.id)

        DinnerService.set_meal(db, DAY, second.id)

        assert db.query(Dinner).count() == 1
        assert db.query(Dinner).one().meal_id == second.id

    def test_set_unknown_meal(self, db: Session):
        with pytest.raises(NotFoundError):
            DinnerService.set_meal(db, DAY, 99999)

    def test_planned_meal_cannot_be_hard_deleted(self, db: Session):
        meal = create_meal(db)
        DinnerService.set_meal(db, DAY, meal.id)

        assert MealService.remove_meal(db, meal.id) is False


class TestNotesAndGuests:
    """Tests for notes and extra guests."""

    def test_notes_are_trimmed(self, db: Session):
        dinner = create_dinner(db, DAY)

        DinnerService.set_notes(db, dinner.id, "  Bring dessert  ")

        db.refresh(dinner)
        assert dinner.notes == "Bring dessert"

    @pytest.mark.parametrize("notes", ["   ", "", None])
    def test_blank_notes_stored_as_null(self, db: Session, notes):
        dinner = create_dinner(db, DAY, notes="old")

        DinnerService.set_notes(db, dinner.id, notes)

        db.refresh(dinner)
        assert dinner.notes is None

    @pytest.mark.parametrize(
        "value,expected", [(150, 99), (-5, 0), (0, 0), (99, 99), (3, 3)]
    )
    def test_extra_guests_clamped(self, db: Session, value, expected):
        dinner = create_dinner(db, DAY)

        DinnerService.set_extra_guests(db, dinner.id, value)

        db.refresh(dinner)
        assert dinner.extra_guests == expected

    def test_clamp_helper(self):
        assert clamp_extra_guests(100) == 99
        assert clamp_extra_guests(-1) == 0

    def test_unknown_dinner(self, db: Session):
        with pytest.raises(NotFoundError):
            DinnerService.set_notes(db, 99999, "hi")
        with pytest.raises(NotFoundError):
            DinnerService.set_extra_guests(db, 99999, 2)


class TestListWithDetails:
    """Tests for the week listing."""

    def test_empty_dates_returns_empty_list(self, db: Session):
        assert DinnerService.list_with_details(db, []) == []

    def test_dates_without_dinners(self, db: Session):
        assert DinnerService.list_with_details(db, [DAY]) == []

    def test_planned_meal_and_default_attendance(self, db: Session):
        tacos = MealService.create_meal(db, "Tacos")
        DinnerService.set_meal(db, DAY, tacos.id)

        dinners = DinnerService.list_with_details(db, [DAY])

        assert len(dinners) == 1
        assert dinners[0].meal.name == "Tacos"
        assert set(dinners[0].attendance) == {Member.MUM, Member.DAD}

    def test_dinner_without_meal(self, db: Session):
        DinnerService.ensure_dinner(db, DAY)

        dinner = DinnerService.list_with_details(db, [DAY])[0]

        assert dinner.meal is None
        assert dinner.meal_id is None

    def test_ordered_by_date_and_filtered(self, db: Session):
        later = date(2024, 6, 5)
        outside = date(2024, 7, 1)
        for d in (later, outside, DAY):
            DinnerService.ensure_dinner(db, d)

        dinners = DinnerService.list_with_details(db, [later, DAY])

        assert [d.date for d in dinners] == [DAY, later]

    def test_attendance_not_duplicated_per_dinner(self, db: Session):
        meal = create_meal(db)
        create_dinner(
            db,
            DAY,
            meal=meal,
            attending=[Member.MUM, Member.DAD, Member.JADE, Member.LEWIS],
        )

        dinners = DinnerService.list_with_details(db, [DAY])

        assert len(dinners) == 1
        assert len(dinners[0].attendance) == 4
        assert dinners[0].headcount == 4

    def test_headcount_includes_extra_guests(self, db: Session):
        create_dinner(db, DAY, attending=[Member.MUM], extra_guests=2)

        dinner = DinnerService.list_with_details(db, [DAY])[0]

        assert dinner.headcount == 3
        assert dinner.is_attending(Member.MUM)
        assert not dinner.is_attending(Member.LEWIS)

    def test_archived_meal_still_shown(self, db: Session):
        meal = create_meal(db, name="Old favourite", deleted=True)
        create_dinner(db, DAY, meal=meal)

        dinner = DinnerService.list_with_details(db, [DAY])[0]

        assert dinner.meal.name == "Old favourite"
        assert dinner.meal.deleted is True
