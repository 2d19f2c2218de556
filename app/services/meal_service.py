"""Business logic for the reusable meal list."""

import logging
import uuid
from pathlib import PurePath
from typing import List, Optional

from sqlalchemy.orm import Session

from app.models.dinner import Dinner
from app.models.meal import Meal
from app.services.errors import NotFoundError, ValidationError

logger = logging.getLogger(__name__)

DEFAULT_PHOTO_EXTENSION = "webp"


def _clean_optional(value: Optional[str]) -> Optional[str]:
    """Trim free text, turning blank input into None."""
    if value is None:
        return None
    return value.strip() or None


def _clean_name(name: Optional[str]) -> str:
    cleaned = (name or "").strip()
    if not cleaned:
        raise ValidationError("Name is required")
    return cleaned


class MealService:
    """Service for meal-related operations."""

    @staticmethod
    def list_meals(db: Session) -> List[Meal]:
        """All meals, active before archived, each group alphabetical."""
        return db.query(Meal).order_by(Meal.deleted.asc(), Meal.name.asc()).all()

    @staticmethod
    def get_meal(db: Session, meal_id: int) -> Optional[Meal]:
        return db.query(Meal).filter(Meal.id == meal_id).first()

    @staticmethod
    def get_meal_or_404(db: Session, meal_id: int) -> Meal:
        meal = MealService.get_meal(db, meal_id)
        if not meal:
            raise NotFoundError("Meal not found")
        return meal

    @staticmethod
    def is_referenced(db: Session, meal_id: int) -> bool:
        """True if any dinner, past or future, has this meal planned."""
        return (
            db.query(Dinner.id).filter(Dinner.meal_id == meal_id).limit(1).first()
            is not None
        )

    @staticmethod
    def create_meal(
        db: Session,
        name: str,
        photo_key: Optional[str] = None,
        description: Optional[str] = None,
        shopping_list: Optional[str] = None,
    ) -> Meal:
        """
        Create a new, non-archived meal.

        Args:
            db: Database session
            name: Meal name, required after trimming
            photo_key: Key of an already stored photo
            description: Optional free text
            shopping_list: Optional newline separated shopping items

        Returns:
            Created Meal object

        Raises:
            ValidationError: If the name is blank
        """
        meal = Meal(
            name=_clean_name(name),
            photo_key=photo_key,
            description=_clean_optional(description),
            shopping_list=_clean_optional(shopping_list),
            deleted=False,
        )
        db.add(meal)
        db.commit()
        db.refresh(meal)
        return meal

    @staticmethod
    def update_meal(
        db: Session,
        meal_id: int,
        name: str,
        photo_key: Optional[str],
        description: Optional[str],
        shopping_list: Optional[str],
    ) -> Meal:
        """Replace every editable field of a meal. The archived flag is left alone."""
        cleaned_name = _clean_name(name)
        meal = MealService.get_meal_or_404(db, meal_id)

        meal.name = cleaned_name
        meal.photo_key = photo_key
        meal.description = _clean_optional(description)
        meal.shopping_list = _clean_optional(shopping_list)
        db.commit()
        db.refresh(meal)
        return meal

    @staticmethod
    def set_photo_key(db: Session, meal_id: int, photo_key: Optional[str]) -> Meal:
        meal = MealService.get_meal_or_404(db, meal_id)
        meal.photo_key = photo_key
        db.commit()
        return meal

    @staticmethod
    def archive_meal(db: Session, meal_id: int) -> Meal:
        meal = MealService.get_meal_or_404(db, meal_id)
        meal.deleted = True
        db.commit()
        return meal

    @staticmethod
    def restore_meal(db: Session, meal_id: int) -> Meal:
        meal = MealService.get_meal_or_404(db, meal_id)
        meal.deleted = False
        db.commit()
        return meal

    @staticmethod
    def delete_meal(db: Session, meal_id: int) -> None:
        """
        Permanently remove a meal.

        Raises:
            NotFoundError: If the meal does not exist
            ValidationError: If a dinner still references the meal
        """
        meal = MealService.get_meal_or_404(db, meal_id)
        if MealService.is_referenced(db, meal_id):
            raise ValidationError("Meal is planned for a dinner and can only be archived")
        db.delete(meal)
        db.commit()

    @staticmethod
    def remove_meal(db: Session, meal_id: int) -> bool:
        """
        Archive a meal that dinners still point at, delete it otherwise.

        The reference check and the delete are separate statements, so a
        dinner planned in between can still race with the delete.

        Returns:
            True if the row was deleted, False if it was archived
        """
        if MealService.is_referenced(db, meal_id):
            MealService.archive_meal(db, meal_id)
            logger.info("Archived meal %s, still referenced by dinners", meal_id)
            return False

        MealService.delete_meal(db, meal_id)
        logger.info("Deleted unreferenced meal %s", meal_id)
        return True

    @staticmethod
    def build_photo_key(meal_id: int, filename: Optional[str]) -> str:
        """Photo store key: ``meal-{id}-{uuid}.{ext}`` with ext taken from the upload name."""
        suffix = PurePath(filename or "").suffix.lstrip(".").lower()
        extension = suffix if suffix.isalnum() else DEFAULT_PHOTO_EXTENSION
        return f"meal-{meal_id}-{uuid.uuid4()}.{extension}"


# Singleton instance
meal_service = MealService()
