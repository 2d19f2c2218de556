"""
Database models for Who's for Dinner.

Import all models here so Alembic can detect them for migrations.
"""

from app.database import Base
from app.models.meal import Meal
from app.models.dinner import Dinner
from app.models.attendance import Attendance, Member, MEMBERS, PARENTS
from app.models.session import Session

__all__ = [
    "Base",
    "Meal",
    "Dinner",
    "Attendance",
    "Member",
    "MEMBERS",
    "PARENTS",
    "Session",
]
