from sqlalchemy import (
    CheckConstraint,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Text,
)
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from app.database import Base

MIN_EXTRA_GUESTS = 0
MAX_EXTRA_GUESTS = 99


class Dinner(Base):
    """The evening meal for one calendar date. At most one row per date."""

    __tablename__ = "dinners"

    id = Column(Integer, primary_key=True)
    date = Column(Date, unique=True, nullable=False)
    meal_id = Column(Integer, ForeignKey("meals.id"), nullable=True)  # None = no plan
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    notes = Column(Text)
    extra_guests = Column(Integer, nullable=False, default=0, server_default="0")

    # Relationships
    meal = relationship("Meal")
    attendance = relationship(
        "Attendance", back_populates="dinner", cascade="all, delete-orphan"
    )

    __table_args__ = (
        CheckConstraint(
            f"extra_guests BETWEEN {MIN_EXTRA_GUESTS} AND {MAX_EXTRA_GUESTS}",
            name="ck_dinners_extra_guests_range",
        ),
        Index("idx_dinners_meal_id", "meal_id"),
    )

    def __repr__(self):
        return f"<Dinner id={self.id} date={self.date} meal_id={self.meal_id}>"
