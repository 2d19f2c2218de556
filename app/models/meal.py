from sqlalchemy import Boolean, Column, DateTime, Index, Integer, String, Text
from sqlalchemy.sql import expression, func

from app.database import Base


class Meal(Base):
    """Reusable dish that can be planned for any dinner."""

    __tablename__ = "meals"

    id = Column(Integer, primary_key=True)
    name = Column(String(255), nullable=False)
    description = Column(Text)
    shopping_list = Column(Text)  # One shopping item per line
    photo_key = Column(String(255))  # Key into the photo store, never the bytes
    created_at = Column(DateTime(timezone=True), server_default=func.now())
    deleted = Column(
        Boolean, nullable=False, default=False, server_default=expression.false()
    )  # Archived flag, rows are only removed when no dinner references them

    @property
    def is_archived(self) -> bool:
        return bool(self.deleted)

    @property
    def shopping_items(self) -> list:
        """Shopping list split into one item per non-blank line."""
        if not self.shopping_list:
            return []
        return [line.strip() for line in self.shopping_list.splitlines() if line.strip()]

    __table_args__ = (Index("idx_meals_deleted_name", "deleted", "name"),)

    def __repr__(self):
        return f"<Meal id={self.id} name={self.name!r} deleted={self.deleted}>"
