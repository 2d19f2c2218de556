import enum

from sqlalchemy import Column, Enum, ForeignKey, Integer
from sqlalchemy.orm import relationship

from app.database import Base


class Member(str, enum.Enum):
    """The household. Closed set, no other member can attend."""

    MUM = "Mum"
    DAD = "Dad"
    JADE = "Jade"
    LEWIS = "Lewis"


MEMBERS = [Member.MUM, Member.DAD, Member.JADE, Member.LEWIS]
PARENTS = [Member.MUM, Member.DAD]


class Attendance(Base):
    """A household member attending a dinner. Presence of the row is the whole fact."""

    __tablename__ = "attendance"

    dinner_id = Column(
        Integer, ForeignKey("dinners.id", ondelete="CASCADE"), primary_key=True
    )
    member = Column(
        Enum(
            Member,
            name="attendance_member",
            values_callable=lambda members: [m.value for m in members],
        ),
        primary_key=True,
    )

    dinner = relationship("Dinner", back_populates="attendance")

    def __repr__(self):
        return f"<Attendance dinner={self.dinner_id} member={self.member}>"
