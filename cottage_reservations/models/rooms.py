from sqlalchemy import Boolean, CheckConstraint, Column, DateTime, Integer, String
from sqlalchemy.sql import func

from cottage_reservations.models.base import Base


class Room(Base):
    """
    ORM model for bookable rooms.

    Rooms are managed by operators (seeded on first start). ``is_available`` is
    an operator switch independent of bookings: a disabled room rejects every
    new reservation regardless of its calendar.
    """

    __tablename__ = "rooms"
    __table_args__ = (
        CheckConstraint("max_occupancy BETWEEN 1 AND 50", name="ck_rooms_max_occupancy"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    name = Column(String(100), nullable=False, unique=True)
    description = Column(String(1000), nullable=True)
    max_occupancy = Column(Integer, nullable=False)
    room_type = Column(String(32), nullable=True)
    is_available = Column(Boolean, nullable=False, default=True)
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )
