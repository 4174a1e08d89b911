# models/reservations.py

from sqlalchemy import (
    CheckConstraint,
    Column,
    Date,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    String,
)
from sqlalchemy.sql import func

from cottage_reservations.models.base import Base


class Reservation(Base):
    """
    ORM model for guest reservations.

    Each reservation books one room for the half-open range
    [check_in_date, check_out_date). Status is stored as the upper-case name of
    ReservationStatus. Non-overlap of active reservations is enforced by the
    lifecycle manager under a room lock; on PostgreSQL a migration adds an
    exclusion constraint as a second guard.
    """

    __tablename__ = "reservations"
    __table_args__ = (
        CheckConstraint("check_out_date > check_in_date", name="ck_reservations_range"),
        CheckConstraint("number_of_guests >= 1", name="ck_reservations_guests"),
        CheckConstraint(
            "status IN ('PENDING', 'CONFIRMED', 'CANCELLED', 'COMPLETED')",
            name="ck_reservations_status",
        ),
        Index("ix_reservations_room_status", "room_id", "status"),
    )

    id = Column(Integer, primary_key=True, autoincrement=True)
    room_id = Column(Integer, ForeignKey("rooms.id", ondelete="CASCADE"), nullable=False)
    user_id = Column(String(255), nullable=False, index=True)  # Opaque identity-provider id
    check_in_date = Column(Date, nullable=False)
    check_out_date = Column(Date, nullable=False)
    number_of_guests = Column(Integer, nullable=False)
    notes = Column(String(500), nullable=True)
    status = Column(String(16), nullable=False, default="PENDING")
    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True), server_default=func.now(), onupdate=func.now(), nullable=False
    )
