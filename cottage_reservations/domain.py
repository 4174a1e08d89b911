"""
Plain records the reservation core works with.

These are decoupled from the SQLAlchemy models so the availability engine and
lifecycle manager can run against any store (SQL or in-memory).
"""

from __future__ import annotations

import enum
from dataclasses import dataclass, field
from datetime import date, datetime
from typing import Optional

from cottage_reservations.utils.dates import night_count


class ReservationStatus(str, enum.Enum):
    PENDING = "PENDING"
    CONFIRMED = "CONFIRMED"
    CANCELLED = "CANCELLED"
    COMPLETED = "COMPLETED"

    @property
    def is_active(self) -> bool:
        """Active statuses block the room for overlap purposes."""
        return self in ACTIVE_STATUSES

    @property
    def is_terminal(self) -> bool:
        return self in TERMINAL_STATUSES


ACTIVE_STATUSES = frozenset({ReservationStatus.PENDING, ReservationStatus.CONFIRMED})
TERMINAL_STATUSES = frozenset({ReservationStatus.CANCELLED, ReservationStatus.COMPLETED})


class RoomType(str, enum.Enum):
    BEDROOM_1 = "BEDROOM_1"
    BEDROOM_2 = "BEDROOM_2"
    BEDROOM_3 = "BEDROOM_3"
    ENTIRE_COTTAGE = "ENTIRE_COTTAGE"


@dataclass(frozen=True)
class Room:
    """A bookable room. Owned by operators, read-only for the core."""

    id: int
    name: str
    max_occupancy: int
    description: Optional[str] = None
    room_type: Optional[RoomType] = None
    is_available: bool = True


@dataclass(frozen=True)
class Reservation:
    """
    A guest booking for one room over a half-open date range.

    Records are immutable; edits produce a new record via dataclasses.replace
    so a failed validation never leaves a half-updated object behind.
    """

    room_id: int
    user_id: str
    check_in_date: date
    check_out_date: date
    number_of_guests: int
    status: ReservationStatus = ReservationStatus.PENDING
    notes: Optional[str] = None
    id: Optional[int] = None
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = field(default=None, compare=False)

    @property
    def is_active(self) -> bool:
        return self.status.is_active

    @property
    def nights(self) -> int:
        return night_count(self.check_in_date, self.check_out_date)
