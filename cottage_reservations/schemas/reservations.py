from datetime import date, datetime
from typing import Optional

from pydantic import BaseModel, Field

from cottage_reservations.domain import Reservation, ReservationStatus


class ReservationCreatePayload(BaseModel):
    """
    Schema for booking a room. Only shape is checked here; guest count and notes
    are validated by the reservation core so every rule violation maps to 400.
    """

    room_id: int = Field(..., gt=0, description="Room to book")
    check_in_date: date = Field(..., description="Arrival day (inclusive)")
    check_out_date: date = Field(..., description="Departure day (exclusive)")
    number_of_guests: int = Field(..., description="Guests staying, checked against the room")
    notes: Optional[str] = Field(None, description="Free-text notes")


class ReservationUpdatePayload(BaseModel):
    """
    Schema for editing a reservation. All fields are optional; omitted fields keep
    their value. Dates must be given together.
    """

    check_in_date: Optional[date] = Field(None, description="New arrival day")
    check_out_date: Optional[date] = Field(None, description="New departure day")
    number_of_guests: Optional[int] = Field(None, description="New guest count")
    notes: Optional[str] = Field(None, description="New notes (empty string clears them)")


class ReservationResponse(BaseModel):
    id: int
    room_id: int
    user_id: str
    check_in_date: date
    check_out_date: date
    nights: int
    number_of_guests: int
    notes: Optional[str] = None
    status: ReservationStatus
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None

    @classmethod
    def from_record(cls, reservation: Reservation) -> "ReservationResponse":
        return cls(
            id=reservation.id,
            room_id=reservation.room_id,
            user_id=reservation.user_id,
            check_in_date=reservation.check_in_date,
            check_out_date=reservation.check_out_date,
            nights=reservation.nights,
            number_of_guests=reservation.number_of_guests,
            notes=reservation.notes,
            status=reservation.status,
            created_at=reservation.created_at,
            updated_at=reservation.updated_at,
        )


class ReservationSummaryResponse(BaseModel):
    total: int
    confirmed: int
    pending: int
    active_guests: int
