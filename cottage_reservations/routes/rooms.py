from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query

from cottage_reservations.db.store import ReservationStore
from cottage_reservations.dependencies import get_clock, get_reservation_store
from cottage_reservations.exceptions import ReservationError
from cottage_reservations.routes._reservation_helpers import (
    optional_stay_or_400,
    to_http_exception,
)
from cottage_reservations.schemas.rooms import RoomResponse
from cottage_reservations.services import queries
from cottage_reservations.utils.dates import Clock, local_today

router = APIRouter()


@router.get("/rooms", response_model=list[RoomResponse])
def list_rooms(store: ReservationStore = Depends(get_reservation_store)) -> list[RoomResponse]:
    """Return the full room inventory."""
    try:
        return [RoomResponse.from_record(room) for room in queries.list_rooms(store)]
    except ReservationError as e:
        raise to_http_exception(e) from e


@router.get("/rooms/available", response_model=list[RoomResponse])
def list_available_rooms(
    start_date: Optional[date] = Query(None, description="Check-in day"),
    end_date: Optional[date] = Query(None, description="Check-out day"),
    store: ReservationStore = Depends(get_reservation_store),
    clock: Clock = Depends(get_clock),
) -> list[RoomResponse]:
    """
    Return rooms that can be booked.

    With both dates, only rooms free for [start_date, end_date) are returned.
    Without dates, every room the operator has enabled.

    Example:
        >>> GET /api/rooms/available?start_date=2024-06-01&end_date=2024-06-05
    """
    stay = optional_stay_or_400(start_date, end_date)
    try:
        rooms = queries.list_available_rooms(store, stay, local_today(clock))
        return [RoomResponse.from_record(room) for room in rooms]
    except ReservationError as e:
        raise to_http_exception(e) from e


@router.get("/rooms/{room_id}", response_model=RoomResponse)
def get_room(
    room_id: int, store: ReservationStore = Depends(get_reservation_store)
) -> RoomResponse:
    try:
        return RoomResponse.from_record(queries.get_room(store, room_id))
    except ReservationError as e:
        raise to_http_exception(e) from e
