"""
Read-side views over reservations.

Each call runs a fresh query and returns a finite list; nothing is cached
between calls.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date
from typing import Iterable, Mapping, Optional

from cottage_reservations.db.store import ReservationStore
from cottage_reservations.domain import Reservation, ReservationStatus, Room
from cottage_reservations.exceptions import NotFoundError, ValidationError
from cottage_reservations.services.availability import available_rooms
from cottage_reservations.utils.dates import DateRange


def _by_check_in(reservations: Iterable[Reservation]) -> list[Reservation]:
    return sorted(reservations, key=lambda r: (r.check_in_date, r.id or 0))


def list_for_user(store: ReservationStore, user_id: str) -> list[Reservation]:
    """All reservations owned by ``user_id``, any status, check-in ascending."""
    with store.transaction() as session:
        return _by_check_in(session.find_by_user(user_id))


def list_all_active(store: ReservationStore) -> list[Reservation]:
    """
    Every non-cancelled reservation across all users (PENDING, CONFIRMED, COMPLETED).

    Backs the "view all bookings" transparency page.
    """
    with store.transaction() as session:
        return _by_check_in(session.find_non_cancelled())


def list_between(store: ReservationStore, start: date, end: date) -> list[Reservation]:
    """
    Reservations whose whole stay falls inside [start, end] (calendar view).

    Raises:
        ValidationError: If end is before start
    """
    if end < start:
        raise ValidationError("end_date must not be before start_date")
    with store.transaction() as session:
        return _by_check_in(session.find_between(start, end))


def list_rooms(store: ReservationStore) -> list[Room]:
    with store.transaction() as session:
        return session.list_rooms()


def get_room(store: ReservationStore, room_id: int) -> Room:
    with store.transaction() as session:
        room = session.get_room(room_id)
    if room is None:
        raise NotFoundError(f"Room {room_id} not found")
    return room


def list_available_rooms(
    store: ReservationStore, stay: Optional[DateRange], today: date
) -> list[Room]:
    """
    Rooms that can be booked for ``stay``.

    Without a stay, returns every room whose operator flag is on.
    """
    with store.transaction() as session:
        rooms = session.list_rooms()
        if stay is None:
            return [room for room in rooms if room.is_available]
        active = session.find_non_cancelled()
    return available_rooms(rooms, active, stay, today)


def rooms_by_id(rooms: Iterable[Room]) -> dict[int, Room]:
    return {room.id: room for room in rooms}


# ----------------------------------------------------------------------
# Presentation filters (pure, applied on already-fetched lists)
# ----------------------------------------------------------------------


def matches_status(reservation: Reservation, status: Optional[ReservationStatus]) -> bool:
    return status is None or reservation.status == status


def matches_room_name(
    reservation: Reservation, rooms: Mapping[int, Room], room_name: Optional[str]
) -> bool:
    """Case-insensitive substring match on the reservation's room name."""
    if not room_name:
        return True
    room = rooms.get(reservation.room_id)
    return room is not None and room_name.lower() in room.name.lower()


def filter_reservations(
    reservations: Iterable[Reservation],
    rooms: Mapping[int, Room],
    status: Optional[ReservationStatus] = None,
    room_name: Optional[str] = None,
) -> list[Reservation]:
    """
    Apply the status and room-name filters, keeping input order.

    Example:
        >>> filter_reservations(items, rooms, status=ReservationStatus.CONFIRMED, room_name="bed")
    """
    return [
        r
        for r in reservations
        if matches_status(r, status) and matches_room_name(r, rooms, room_name)
    ]


@dataclass(frozen=True)
class ReservationSummary:
    total: int
    confirmed: int
    pending: int
    active_guests: int


def summarize(reservations: Iterable[Reservation]) -> ReservationSummary:
    """Counts shown under the all-bookings table."""
    items = list(reservations)
    return ReservationSummary(
        total=len(items),
        confirmed=sum(1 for r in items if r.status == ReservationStatus.CONFIRMED),
        pending=sum(1 for r in items if r.status == ReservationStatus.PENDING),
        active_guests=sum(r.number_of_guests for r in items if r.is_active),
    )
