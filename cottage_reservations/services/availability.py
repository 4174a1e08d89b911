"""
Availability engine: decides whether a room can take a stay.

Pure functions over already-fetched data. Callers that act on the answer must
hold the room lock between the check and the write (see lifecycle.py).
"""

from __future__ import annotations

from datetime import date
from typing import Iterable, Optional

from cottage_reservations.domain import Reservation, Room
from cottage_reservations.utils.dates import DateRange, is_past_date


def find_conflicts(
    room_id: int,
    candidate: DateRange,
    existing_reservations: Iterable[Reservation],
    excluding_reservation_id: Optional[int] = None,
) -> list[Reservation]:
    """
    Return the active reservations of a room that overlap the candidate stay.

    Args:
        room_id: Room being checked; reservations for other rooms are ignored
        candidate: Requested stay
        existing_reservations: Reservations to scan (any status)
        excluding_reservation_id: Reservation to skip, used when re-validating an edit

    Returns:
        list[Reservation]: Overlapping PENDING/CONFIRMED reservations
    """
    conflicts = []
    for reservation in existing_reservations:
        if reservation.room_id != room_id or not reservation.is_active:
            continue
        if excluding_reservation_id is not None and reservation.id == excluding_reservation_id:
            continue
        if candidate.overlaps(reservation.check_in_date, reservation.check_out_date):
            conflicts.append(reservation)
    return conflicts


def is_available(
    room: Room,
    candidate: DateRange,
    existing_reservations: Iterable[Reservation],
    today: date,
    excluding_reservation_id: Optional[int] = None,
) -> bool:
    """
    True iff the room is enabled, the stay starts today or later and nothing overlaps.

    Args:
        room: Room to book
        candidate: Requested stay (structurally valid by construction)
        existing_reservations: Current reservations for the room
        today: Reference date for the past check-in rule
        excluding_reservation_id: Reservation to ignore (the one being edited)

    Returns:
        bool: Whether the stay can be booked
    """
    if not room.is_available:
        return False
    if is_past_date(candidate.check_in, today):
        return False
    return not find_conflicts(
        room.id, candidate, existing_reservations, excluding_reservation_id
    )


def available_rooms(
    rooms: Iterable[Room],
    reservations: Iterable[Reservation],
    candidate: DateRange,
    today: date,
) -> list[Room]:
    """
    Rooms that could take the candidate stay, ordered by id.

    Example:
        >>> stay = DateRange(date(2024, 6, 1), date(2024, 6, 5))
        >>> [r.name for r in available_rooms(rooms, reservations, stay, today)]
        ['Bedroom 2', 'Entire Cottage']
    """
    by_room: dict[int, list[Reservation]] = {}
    for reservation in reservations:
        by_room.setdefault(reservation.room_id, []).append(reservation)

    return sorted(
        (
            room
            for room in rooms
            if is_available(room, candidate, by_room.get(room.id, []), today)
        ),
        key=lambda room: room.id,
    )
