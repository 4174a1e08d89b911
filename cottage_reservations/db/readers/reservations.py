from datetime import date
from typing import Any, Optional

from sqlalchemy import select
from sqlalchemy.engine import Connection

from cottage_reservations.domain import ACTIVE_STATUSES, Reservation, ReservationStatus
from cottage_reservations.models.reservations import Reservation as ReservationRow

_ACTIVE_VALUES = [status.value for status in ACTIVE_STATUSES]


def reservation_from_row(row: Any) -> Reservation:
    """Map a ``reservations`` row to a Reservation record."""
    return Reservation(
        id=row.id,
        room_id=row.room_id,
        user_id=row.user_id,
        check_in_date=row.check_in_date,
        check_out_date=row.check_out_date,
        number_of_guests=row.number_of_guests,
        notes=row.notes,
        status=ReservationStatus(row.status),
        created_at=row.created_at,
        updated_at=row.updated_at,
    )


def get_reservation(conn: Connection, reservation_id: int) -> Optional[Reservation]:
    """
    Fetch a reservation by id.

    Args:
        conn (Connection): An active SQLAlchemy database connection.
        reservation_id (int): Reservation ID

    Returns:
        Optional[Reservation]: The reservation, or None if not found
    """
    row = conn.execute(
        select(ReservationRow).where(ReservationRow.id == reservation_id)
    ).fetchone()
    return reservation_from_row(row) if row else None


def get_active_reservations_for_room(conn: Connection, room_id: int) -> list[Reservation]:
    """
    Fetch PENDING/CONFIRMED reservations for a room, ordered by check-in.

    Args:
        conn (Connection): An active SQLAlchemy database connection.
        room_id (int): Room ID

    Returns:
        list[Reservation]: Reservations that currently block the room
    """
    rows = conn.execute(
        select(ReservationRow)
        .where(ReservationRow.room_id == room_id)
        .where(ReservationRow.status.in_(_ACTIVE_VALUES))
        .order_by(ReservationRow.check_in_date, ReservationRow.id)
    ).fetchall()
    return [reservation_from_row(row) for row in rows]


def get_reservations_for_user(conn: Connection, user_id: str) -> list[Reservation]:
    """Every reservation owned by ``user_id``, any status, check-in ascending."""
    rows = conn.execute(
        select(ReservationRow)
        .where(ReservationRow.user_id == user_id)
        .order_by(ReservationRow.check_in_date, ReservationRow.id)
    ).fetchall()
    return [reservation_from_row(row) for row in rows]


def get_non_cancelled_reservations(conn: Connection) -> list[Reservation]:
    """Every reservation except CANCELLED ones, across all users."""
    rows = conn.execute(
        select(ReservationRow)
        .where(ReservationRow.status != ReservationStatus.CANCELLED.value)
        .order_by(ReservationRow.check_in_date, ReservationRow.id)
    ).fetchall()
    return [reservation_from_row(row) for row in rows]


def get_reservations_between(conn: Connection, start: date, end: date) -> list[Reservation]:
    """
    Reservations whose whole stay lies inside [start, end].

    Args:
        conn (Connection): SQLAlchemy DB connection.
        start (date): First day of the window
        end (date): Last day of the window

    Returns:
        list[Reservation]: Matching reservations of any status
    """
    rows = conn.execute(
        select(ReservationRow)
        .where(ReservationRow.check_in_date >= start)
        .where(ReservationRow.check_out_date <= end)
        .order_by(ReservationRow.check_in_date, ReservationRow.id)
    ).fetchall()
    return [reservation_from_row(row) for row in rows]
