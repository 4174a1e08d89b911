from typing import Any

import structlog
from sqlalchemy import insert, update
from sqlalchemy.engine import Connection

from cottage_reservations.config import DEBUG
from cottage_reservations.domain import Reservation
from cottage_reservations.models.reservations import Reservation as ReservationRow
from cottage_reservations.utils.dates import utc_now

logger = structlog.get_logger(__name__)


def _row_values(reservation: Reservation) -> dict[str, Any]:
    return {
        "room_id": reservation.room_id,
        "user_id": reservation.user_id,
        "check_in_date": reservation.check_in_date,
        "check_out_date": reservation.check_out_date,
        "number_of_guests": reservation.number_of_guests,
        "notes": reservation.notes,
        "status": reservation.status.value,
    }


def insert_reservation(conn: Connection, reservation: Reservation) -> int:
    """
    Insert a new reservation row inside the caller's transaction.

    Args:
        conn: Active database connection (within transaction)
        reservation: Record without an id

    Returns:
        int: Generated reservation id
    """
    now = utc_now()
    values = _row_values(reservation)
    values["created_at"] = reservation.created_at or now
    values["updated_at"] = reservation.updated_at or now

    if DEBUG:
        logger.debug("reservation_insert", values=values)

    result = conn.execute(insert(ReservationRow).values(**values))
    return int(result.inserted_primary_key[0])


def update_reservation(conn: Connection, reservation: Reservation) -> None:
    """
    Overwrite the mutable columns of an existing reservation.

    Args:
        conn: Active database connection (within transaction)
        reservation: Record carrying the id and the full new field set
    """
    values = _row_values(reservation)
    values["updated_at"] = reservation.updated_at or utc_now()

    result = conn.execute(
        update(ReservationRow).where(ReservationRow.id == reservation.id).values(**values)
    )
    if result.rowcount != 1:
        logger.warning("reservation_update_missed", reservation_id=reservation.id)
