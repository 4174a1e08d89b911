"""
Persistence boundary for the reservation core.

The lifecycle manager and query layer only talk to a ``ReservationStore``:
something that opens an atomic unit of work (``transaction()``) yielding a
``StoreSession`` with the reads and the single write the core needs.
``SqlReservationStore`` is the production implementation.
"""

from __future__ import annotations

import dataclasses
from contextlib import contextmanager
from datetime import date
from typing import ContextManager, Iterator, Optional, Protocol

import structlog
from sqlalchemy.engine import Connection, Engine
from sqlalchemy.exc import IntegrityError, OperationalError
from sqlalchemy.exc import TimeoutError as PoolTimeoutError

from cottage_reservations.db.readers import reservations as reservation_readers
from cottage_reservations.db.readers import rooms as room_readers
from cottage_reservations.db.writers.reservations import insert_reservation, update_reservation
from cottage_reservations.domain import Reservation, Room
from cottage_reservations.exceptions import RoomUnavailableError, UnavailableError

logger = structlog.get_logger(__name__)

# SQLSTATE raised by the no_room_overlap exclusion constraint (PostgreSQL only)
EXCLUSION_VIOLATION = "23P01"


class StoreSession(Protocol):
    """Reads and writes available inside one atomic unit of work."""

    def get_room(self, room_id: int) -> Optional[Room]: ...

    def lock_room(self, room_id: int) -> Optional[Room]: ...

    def list_rooms(self) -> list[Room]: ...

    def find_active_by_room(self, room_id: int) -> list[Reservation]: ...

    def find_by_id(self, reservation_id: int) -> Optional[Reservation]: ...

    def find_by_user(self, user_id: str) -> list[Reservation]: ...

    def find_non_cancelled(self) -> list[Reservation]: ...

    def find_between(self, start: date, end: date) -> list[Reservation]: ...

    def save(self, reservation: Reservation) -> Reservation: ...


class ReservationStore(Protocol):
    def transaction(self) -> ContextManager[StoreSession]: ...


class SqlStoreSession:
    """StoreSession bound to a connection with an open transaction."""

    def __init__(self, conn: Connection):
        self._conn = conn

    def get_room(self, room_id: int) -> Optional[Room]:
        return room_readers.get_room(self._conn, room_id)

    def lock_room(self, room_id: int) -> Optional[Room]:
        return room_readers.lock_room(self._conn, room_id)

    def list_rooms(self) -> list[Room]:
        return room_readers.list_rooms(self._conn)

    def find_active_by_room(self, room_id: int) -> list[Reservation]:
        return reservation_readers.get_active_reservations_for_room(self._conn, room_id)

    def find_by_id(self, reservation_id: int) -> Optional[Reservation]:
        return reservation_readers.get_reservation(self._conn, reservation_id)

    def find_by_user(self, user_id: str) -> list[Reservation]:
        return reservation_readers.get_reservations_for_user(self._conn, user_id)

    def find_non_cancelled(self) -> list[Reservation]:
        return reservation_readers.get_non_cancelled_reservations(self._conn)

    def find_between(self, start: date, end: date) -> list[Reservation]:
        return reservation_readers.get_reservations_between(self._conn, start, end)

    def save(self, reservation: Reservation) -> Reservation:
        if reservation.id is None:
            new_id = insert_reservation(self._conn, reservation)
            return dataclasses.replace(reservation, id=new_id)
        update_reservation(self._conn, reservation)
        return reservation


class SqlReservationStore:
    """
    ReservationStore backed by SQLAlchemy.

    Each ``transaction()`` is one ``engine.begin()`` block: committed on normal
    exit, rolled back on any exception, so a failed or interrupted operation
    never leaves a partial write.

    Example:
        >>> store = SqlReservationStore(engine)
        >>> with store.transaction() as session:
        ...     room = session.lock_room(1)
        ...     active = session.find_active_by_room(1)
    """

    def __init__(self, engine: Engine):
        self._engine = engine

    @contextmanager
    def transaction(self) -> Iterator[SqlStoreSession]:
        try:
            with self._engine.begin() as conn:
                yield SqlStoreSession(conn)
        except (OperationalError, PoolTimeoutError) as exc:
            logger.warning("database_unavailable", error=str(exc))
            raise UnavailableError("Database is temporarily unavailable") from exc
        except IntegrityError as exc:
            if getattr(exc.orig, "pgcode", None) != EXCLUSION_VIOLATION:
                raise
            logger.warning("reservation_overlap_rejected_by_database", error=str(exc))
            raise RoomUnavailableError("Room is already booked for the selected dates") from exc
