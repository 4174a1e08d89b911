"""
In-memory ReservationStore.

Used for local demos and for exercising the lifecycle manager without a
database. Writes made inside ``transaction()`` are staged and only become
visible when the block exits normally, mirroring a database commit.

For multi-process deployments use SqlReservationStore.
"""

from __future__ import annotations

import dataclasses
import threading
from contextlib import contextmanager
from datetime import date
from typing import Iterable, Iterator, Optional

from cottage_reservations.domain import Reservation, ReservationStatus, Room
from cottage_reservations.utils.dates import utc_now


class InMemoryStoreSession:
    def __init__(self, store: InMemoryReservationStore):
        self._store = store
        self._staged: dict[int, Reservation] = {}

    def _visible(self) -> list[Reservation]:
        merged = self._store.snapshot()
        merged.update(self._staged)
        return sorted(merged.values(), key=lambda r: (r.check_in_date, r.id or 0))

    def get_room(self, room_id: int) -> Optional[Room]:
        return self._store.rooms.get(room_id)

    def lock_room(self, room_id: int) -> Optional[Room]:
        # Callers already hold the in-process room lock
        return self.get_room(room_id)

    def list_rooms(self) -> list[Room]:
        return sorted(self._store.rooms.values(), key=lambda room: room.id)

    def find_active_by_room(self, room_id: int) -> list[Reservation]:
        return [r for r in self._visible() if r.room_id == room_id and r.is_active]

    def find_by_id(self, reservation_id: int) -> Optional[Reservation]:
        if reservation_id in self._staged:
            return self._staged[reservation_id]
        return self._store.snapshot().get(reservation_id)

    def find_by_user(self, user_id: str) -> list[Reservation]:
        return [r for r in self._visible() if r.user_id == user_id]

    def find_non_cancelled(self) -> list[Reservation]:
        return [r for r in self._visible() if r.status != ReservationStatus.CANCELLED]

    def find_between(self, start: date, end: date) -> list[Reservation]:
        return [
            r for r in self._visible() if r.check_in_date >= start and r.check_out_date <= end
        ]

    def save(self, reservation: Reservation) -> Reservation:
        now = utc_now()
        if reservation.id is None:
            reservation = dataclasses.replace(
                reservation,
                id=self._store.allocate_id(),
                created_at=reservation.created_at or now,
                updated_at=reservation.updated_at or now,
            )
        self._staged[reservation.id] = reservation
        return reservation

    def staged(self) -> dict[int, Reservation]:
        return dict(self._staged)


class InMemoryReservationStore:
    """
    Thread-safe dictionary-backed store.

    Example:
        >>> store = InMemoryReservationStore(rooms=[Room(id=1, name="Bedroom 1", max_occupancy=2)])
        >>> with store.transaction() as session:
        ...     session.save(reservation)
    """

    def __init__(self, rooms: Iterable[Room] = ()):
        self.rooms: dict[int, Room] = {room.id: room for room in rooms}
        self._reservations: dict[int, Reservation] = {}
        self._next_id = 1
        self._lock = threading.Lock()

    def allocate_id(self) -> int:
        with self._lock:
            new_id = self._next_id
            self._next_id += 1
            return new_id

    def snapshot(self) -> dict[int, Reservation]:
        with self._lock:
            return dict(self._reservations)

    def add_room(self, room: Room) -> None:
        self.rooms[room.id] = room

    def add_reservation(self, reservation: Reservation) -> Reservation:
        """Insert a reservation directly, bypassing the lifecycle rules (fixtures, imports)."""
        with self.transaction() as session:
            return session.save(reservation)

    @contextmanager
    def transaction(self) -> Iterator[InMemoryStoreSession]:
        session = InMemoryStoreSession(self)
        yield session
        # Only reached when the block did not raise
        with self._lock:
            self._reservations.update(session.staged())
