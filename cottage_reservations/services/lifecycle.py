"""
Reservation lifecycle manager: create, edit, cancel and operator status changes.

Every write follows the same shape:

    with room lock, with store transaction:
        re-read the room and its active reservations
        validate + ask the availability engine
        save

so the availability answer and the write it justifies cannot be separated by
a concurrent booking for the same room.
"""

from __future__ import annotations

import dataclasses
from contextlib import contextmanager
from datetime import date
from typing import Iterator, Optional

import structlog

from cottage_reservations.config import DEFAULT_RESERVATION_STATUS
from cottage_reservations.db.store import ReservationStore, StoreSession
from cottage_reservations.domain import ACTIVE_STATUSES, Reservation, ReservationStatus, Room
from cottage_reservations.exceptions import (
    AuthorizationError,
    InvalidStateError,
    NotFoundError,
    ReservationError,
    RoomUnavailableError,
    ValidationError,
)
from cottage_reservations.metrics import (
    availability_checks,
    lifecycle_duration,
    lifecycle_operations,
)
from cottage_reservations.services.availability import find_conflicts, is_available
from cottage_reservations.services.room_locks import RoomLocks, room_locks
from cottage_reservations.services.validation import clean_notes, validate_guest_count
from cottage_reservations.utils.dates import Clock, DateRange, is_past_date, local_today, utc_now

logger = structlog.get_logger(__name__)


@contextmanager
def _observed(operation: str) -> Iterator[None]:
    with lifecycle_duration.labels(operation=operation).time():
        try:
            yield
        except ReservationError as exc:
            lifecycle_operations.labels(operation=operation, outcome=type(exc).__name__).inc()
            raise
        else:
            lifecycle_operations.labels(operation=operation, outcome="success").inc()


class ReservationManager:
    """
    Owns reservation state transitions and enforces the booking invariants.

    Args:
        store: Persistence boundary
        locks: Per-room lock registry (process-wide by default)
        clock: Source of "now"; inject a fixed clock in tests
        default_status: Status given to new reservations (PENDING or CONFIRMED)

    Example:
        >>> manager = ReservationManager(SqlReservationStore(engine))
        >>> stay = DateRange(date(2024, 6, 1), date(2024, 6, 5))
        >>> reservation = manager.create("user-1", room_id=1, date_range=stay, guests=2)
        >>> manager.cancel(reservation.id, "user-1").status
        <ReservationStatus.CANCELLED: 'CANCELLED'>
    """

    def __init__(
        self,
        store: ReservationStore,
        locks: RoomLocks = room_locks,
        clock: Clock = utc_now,
        default_status: ReservationStatus = ReservationStatus(DEFAULT_RESERVATION_STATUS),
    ):
        if default_status not in ACTIVE_STATUSES:
            raise ValueError("default_status must be PENDING or CONFIRMED")
        self._store = store
        self._locks = locks
        self._clock = clock
        self._default_status = default_status

    # ------------------------------------------------------------------
    # Operations
    # ------------------------------------------------------------------

    def get(self, reservation_id: int) -> Reservation:
        """Fetch a reservation or raise NotFoundError."""
        with self._store.transaction() as session:
            reservation = session.find_by_id(reservation_id)
        if reservation is None:
            raise NotFoundError(f"Reservation {reservation_id} not found")
        return reservation

    def create(
        self,
        user_id: str,
        room_id: int,
        date_range: DateRange,
        guests: int,
        notes: Optional[str] = None,
    ) -> Reservation:
        """
        Book a room for a stay.

        Raises:
            NotFoundError: Unknown room
            ValidationError: Past check-in, bad guest count or unsafe notes
            RoomUnavailableError: Room disabled or already booked for an overlapping range
            UnavailableError: Lock or database timeout
        """
        with _observed("create"):
            self._require_user(user_id)
            cleaned_notes = clean_notes(notes)
            self._require_room(room_id)

            with self._locks.hold(room_id), self._store.transaction() as session:
                room = session.lock_room(room_id)
                if room is None:
                    raise NotFoundError(f"Room {room_id} not found")

                self._check_bookable(session, room, date_range, guests)

                now = self._clock()
                saved = session.save(
                    Reservation(
                        room_id=room.id,
                        user_id=user_id,
                        check_in_date=date_range.check_in,
                        check_out_date=date_range.check_out,
                        number_of_guests=guests,
                        notes=cleaned_notes,
                        status=self._default_status,
                        created_at=now,
                        updated_at=now,
                    )
                )

        logger.info(
            "reservation_created",
            reservation_id=saved.id,
            room_id=saved.room_id,
            user_id=user_id,
            check_in=saved.check_in_date.isoformat(),
            check_out=saved.check_out_date.isoformat(),
            status=saved.status.value,
        )
        return saved

    def edit(
        self,
        reservation_id: int,
        requester_user_id: str,
        new_range: Optional[DateRange] = None,
        new_guests: Optional[int] = None,
        new_notes: Optional[str] = None,
    ) -> Reservation:
        """
        Change dates, guest count or notes of an upcoming reservation.

        Fields left as None keep their current value; pass ``new_notes=""`` to
        clear notes. The merged reservation is validated exactly like a new one,
        ignoring itself for overlap, and stored only if every check passes.

        Raises:
            NotFoundError, AuthorizationError, InvalidStateError,
            ValidationError, RoomUnavailableError, UnavailableError
        """
        with _observed("edit"):
            room_id = self.get(reservation_id).room_id

            with self._locks.hold(room_id), self._store.transaction() as session:
                room = session.lock_room(room_id)
                reservation = self._load_for_change(session, reservation_id, requester_user_id)
                if room is None:
                    raise NotFoundError(f"Room {room_id} not found")

                stay = new_range or DateRange(
                    reservation.check_in_date, reservation.check_out_date
                )
                guests = reservation.number_of_guests if new_guests is None else new_guests
                notes = reservation.notes if new_notes is None else clean_notes(new_notes)

                self._check_bookable(
                    session, room, stay, guests, excluding_reservation_id=reservation.id
                )

                saved = session.save(
                    dataclasses.replace(
                        reservation,
                        check_in_date=stay.check_in,
                        check_out_date=stay.check_out,
                        number_of_guests=guests,
                        notes=notes,
                        updated_at=self._clock(),
                    )
                )

        logger.info(
            "reservation_updated",
            reservation_id=saved.id,
            room_id=saved.room_id,
            check_in=saved.check_in_date.isoformat(),
            check_out=saved.check_out_date.isoformat(),
            guests=saved.number_of_guests,
        )
        return saved

    def cancel(self, reservation_id: int, requester_user_id: str) -> Reservation:
        """
        Cancel an upcoming reservation owned by the requester.

        Cancelling twice is an error (InvalidStateError), not a silent no-op, so
        duplicate submissions are visible to the caller.
        """
        with _observed("cancel"):
            room_id = self.get(reservation_id).room_id

            with self._locks.hold(room_id), self._store.transaction() as session:
                reservation = self._load_for_change(session, reservation_id, requester_user_id)
                saved = session.save(
                    dataclasses.replace(
                        reservation,
                        status=ReservationStatus.CANCELLED,
                        updated_at=self._clock(),
                    )
                )

        logger.info("reservation_cancelled", reservation_id=saved.id, room_id=saved.room_id)
        return saved

    def set_status(self, reservation_id: int, status: ReservationStatus) -> Reservation:
        """
        Operator adjustment between PENDING and CONFIRMED.

        Any other transition (including into or out of a terminal state) raises
        InvalidStateError. Setting the current status again is a no-op.
        """
        with _observed("set_status"):
            if status not in ACTIVE_STATUSES:
                raise InvalidStateError(f"Operators cannot set status {status.value}")

            room_id = self.get(reservation_id).room_id

            with self._locks.hold(room_id), self._store.transaction() as session:
                reservation = session.find_by_id(reservation_id)
                if reservation is None:
                    raise NotFoundError(f"Reservation {reservation_id} not found")
                if not reservation.is_active:
                    raise InvalidStateError(
                        f"Reservation {reservation_id} is {reservation.status.value}"
                    )
                if reservation.status == status:
                    return reservation

                saved = session.save(
                    dataclasses.replace(reservation, status=status, updated_at=self._clock())
                )

        logger.info(
            "reservation_status_changed",
            reservation_id=saved.id,
            status=saved.status.value,
        )
        return saved

    # ------------------------------------------------------------------
    # Checks
    # ------------------------------------------------------------------

    def _today(self) -> date:
        return local_today(self._clock)

    @staticmethod
    def _require_user(user_id: str) -> None:
        if not user_id:
            raise AuthorizationError("An authenticated user is required")

    def _require_room(self, room_id: int) -> None:
        # Unknown ids must never reach the lock registry, which keeps one lock per id
        with self._store.transaction() as session:
            room = session.get_room(room_id)
        if room is None:
            raise NotFoundError(f"Room {room_id} not found")

    def _load_for_change(
        self, session: StoreSession, reservation_id: int, requester_user_id: str
    ) -> Reservation:
        """Re-read a reservation under the room lock and check it may still be changed."""
        self._require_user(requester_user_id)

        reservation = session.find_by_id(reservation_id)
        if reservation is None:
            raise NotFoundError(f"Reservation {reservation_id} not found")
        if reservation.user_id != requester_user_id:
            raise AuthorizationError("You can only change your own reservations")
        if reservation.status.is_terminal:
            raise InvalidStateError(
                f"Reservation {reservation_id} is {reservation.status.value} "
                "and can no longer be changed"
            )
        if is_past_date(reservation.check_in_date, self._today()):
            raise InvalidStateError(f"Reservation {reservation_id} has already started")
        return reservation

    def _check_bookable(
        self,
        session: StoreSession,
        room: Room,
        stay: DateRange,
        guests: int,
        excluding_reservation_id: Optional[int] = None,
    ) -> None:
        today = self._today()

        if is_past_date(stay.check_in, today):
            raise ValidationError("Check-in date cannot be in the past")
        validate_guest_count(guests, room)

        if not room.is_available:
            availability_checks.labels(result="room_disabled").inc()
            raise RoomUnavailableError(f"{room.name} is not available for booking")

        existing = session.find_active_by_room(room.id)
        if not is_available(room, stay, existing, today, excluding_reservation_id):
            conflicts = find_conflicts(room.id, stay, existing, excluding_reservation_id)
            availability_checks.labels(result="conflict").inc()
            logger.info(
                "reservation_conflict",
                room_id=room.id,
                check_in=stay.check_in.isoformat(),
                check_out=stay.check_out.isoformat(),
                conflicting_ids=[r.id for r in conflicts],
            )
            raise RoomUnavailableError("Room is already booked for the selected dates")

        availability_checks.labels(result="available").inc()
