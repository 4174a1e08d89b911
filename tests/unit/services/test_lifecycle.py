"""
Unit tests for the reservation lifecycle manager, run against the in-memory store.
"""

from __future__ import annotations

from datetime import date, datetime, timezone
from itertools import combinations

import pytest

from cottage_reservations.db.memory_store import InMemoryReservationStore
from cottage_reservations.domain import Reservation, ReservationStatus
from cottage_reservations.exceptions import (
    AuthorizationError,
    InvalidStateError,
    NotFoundError,
    RoomUnavailableError,
    UnavailableError,
    ValidationError,
)
from cottage_reservations.services.lifecycle import ReservationManager
from cottage_reservations.services.room_locks import RoomLocks
from cottage_reservations.utils.dates import DateRange, ranges_overlap

JUNE_1_5 = DateRange(date(2024, 6, 1), date(2024, 6, 5))


def _active_ranges_never_overlap(store: InMemoryReservationStore) -> bool:
    active = [r for r in store.snapshot().values() if r.is_active]
    for a, b in combinations(active, 2):
        if a.room_id == b.room_id and ranges_overlap(
            a.check_in_date, a.check_out_date, b.check_in_date, b.check_out_date
        ):
            return False
    return True


# ---------------------------------------------------------------------------
# create
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_create_stores_pending_reservation(
    manager: ReservationManager, memory_store: InMemoryReservationStore
) -> None:
    reservation = manager.create("alice", room_id=1, date_range=JUNE_1_5, guests=2)

    assert reservation.id is not None
    assert reservation.status == ReservationStatus.PENDING
    assert reservation.user_id == "alice"
    assert reservation.nights == 4
    assert reservation.created_at == datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)
    assert memory_store.snapshot()[reservation.id] == reservation


@pytest.mark.unit
def test_create_uses_configured_default_status(
    memory_store: InMemoryReservationStore, locks: RoomLocks, clock
) -> None:
    manager = ReservationManager(
        memory_store, locks=locks, clock=clock, default_status=ReservationStatus.CONFIRMED
    )

    reservation = manager.create("alice", room_id=1, date_range=JUNE_1_5, guests=1)

    assert reservation.status == ReservationStatus.CONFIRMED


@pytest.mark.unit
def test_default_status_must_be_active(memory_store: InMemoryReservationStore) -> None:
    with pytest.raises(ValueError):
        ReservationManager(memory_store, default_status=ReservationStatus.CANCELLED)


@pytest.mark.unit
def test_back_to_back_booking_succeeds(manager: ReservationManager) -> None:
    """Test that a check-in on another guest's check-out day is accepted."""
    first = manager.create("alice", room_id=1, date_range=JUNE_1_5, guests=2)
    second = manager.create(
        "bob", room_id=1, date_range=DateRange(date(2024, 6, 5), date(2024, 6, 8)), guests=1
    )

    assert first.id != second.id
    assert second.status == ReservationStatus.PENDING


@pytest.mark.unit
def test_overlapping_booking_is_rejected(
    manager: ReservationManager, memory_store: InMemoryReservationStore
) -> None:
    manager.create("alice", room_id=1, date_range=JUNE_1_5, guests=2)

    with pytest.raises(RoomUnavailableError):
        manager.create(
            "bob", room_id=1, date_range=DateRange(date(2024, 6, 4), date(2024, 6, 6)), guests=1
        )

    assert len(memory_store.snapshot()) == 1


@pytest.mark.unit
def test_same_dates_in_another_room_succeed(manager: ReservationManager) -> None:
    manager.create("alice", room_id=1, date_range=JUNE_1_5, guests=2)

    reservation = manager.create("bob", room_id=2, date_range=JUNE_1_5, guests=2)

    assert reservation.room_id == 2


@pytest.mark.unit
def test_cancelled_reservation_frees_the_dates(manager: ReservationManager) -> None:
    first = manager.create("alice", room_id=1, date_range=JUNE_1_5, guests=2)
    manager.cancel(first.id, "alice")

    second = manager.create("bob", room_id=1, date_range=JUNE_1_5, guests=2)

    assert second.is_active


@pytest.mark.unit
def test_guest_count_above_room_occupancy_is_rejected(manager: ReservationManager) -> None:
    """Room 3 sleeps four; five guests must be refused."""
    with pytest.raises(ValidationError, match="cannot exceed 4"):
        manager.create("alice", room_id=3, date_range=JUNE_1_5, guests=5)


@pytest.mark.unit
@pytest.mark.parametrize("guests", [0, -1, 21, True])
def test_guest_count_out_of_bounds_is_rejected(manager: ReservationManager, guests: int) -> None:
    with pytest.raises(ValidationError):
        manager.create("alice", room_id=4, date_range=JUNE_1_5, guests=guests)


@pytest.mark.unit
def test_past_check_in_is_rejected(manager: ReservationManager) -> None:
    with pytest.raises(ValidationError, match="past"):
        manager.create(
            "alice",
            room_id=1,
            date_range=DateRange(date(2024, 4, 30), date(2024, 5, 3)),
            guests=1,
        )


@pytest.mark.unit
def test_check_in_today_is_accepted(manager: ReservationManager) -> None:
    reservation = manager.create(
        "alice", room_id=1, date_range=DateRange(date(2024, 5, 1), date(2024, 5, 2)), guests=1
    )

    assert reservation.check_in_date == date(2024, 5, 1)


@pytest.mark.unit
def test_unknown_room_is_not_found(manager: ReservationManager) -> None:
    with pytest.raises(NotFoundError):
        manager.create("alice", room_id=99, date_range=JUNE_1_5, guests=1)


@pytest.mark.unit
def test_unknown_rooms_do_not_grow_lock_registry(
    manager: ReservationManager, locks: RoomLocks
) -> None:
    """Test that rejected room ids never get a lock entry."""
    for room_id in range(1000, 1200):
        with pytest.raises(NotFoundError):
            manager.create("alice", room_id=room_id, date_range=JUNE_1_5, guests=1)

    assert locks.size() == 0

    manager.create("alice", room_id=1, date_range=JUNE_1_5, guests=1)
    assert locks.size() == 1


@pytest.mark.unit
def test_disabled_room_is_unavailable(manager: ReservationManager) -> None:
    with pytest.raises(RoomUnavailableError, match="not available"):
        manager.create("alice", room_id=5, date_range=JUNE_1_5, guests=1)


@pytest.mark.unit
def test_missing_user_is_rejected(manager: ReservationManager) -> None:
    with pytest.raises(AuthorizationError):
        manager.create("", room_id=1, date_range=JUNE_1_5, guests=1)


@pytest.mark.unit
def test_notes_are_cleaned_before_saving(manager: ReservationManager) -> None:
    reservation = manager.create(
        "alice", room_id=1, date_range=JUNE_1_5, guests=1, notes="  <b>Late</b> arrival  "
    )

    assert reservation.notes == "Late arrival"


@pytest.mark.unit
def test_script_notes_are_rejected_and_nothing_is_saved(
    manager: ReservationManager, memory_store: InMemoryReservationStore
) -> None:
    with pytest.raises(ValidationError):
        manager.create(
            "alice", room_id=1, date_range=JUNE_1_5, guests=1, notes="<script>alert(1)</script>"
        )

    assert memory_store.snapshot() == {}


@pytest.mark.unit
def test_create_times_out_when_room_lock_is_held(
    memory_store: InMemoryReservationStore, clock
) -> None:
    locks = RoomLocks(timeout_seconds=0.05)
    busy_manager = ReservationManager(memory_store, locks=locks, clock=clock)

    with locks.hold(1):
        with pytest.raises(UnavailableError) as exc_info:
            busy_manager.create("alice", room_id=1, date_range=JUNE_1_5, guests=1)

    assert exc_info.value.retryable
    assert memory_store.snapshot() == {}


# ---------------------------------------------------------------------------
# edit
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_edit_changes_dates_guests_and_notes(manager: ReservationManager) -> None:
    original = manager.create("alice", room_id=1, date_range=JUNE_1_5, guests=1, notes="hi")

    edited = manager.edit(
        original.id,
        "alice",
        new_range=DateRange(date(2024, 6, 2), date(2024, 6, 9)),
        new_guests=2,
        new_notes="",
    )

    assert edited.id == original.id
    assert (edited.check_in_date, edited.check_out_date) == (date(2024, 6, 2), date(2024, 6, 9))
    assert edited.number_of_guests == 2
    assert edited.notes is None
    assert edited.status == original.status


@pytest.mark.unit
def test_edit_keeps_omitted_fields(manager: ReservationManager) -> None:
    original = manager.create("alice", room_id=1, date_range=JUNE_1_5, guests=1, notes="hi")

    edited = manager.edit(original.id, "alice", new_guests=2)

    assert edited.check_in_date == original.check_in_date
    assert edited.check_out_date == original.check_out_date
    assert edited.notes == "hi"


@pytest.mark.unit
def test_edit_may_overlap_its_own_previous_range(manager: ReservationManager) -> None:
    original = manager.create("alice", room_id=1, date_range=JUNE_1_5, guests=1)

    edited = manager.edit(
        original.id, "alice", new_range=DateRange(date(2024, 6, 3), date(2024, 6, 7))
    )

    assert edited.check_in_date == date(2024, 6, 3)


@pytest.mark.unit
def test_non_owner_edit_is_forbidden(manager: ReservationManager) -> None:
    original = manager.create("alice", room_id=1, date_range=JUNE_1_5, guests=1)

    with pytest.raises(AuthorizationError):
        manager.edit(original.id, "mallory", new_guests=2)

    assert manager.get(original.id).number_of_guests == 1


@pytest.mark.unit
def test_edit_into_overlap_leaves_original_unchanged(manager: ReservationManager) -> None:
    """Test that a rejected edit does not modify the stored reservation."""
    manager.create("alice", room_id=1, date_range=JUNE_1_5, guests=1)
    bobs = manager.create(
        "bob", room_id=1, date_range=DateRange(date(2024, 6, 10), date(2024, 6, 12)), guests=1
    )

    with pytest.raises(RoomUnavailableError):
        manager.edit(bobs.id, "bob", new_range=DateRange(date(2024, 6, 4), date(2024, 6, 11)))

    assert manager.get(bobs.id) == bobs


@pytest.mark.unit
def test_edit_validates_guest_count_against_room(manager: ReservationManager) -> None:
    original = manager.create("alice", room_id=1, date_range=JUNE_1_5, guests=1)

    with pytest.raises(ValidationError):
        manager.edit(original.id, "alice", new_guests=3)

    assert manager.get(original.id).number_of_guests == 1


@pytest.mark.unit
def test_edit_of_cancelled_reservation_is_invalid(manager: ReservationManager) -> None:
    original = manager.create("alice", room_id=1, date_range=JUNE_1_5, guests=1)
    manager.cancel(original.id, "alice")

    with pytest.raises(InvalidStateError):
        manager.edit(original.id, "alice", new_guests=2)


@pytest.mark.unit
def test_edit_of_started_stay_is_invalid(
    manager: ReservationManager, memory_store: InMemoryReservationStore
) -> None:
    started = memory_store.add_reservation(
        Reservation(
            room_id=1,
            user_id="alice",
            check_in_date=date(2024, 4, 28),
            check_out_date=date(2024, 5, 3),
            number_of_guests=1,
        )
    )

    with pytest.raises(InvalidStateError, match="already started"):
        manager.edit(started.id, "alice", new_guests=2)


@pytest.mark.unit
def test_edit_of_unknown_reservation_is_not_found(manager: ReservationManager) -> None:
    with pytest.raises(NotFoundError):
        manager.edit(404, "alice", new_guests=2)


# ---------------------------------------------------------------------------
# cancel / set_status / get
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_cancel_twice_raises_invalid_state(manager: ReservationManager) -> None:
    original = manager.create("alice", room_id=1, date_range=JUNE_1_5, guests=1)

    cancelled = manager.cancel(original.id, "alice")
    assert cancelled.status == ReservationStatus.CANCELLED

    with pytest.raises(InvalidStateError):
        manager.cancel(original.id, "alice")


@pytest.mark.unit
def test_non_owner_cancel_is_forbidden(manager: ReservationManager) -> None:
    original = manager.create("alice", room_id=1, date_range=JUNE_1_5, guests=1)

    with pytest.raises(AuthorizationError):
        manager.cancel(original.id, "mallory")

    assert manager.get(original.id).status == ReservationStatus.PENDING


@pytest.mark.unit
def test_cancel_of_completed_reservation_is_invalid(
    manager: ReservationManager, memory_store: InMemoryReservationStore
) -> None:
    completed = memory_store.add_reservation(
        Reservation(
            room_id=1,
            user_id="alice",
            check_in_date=date(2024, 6, 1),
            check_out_date=date(2024, 6, 3),
            number_of_guests=1,
            status=ReservationStatus.COMPLETED,
        )
    )

    with pytest.raises(InvalidStateError):
        manager.cancel(completed.id, "alice")


@pytest.mark.unit
def test_set_status_confirms_pending_reservation(manager: ReservationManager) -> None:
    original = manager.create("alice", room_id=1, date_range=JUNE_1_5, guests=1)

    confirmed = manager.set_status(original.id, ReservationStatus.CONFIRMED)

    assert confirmed.status == ReservationStatus.CONFIRMED
    assert manager.get(original.id).status == ReservationStatus.CONFIRMED


@pytest.mark.unit
def test_set_status_same_value_is_noop(manager: ReservationManager) -> None:
    original = manager.create("alice", room_id=1, date_range=JUNE_1_5, guests=1)

    assert manager.set_status(original.id, ReservationStatus.PENDING) == original


@pytest.mark.unit
@pytest.mark.parametrize(
    "status", [ReservationStatus.CANCELLED, ReservationStatus.COMPLETED]
)
def test_set_status_to_terminal_is_invalid(
    manager: ReservationManager, status: ReservationStatus
) -> None:
    original = manager.create("alice", room_id=1, date_range=JUNE_1_5, guests=1)

    with pytest.raises(InvalidStateError):
        manager.set_status(original.id, status)


@pytest.mark.unit
def test_set_status_on_cancelled_is_invalid(manager: ReservationManager) -> None:
    original = manager.create("alice", room_id=1, date_range=JUNE_1_5, guests=1)
    manager.cancel(original.id, "alice")

    with pytest.raises(InvalidStateError):
        manager.set_status(original.id, ReservationStatus.CONFIRMED)


@pytest.mark.unit
def test_get_unknown_reservation_is_not_found(manager: ReservationManager) -> None:
    with pytest.raises(NotFoundError):
        manager.get(1)


# ---------------------------------------------------------------------------
# invariant
# ---------------------------------------------------------------------------


@pytest.mark.unit
def test_active_reservations_never_overlap_after_mixed_operations(
    manager: ReservationManager, memory_store: InMemoryReservationStore
) -> None:
    requests = [
        ("alice", 1, date(2024, 6, 1), date(2024, 6, 5)),
        ("bob", 1, date(2024, 6, 3), date(2024, 6, 6)),
        ("carol", 1, date(2024, 6, 5), date(2024, 6, 7)),
        ("dave", 2, date(2024, 6, 1), date(2024, 6, 10)),
        ("erin", 2, date(2024, 6, 9), date(2024, 6, 12)),
        ("frank", 1, date(2024, 5, 28), date(2024, 6, 2)),
    ]
    created = []
    for user, room_id, check_in, check_out in requests:
        try:
            created.append(
                manager.create(user, room_id, DateRange(check_in, check_out), guests=1)
            )
        except RoomUnavailableError:
            pass

    carol = next(r for r in created if r.user_id == "carol")
    with pytest.raises(RoomUnavailableError):
        manager.edit(carol.id, "carol", new_range=DateRange(date(2024, 6, 4), date(2024, 6, 8)))
    manager.cancel(created[0].id, "alice")
    manager.edit(carol.id, "carol", new_range=DateRange(date(2024, 6, 2), date(2024, 6, 8)))

    assert [r.user_id for r in created] == ["alice", "carol", "dave"]
    assert _active_ranges_never_overlap(memory_store)
