"""
Unit tests for the per-room lock registry.
"""

from __future__ import annotations

import threading

import pytest

from cottage_reservations.exceptions import UnavailableError
from cottage_reservations.services.room_locks import RoomLocks


@pytest.mark.unit
def test_locks_are_created_lazily_per_room() -> None:
    locks = RoomLocks(timeout_seconds=1)
    assert locks.size() == 0

    with locks.hold(1):
        pass
    with locks.hold(1):
        pass
    with locks.hold(2):
        pass

    assert locks.size() == 2


@pytest.mark.unit
def test_held_room_times_out_with_unavailable_error() -> None:
    locks = RoomLocks(timeout_seconds=0.05)

    with locks.hold(1):
        with pytest.raises(UnavailableError):
            with locks.hold(1):
                pass


@pytest.mark.unit
def test_different_rooms_do_not_block_each_other() -> None:
    locks = RoomLocks(timeout_seconds=0.05)

    with locks.hold(1):
        with locks.hold(2):
            pass


@pytest.mark.unit
def test_lock_is_released_after_exception() -> None:
    locks = RoomLocks(timeout_seconds=0.05)

    with pytest.raises(RuntimeError):
        with locks.hold(1):
            raise RuntimeError("boom")

    with locks.hold(1):
        pass


@pytest.mark.unit
def test_waiter_proceeds_once_holder_releases() -> None:
    locks = RoomLocks(timeout_seconds=2)
    holder_has_lock = threading.Event()
    release = threading.Event()
    order: list[str] = []

    def holder() -> None:
        with locks.hold(1):
            order.append("holder")
            holder_has_lock.set()
            release.wait(timeout=2)

    thread = threading.Thread(target=holder)
    thread.start()
    holder_has_lock.wait(timeout=2)
    release.set()

    with locks.hold(1):
        order.append("waiter")
    thread.join(timeout=2)

    assert order == ["holder", "waiter"]
