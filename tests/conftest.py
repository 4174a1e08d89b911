"""
Shared fixtures for unit and integration tests.

Configuration is read at import time, so the environment is prepared here
before any ``cottage_reservations`` module is imported.
"""

from __future__ import annotations

import os
import tempfile
from datetime import date, datetime, timezone
from typing import Callable, Iterator

_TEST_DB = os.path.join(tempfile.gettempdir(), "cottage_reservations_test.sqlite3")
os.environ.setdefault("DATABASE_URL", f"sqlite:///{_TEST_DB}")
os.environ.setdefault("ALLOWED_ORIGINS", "*")
os.environ.setdefault("BOOKING_TIMEZONE", "UTC")
os.environ.setdefault("DEFAULT_RESERVATION_STATUS", "PENDING")

import pytest  # noqa: E402
from sqlalchemy import insert  # noqa: E402
from sqlalchemy.engine import Engine  # noqa: E402

from cottage_reservations.db.engine import build_engine  # noqa: E402
from cottage_reservations.db.memory_store import InMemoryReservationStore  # noqa: E402
from cottage_reservations.db.store import SqlReservationStore  # noqa: E402
from cottage_reservations.domain import Room, RoomType  # noqa: E402
from cottage_reservations.models import reservations, rooms  # noqa: E402,F401
from cottage_reservations.models.base import Base  # noqa: E402
from cottage_reservations.models.rooms import Room as RoomRow  # noqa: E402
from cottage_reservations.services.lifecycle import ReservationManager  # noqa: E402
from cottage_reservations.services.room_locks import RoomLocks  # noqa: E402

# Every test runs on 2024-05-01 unless it builds its own clock
TODAY = date(2024, 5, 1)
NOW = datetime(2024, 5, 1, 12, 0, tzinfo=timezone.utc)

ROOMS = [
    Room(id=1, name="Bedroom 1", max_occupancy=2, room_type=RoomType.BEDROOM_1),
    Room(id=2, name="Bedroom 2", max_occupancy=2, room_type=RoomType.BEDROOM_2),
    Room(id=3, name="Garden Suite", max_occupancy=4),
    Room(id=4, name="Entire Cottage", max_occupancy=6, room_type=RoomType.ENTIRE_COTTAGE),
    Room(id=5, name="Closed Loft", max_occupancy=2, is_available=False),
]


def fixed_clock(moment: datetime = NOW) -> Callable[[], datetime]:
    """Clock that always returns ``moment``."""
    return lambda: moment


@pytest.fixture
def today() -> date:
    return TODAY


@pytest.fixture
def clock() -> Callable[[], datetime]:
    return fixed_clock()


@pytest.fixture
def locks() -> RoomLocks:
    """Fresh lock registry so tests never share lock state."""
    return RoomLocks(timeout_seconds=2)


@pytest.fixture
def memory_store() -> InMemoryReservationStore:
    return InMemoryReservationStore(rooms=ROOMS)


@pytest.fixture
def manager(
    memory_store: InMemoryReservationStore, locks: RoomLocks, clock: Callable[[], datetime]
) -> ReservationManager:
    return ReservationManager(memory_store, locks=locks, clock=clock)


@pytest.fixture
def sqlite_engine(tmp_path) -> Iterator[Engine]:
    """Throwaway SQLite database with the full schema and the test rooms."""
    engine = build_engine(f"sqlite:///{tmp_path / 'reservations.sqlite3'}")
    Base.metadata.create_all(engine)
    with engine.begin() as conn:
        conn.execute(
            insert(RoomRow),
            [
                {
                    "id": room.id,
                    "name": room.name,
                    "max_occupancy": room.max_occupancy,
                    "room_type": room.room_type.value if room.room_type else None,
                    "is_available": room.is_available,
                }
                for room in ROOMS
            ],
        )
    yield engine
    engine.dispose()


@pytest.fixture
def sql_store(sqlite_engine: Engine) -> SqlReservationStore:
    return SqlReservationStore(sqlite_engine)
