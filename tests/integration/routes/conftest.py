from __future__ import annotations

from typing import Iterator

import pytest
from fastapi.testclient import TestClient

from cottage_reservations.db.memory_store import InMemoryReservationStore
from cottage_reservations.dependencies import get_clock, get_reservation_store
from cottage_reservations.main import app


@pytest.fixture
def api_client(memory_store: InMemoryReservationStore, clock) -> Iterator[TestClient]:
    """TestClient whose routes run against the in-memory store on a fixed day."""
    app.dependency_overrides[get_reservation_store] = lambda: memory_store
    app.dependency_overrides[get_clock] = lambda: clock
    try:
        yield TestClient(app)
    finally:
        app.dependency_overrides.clear()

