"""
Unit tests for FastAPI dependency injection.
"""

from __future__ import annotations

from unittest.mock import Mock

import pytest
from fastapi import Depends, FastAPI
from fastapi.testclient import TestClient
from sqlalchemy.engine import Engine

from cottage_reservations.db.memory_store import InMemoryReservationStore
from cottage_reservations.db.store import SqlReservationStore
from cottage_reservations.dependencies import (
    get_current_user_id,
    get_db_engine,
    get_reservation_manager,
    get_reservation_store,
)
from cottage_reservations.services.lifecycle import ReservationManager


@pytest.fixture
def identity_app() -> FastAPI:
    app = FastAPI()

    @app.get("/whoami")
    def whoami(user_id: str = Depends(get_current_user_id)) -> dict[str, str]:
        return {"user_id": user_id}

    return app


@pytest.mark.unit
def test_get_db_engine_dependency() -> None:
    """Test that get_db_engine returns the engine instance."""
    engine = next(get_db_engine())

    assert isinstance(engine, Engine)


@pytest.mark.unit
def test_dependency_injection_provides_same_engine() -> None:
    """Test that multiple calls get the same engine instance."""
    assert next(get_db_engine()) is next(get_db_engine())


@pytest.mark.unit
def test_reservation_store_wraps_engine() -> None:
    store = get_reservation_store(Mock(spec=Engine))

    assert isinstance(store, SqlReservationStore)


@pytest.mark.unit
def test_store_override_reaches_manager() -> None:
    """Test that overriding the store swaps the backend of the lifecycle manager."""
    app = FastAPI()
    memory = InMemoryReservationStore()

    @app.get("/manager")
    def manager_endpoint(
        manager: ReservationManager = Depends(get_reservation_manager),
    ) -> dict[str, bool]:
        return {"uses_memory_store": manager._store is memory}

    app.dependency_overrides[get_reservation_store] = lambda: memory

    response = TestClient(app).get("/manager")

    assert response.status_code == 200
    assert response.json() == {"uses_memory_store": True}


@pytest.mark.unit
def test_current_user_is_read_from_header(identity_app: FastAPI) -> None:
    response = TestClient(identity_app).get("/whoami", headers={"X-User-Id": "  user-42 "})

    assert response.status_code == 200
    assert response.json() == {"user_id": "user-42"}


@pytest.mark.unit
@pytest.mark.parametrize("headers", [{}, {"X-User-Id": ""}, {"X-User-Id": "   "}])
def test_missing_user_header_is_unauthorized(identity_app: FastAPI, headers) -> None:
    response = TestClient(identity_app).get("/whoami", headers=headers)

    assert response.status_code == 401
