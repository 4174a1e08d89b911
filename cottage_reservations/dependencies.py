"""
FastAPI dependency injection providers.

Routes receive the store, the lifecycle manager and the caller's identity
through these providers. Tests override them with
``app.dependency_overrides`` to run against an in-memory store or a
throwaway SQLite database.
"""

from __future__ import annotations

from typing import Generator, Optional

from fastapi import Depends, Header, HTTPException, status
from sqlalchemy.engine import Engine

from cottage_reservations.db.engine import engine
from cottage_reservations.db.store import ReservationStore, SqlReservationStore
from cottage_reservations.services.lifecycle import ReservationManager
from cottage_reservations.utils.dates import Clock, utc_now


def get_db_engine() -> Generator[Engine, None, None]:
    """
    Provide database engine for dependency injection.

    Yields:
        Engine: SQLAlchemy database engine
    """
    yield engine


def get_reservation_store(db_engine: Engine = Depends(get_db_engine)) -> ReservationStore:
    """Provide the SQL-backed reservation store."""
    return SqlReservationStore(db_engine)


def get_clock() -> Clock:
    """Provide the clock used for every "today" decision. Override in tests."""
    return utc_now


def get_reservation_manager(
    store: ReservationStore = Depends(get_reservation_store),
    clock: Clock = Depends(get_clock),
) -> ReservationManager:
    """
    Provide a lifecycle manager bound to the request's store and clock.

    All managers share the process-wide room lock registry, so building one per
    request is cheap and still serializes bookings per room.
    """
    return ReservationManager(store, clock=clock)


def get_current_user_id(
    x_user_id: Optional[str] = Header(None, alias="X-User-Id"),
) -> str:
    """
    Resolve the authenticated user id supplied by the identity provider.

    Raises:
        HTTPException: 401 if the header is missing or blank
    """
    if not x_user_id or not x_user_id.strip():
        raise HTTPException(
            status_code=status.HTTP_401_UNAUTHORIZED,
            detail="Authentication required",
        )
    return x_user_id.strip()
