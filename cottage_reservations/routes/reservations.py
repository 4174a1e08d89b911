from datetime import date
from typing import Optional

import structlog
from fastapi import APIRouter, Depends, HTTPException, Query, status

from cottage_reservations.db.store import ReservationStore
from cottage_reservations.dependencies import (
    get_current_user_id,
    get_reservation_manager,
    get_reservation_store,
)
from cottage_reservations.domain import ReservationStatus
from cottage_reservations.exceptions import ReservationError
from cottage_reservations.routes._reservation_helpers import to_http_exception
from cottage_reservations.schemas.reservations import (
    ReservationCreatePayload,
    ReservationResponse,
    ReservationSummaryResponse,
    ReservationUpdatePayload,
)
from cottage_reservations.services import queries
from cottage_reservations.services.lifecycle import ReservationManager
from cottage_reservations.utils.dates import DateRange

logger = structlog.get_logger(__name__)
router = APIRouter()


@router.post(
    "/reservations",
    status_code=status.HTTP_201_CREATED,
    response_model=ReservationResponse,
)
def create_reservation(
    payload: ReservationCreatePayload,
    user_id: str = Depends(get_current_user_id),
    manager: ReservationManager = Depends(get_reservation_manager),
) -> ReservationResponse:
    """
    Book a room for the authenticated user.

    Args:
        payload: Room, stay dates, guest count and optional notes
        user_id: Caller identity from the X-User-Id header
        manager: Reservation lifecycle manager

    Returns:
        ReservationResponse: The stored reservation
    """
    try:
        stay = DateRange(payload.check_in_date, payload.check_out_date)
        reservation = manager.create(
            user_id=user_id,
            room_id=payload.room_id,
            date_range=stay,
            guests=payload.number_of_guests,
            notes=payload.notes,
        )
        return ReservationResponse.from_record(reservation)

    except ReservationError as e:
        logger.info("reservation_create_rejected", user_id=user_id, reason=str(e))
        raise to_http_exception(e) from e
    except HTTPException:
        raise
    except Exception as e:
        logger.exception("reservation_create_failed", user_id=user_id, error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")


@router.get("/reservations", response_model=list[ReservationResponse])
def list_my_reservations(
    user_id: str = Depends(get_current_user_id),
    store: ReservationStore = Depends(get_reservation_store),
) -> list[ReservationResponse]:
    """Return every reservation of the caller, check-in ascending."""
    try:
        return [
            ReservationResponse.from_record(r) for r in queries.list_for_user(store, user_id)
        ]
    except ReservationError as e:
        raise to_http_exception(e) from e


@router.get("/reservations/all", response_model=list[ReservationResponse])
def list_all_reservations(
    status_filter: Optional[ReservationStatus] = Query(
        None, alias="status", description="Only reservations with this status"
    ),
    room: Optional[str] = Query(None, description="Case-insensitive room name fragment"),
    user_id: str = Depends(get_current_user_id),
    store: ReservationStore = Depends(get_reservation_store),
) -> list[ReservationResponse]:
    """
    Return all non-cancelled reservations across users, optionally filtered.

    Lets guests see which dates other people have already taken.
    """
    try:
        reservations = queries.list_all_active(store)
        if status_filter is not None or room:
            rooms = queries.rooms_by_id(queries.list_rooms(store))
            reservations = queries.filter_reservations(
                reservations, rooms, status=status_filter, room_name=room
            )
        return [ReservationResponse.from_record(r) for r in reservations]
    except ReservationError as e:
        raise to_http_exception(e) from e


@router.get("/reservations/summary", response_model=ReservationSummaryResponse)
def reservation_summary(
    user_id: str = Depends(get_current_user_id),
    store: ReservationStore = Depends(get_reservation_store),
) -> ReservationSummaryResponse:
    """Counts of confirmed/pending bookings and guests across all non-cancelled reservations."""
    try:
        summary = queries.summarize(queries.list_all_active(store))
        return ReservationSummaryResponse(
            total=summary.total,
            confirmed=summary.confirmed,
            pending=summary.pending,
            active_guests=summary.active_guests,
        )
    except ReservationError as e:
        raise to_http_exception(e) from e


@router.get("/reservations/calendar", response_model=list[ReservationResponse])
def reservation_calendar(
    start_date: date = Query(..., description="First day of the window"),
    end_date: date = Query(..., description="Last day of the window"),
    user_id: str = Depends(get_current_user_id),
    store: ReservationStore = Depends(get_reservation_store),
) -> list[ReservationResponse]:
    """Return reservations whose stay lies entirely inside the window."""
    try:
        return [
            ReservationResponse.from_record(r)
            for r in queries.list_between(store, start_date, end_date)
        ]
    except ReservationError as e:
        raise to_http_exception(e) from e


@router.get("/reservations/{reservation_id}", response_model=ReservationResponse)
def get_reservation(
    reservation_id: int,
    user_id: str = Depends(get_current_user_id),
    manager: ReservationManager = Depends(get_reservation_manager),
) -> ReservationResponse:
    try:
        return ReservationResponse.from_record(manager.get(reservation_id))
    except ReservationError as e:
        raise to_http_exception(e) from e


@router.put("/reservations/{reservation_id}", response_model=ReservationResponse)
def update_reservation(
    reservation_id: int,
    payload: ReservationUpdatePayload,
    user_id: str = Depends(get_current_user_id),
    manager: ReservationManager = Depends(get_reservation_manager),
) -> ReservationResponse:
    """
    Edit dates, guest count or notes of the caller's upcoming reservation.

    Args:
        reservation_id: Reservation to edit
        payload: Fields to change; omitted fields keep their value
        user_id: Caller identity
        manager: Reservation lifecycle manager

    Returns:
        ReservationResponse: The updated reservation
    """
    try:
        if (payload.check_in_date is None) != (payload.check_out_date is None):
            raise HTTPException(
                status_code=status.HTTP_400_BAD_REQUEST,
                detail="check_in_date and check_out_date must be changed together",
            )

        new_range = None
        if payload.check_in_date is not None and payload.check_out_date is not None:
            new_range = DateRange(payload.check_in_date, payload.check_out_date)

        reservation = manager.edit(
            reservation_id,
            user_id,
            new_range=new_range,
            new_guests=payload.number_of_guests,
            new_notes=payload.notes,
        )
        return ReservationResponse.from_record(reservation)

    except ReservationError as e:
        logger.info(
            "reservation_update_rejected",
            reservation_id=reservation_id,
            user_id=user_id,
            reason=str(e),
        )
        raise to_http_exception(e) from e
    except HTTPException:
        raise
    except Exception as e:
        logger.exception("reservation_update_failed", reservation_id=reservation_id, error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")


@router.delete("/reservations/{reservation_id}", status_code=status.HTTP_200_OK)
def cancel_reservation(
    reservation_id: int,
    user_id: str = Depends(get_current_user_id),
    manager: ReservationManager = Depends(get_reservation_manager),
) -> dict[str, str]:
    """
    Cancel the caller's upcoming reservation.

    Returns:
        dict: Message confirming cancellation
    """
    try:
        manager.cancel(reservation_id, user_id)
        return {"message": f"Reservation {reservation_id} cancelled successfully"}

    except ReservationError as e:
        logger.info(
            "reservation_cancel_rejected",
            reservation_id=reservation_id,
            user_id=user_id,
            reason=str(e),
        )
        raise to_http_exception(e) from e
    except HTTPException:
        raise
    except Exception as e:
        logger.exception("reservation_cancel_failed", reservation_id=reservation_id, error=str(e))
        raise HTTPException(status_code=500, detail="Internal server error")
