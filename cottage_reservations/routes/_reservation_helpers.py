"""
Internal helpers for reservation and room route handlers.

Maps reservation-core errors onto HTTP status codes and parses optional
date windows from query parameters.
"""

from __future__ import annotations

from datetime import date
from typing import Optional

from fastapi import HTTPException, status

from cottage_reservations.exceptions import (
    AuthorizationError,
    InvalidStateError,
    NotFoundError,
    ReservationError,
    RoomUnavailableError,
    UnavailableError,
    ValidationError,
)
from cottage_reservations.utils.dates import DateRange

_STATUS_BY_ERROR: list[tuple[type[ReservationError], int]] = [
    (ValidationError, status.HTTP_400_BAD_REQUEST),
    (AuthorizationError, status.HTTP_403_FORBIDDEN),
    (NotFoundError, status.HTTP_404_NOT_FOUND),
    (RoomUnavailableError, status.HTTP_409_CONFLICT),
    (InvalidStateError, status.HTTP_409_CONFLICT),
    (UnavailableError, status.HTTP_503_SERVICE_UNAVAILABLE),
]

RETRY_AFTER_SECONDS = "1"


def to_http_exception(error: ReservationError) -> HTTPException:
    """
    Translate a reservation-core error into an HTTPException.

    Args:
        error: Error raised by the lifecycle manager or query layer

    Returns:
        HTTPException: Exception carrying the matching status code and message
    """
    for error_type, status_code in _STATUS_BY_ERROR:
        if isinstance(error, error_type):
            headers = {"Retry-After": RETRY_AFTER_SECONDS} if error.retryable else None
            return HTTPException(status_code=status_code, detail=str(error), headers=headers)
    return HTTPException(
        status_code=status.HTTP_500_INTERNAL_SERVER_ERROR,
        detail="Internal server error",
    )


def optional_stay_or_400(start_date: Optional[date], end_date: Optional[date]) -> Optional[DateRange]:
    """
    Build a DateRange from optional query parameters.

    Returns None when neither date is given.

    Raises:
        HTTPException: 400 if only one date is given or the range is invalid
    """
    if start_date is None and end_date is None:
        return None
    if start_date is None or end_date is None:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="start_date and end_date must be provided together",
        )
    try:
        return DateRange(start_date, end_date)
    except ValidationError as e:
        raise to_http_exception(e) from e
