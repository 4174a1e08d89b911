"""
Error classes raised by the reservation core.

The core only classifies failures. Translating them into HTTP responses or
user-facing messages is left to the routes layer.
"""

from __future__ import annotations


class ReservationError(Exception):
    """Base class for every error raised by the reservation core."""

    retryable = False


class ValidationError(ReservationError):
    """Malformed input: bad dates, guest count out of range, unsafe notes."""


class InvalidRangeError(ValidationError):
    """Check-out is not strictly after check-in."""


class RoomUnavailableError(ReservationError):
    """The room is disabled or already booked for an overlapping range."""


class NotFoundError(ReservationError):
    """Unknown room or reservation id."""


class AuthorizationError(ReservationError):
    """Requester does not own the reservation they tried to change."""


class InvalidStateError(ReservationError):
    """Reservation is terminal or no longer eligible for the operation."""


class UnavailableError(ReservationError):
    """
    Transient infrastructure failure (lock or database timeout).

    The only error class a caller may retry, ideally with backoff.
    """

    retryable = True
