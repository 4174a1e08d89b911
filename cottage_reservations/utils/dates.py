"""
Calendar helpers shared by the availability engine and the lifecycle manager.

All "what day is it" decisions go through ``local_today`` so a single clock,
injectable in tests, drives every eligibility check.
"""

from __future__ import annotations

from dataclasses import dataclass
from datetime import date, datetime, timedelta, timezone
from typing import Callable, Optional
from zoneinfo import ZoneInfo

from cottage_reservations.config import BOOKING_TIMEZONE
from cottage_reservations.exceptions import InvalidRangeError

Clock = Callable[[], datetime]


def utc_now() -> datetime:
    """
    Return current UTC time as timezone-aware datetime.

    Returns:
        Timezone-aware datetime in UTC

    Example:
        >>> now = utc_now()
        >>> now.tzinfo
        datetime.timezone.utc
    """
    return datetime.now(timezone.utc)


def local_today(clock: Clock = utc_now, tz_name: Optional[str] = None) -> date:
    """
    Return the current calendar date in the booking timezone.

    Args:
        clock: Callable returning the current time (aware or naive UTC)
        tz_name: IANA timezone name, defaults to BOOKING_TIMEZONE

    Returns:
        date: Today's date as seen by the property
    """
    now = clock()
    if now.tzinfo is None:
        now = now.replace(tzinfo=timezone.utc)
    return now.astimezone(ZoneInfo(tz_name or BOOKING_TIMEZONE)).date()


def _as_date(value: date) -> date:
    # datetime is a subclass of date, so check it first
    if isinstance(value, datetime):
        return value.date()
    return value


def night_count(check_in: date, check_out: date) -> int:
    """
    Number of nights between check-in and check-out, rounded up to whole days.

    Args:
        check_in: Arrival date (or datetime)
        check_out: Departure date (or datetime), must be strictly later

    Returns:
        int: Whole nights, partial days count as a full night

    Raises:
        InvalidRangeError: If check_out is not after check_in
    """
    delta: timedelta = check_out - check_in
    if delta <= timedelta(0):
        raise InvalidRangeError(
            f"Check-out date {check_out} must be after check-in date {check_in}"
        )
    if delta.seconds or delta.microseconds:
        return delta.days + 1
    return delta.days


def ranges_overlap(a_start: date, a_end: date, b_start: date, b_end: date) -> bool:
    """
    Half-open interval overlap test.

    A check-out on day X does not clash with a check-in on day X.
    """
    return a_start < b_end and b_start < a_end


def is_past_date(value: date, reference_now: date) -> bool:
    """True if ``value`` falls on a day before ``reference_now`` (time of day ignored)."""
    return _as_date(value) < _as_date(reference_now)


@dataclass(frozen=True)
class DateRange:
    """
    Validated half-open stay [check_in, check_out).

    Raises InvalidRangeError on construction when check_out <= check_in.
    """

    check_in: date
    check_out: date

    def __post_init__(self) -> None:
        if self.check_out <= self.check_in:
            raise InvalidRangeError(
                f"Check-out date {self.check_out} must be after check-in date {self.check_in}"
            )

    @property
    def nights(self) -> int:
        return night_count(self.check_in, self.check_out)

    def overlaps(self, check_in: date, check_out: date) -> bool:
        return ranges_overlap(self.check_in, self.check_out, check_in, check_out)
