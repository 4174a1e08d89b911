"""
Authoritative input checks for reservation fields.

The browser repeats some of these for UX, but only these results count.
"""

from __future__ import annotations

import re
from typing import Optional

from cottage_reservations.config import MAX_GUESTS_PER_RESERVATION, NOTES_MAX_LENGTH
from cottage_reservations.domain import Room
from cottage_reservations.exceptions import ValidationError

_SCRIPT_PATTERN = re.compile(
    r"<script|</script|javascript:|vbscript:|onload=|onerror=|<iframe|<object|<embed",
    re.IGNORECASE,
)
_HTML_TAG_PATTERN = re.compile(r"<[^>]+>")


def validate_guest_count(guests: int, room: Room) -> None:
    """
    Raise ValidationError unless 1 <= guests <= min(room.max_occupancy, global cap).

    Args:
        guests: Requested number of guests
        room: Room being booked
    """
    # bool is an int subclass; True must not pass as one guest
    if isinstance(guests, bool) or not isinstance(guests, int):
        raise ValidationError("Number of guests must be a whole number")
    if guests < 1:
        raise ValidationError("Number of guests must be at least 1")
    if guests > MAX_GUESTS_PER_RESERVATION:
        raise ValidationError(
            f"Number of guests cannot exceed {MAX_GUESTS_PER_RESERVATION}"
        )
    if guests > room.max_occupancy:
        raise ValidationError(
            f"Number of guests cannot exceed {room.max_occupancy} for {room.name}"
        )


def clean_notes(notes: Optional[str]) -> Optional[str]:
    """
    Trim notes, strip HTML tags and reject script payloads.

    Returns:
        Optional[str]: Cleaned notes, or None when empty

    Raises:
        ValidationError: If notes are too long or contain script content
    """
    if notes is None:
        return None
    if _SCRIPT_PATTERN.search(notes):
        raise ValidationError("Notes contain potentially dangerous script content")

    cleaned = _HTML_TAG_PATTERN.sub("", notes).strip()
    if len(cleaned) > NOTES_MAX_LENGTH:
        raise ValidationError(f"Notes cannot exceed {NOTES_MAX_LENGTH} characters")
    return cleaned or None
