"""Stay completion sweep: marks finished stays as COMPLETED."""

from __future__ import annotations

import dataclasses
from datetime import date

import structlog

from cottage_reservations.db.store import ReservationStore
from cottage_reservations.domain import ReservationStatus
from cottage_reservations.metrics import lifecycle_operations, stays_completed
from cottage_reservations.services.room_locks import RoomLocks, room_locks
from cottage_reservations.utils.dates import is_past_date, utc_now

logger = structlog.get_logger(__name__)


def complete_past_stays(
    store: ReservationStore,
    today: date,
    locks: RoomLocks = room_locks,
    dry_run: bool = False,
) -> int:
    """
    Move PENDING/CONFIRMED reservations whose check-out day has passed to COMPLETED.

    This runs outside the lifecycle manager as a periodic job. Each reservation
    is re-read under its room lock before being updated, so a concurrent edit
    is never overwritten.

    Args:
        store: Persistence boundary
        today: Reference date; check-out strictly before it counts as passed
        locks: Per-room lock registry
        dry_run: If True, only log what would change

    Returns:
        int: Number of reservations completed (or that would be, in dry run)
    """
    with store.transaction() as session:
        candidates = [
            r
            for r in session.find_non_cancelled()
            if r.is_active and is_past_date(r.check_out_date, today)
        ]

    logger.info("completion_sweep_started", candidates=len(candidates), dry_run=dry_run)

    if dry_run:
        return len(candidates)

    completed = 0
    for candidate in candidates:
        with locks.hold(candidate.room_id), store.transaction() as session:
            current = session.find_by_id(candidate.id)
            if current is None or not current.is_active:
                continue
            if not is_past_date(current.check_out_date, today):
                continue
            session.save(
                dataclasses.replace(
                    current, status=ReservationStatus.COMPLETED, updated_at=utc_now()
                )
            )
        completed += 1
        lifecycle_operations.labels(operation="complete", outcome="success").inc()

    stays_completed.inc(completed)
    logger.info("completion_sweep_finished", completed=completed)
    return completed
