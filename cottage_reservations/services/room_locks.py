"""
Per-room mutual exclusion for booking writes.

Strategy:
- One threading.Lock per room id, created lazily
- The registry itself is guarded by a separate lock
- Acquisition is bounded; a timeout surfaces as UnavailableError

Rooms never share a lock, so bookings for different rooms run in parallel.
"""

from __future__ import annotations

import threading
import time
from contextlib import contextmanager
from typing import Iterator

import structlog

from cottage_reservations.config import ROOM_LOCK_TIMEOUT_SECONDS
from cottage_reservations.exceptions import UnavailableError
from cottage_reservations.metrics import room_lock_wait

logger = structlog.get_logger(__name__)


class RoomLocks:
    """
    Registry of per-room locks.

    Example:
        >>> locks = RoomLocks(timeout_seconds=2)
        >>> with locks.hold(3):
        ...     ...  # read active reservations for room 3, then write
    """

    def __init__(self, timeout_seconds: float = ROOM_LOCK_TIMEOUT_SECONDS):
        self.timeout = timeout_seconds
        self._locks: dict[int, threading.Lock] = {}
        self._registry_lock = threading.Lock()

    def _lock_for(self, room_id: int) -> threading.Lock:
        with self._registry_lock:
            lock = self._locks.get(room_id)
            if lock is None:
                lock = threading.Lock()
                self._locks[room_id] = lock
            return lock

    @contextmanager
    def hold(self, room_id: int) -> Iterator[None]:
        """
        Hold the lock for ``room_id`` for the duration of the block.

        Raises:
            UnavailableError: If the lock is not acquired within the timeout
        """
        lock = self._lock_for(room_id)
        started = time.monotonic()
        acquired = lock.acquire(timeout=self.timeout)
        room_lock_wait.observe(time.monotonic() - started)

        if not acquired:
            logger.warning("room_lock_timeout", room_id=room_id, timeout=self.timeout)
            raise UnavailableError(f"Room {room_id} is busy, please retry")

        try:
            yield
        finally:
            lock.release()

    def size(self) -> int:
        with self._registry_lock:
            return len(self._locks)


# Process-wide registry shared by every ReservationManager
room_locks = RoomLocks()
