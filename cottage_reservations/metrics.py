"""
Prometheus metrics for reservation lifecycle operations and availability checks.

Metrics are exposed via the /metrics endpoint for scraping by Prometheus.

Example:
    >>> from cottage_reservations.metrics import lifecycle_operations
    >>> lifecycle_operations.labels(operation="create", outcome="success").inc()
"""

from __future__ import annotations

from prometheus_client import Counter, Histogram

# =============================================================================
# Lifecycle Metrics
# =============================================================================

lifecycle_operations = Counter(
    "cottage_reservation_operations_total",
    "Total reservation lifecycle operations by outcome",
    ["operation", "outcome"],
)
"""
Counter for lifecycle operations.

Labels:
    operation: create, edit, cancel, set_status, complete
    outcome: success or the error class name (e.g. RoomUnavailableError)
"""

lifecycle_duration = Histogram(
    "cottage_reservation_operation_duration_seconds",
    "Duration of reservation lifecycle operations in seconds",
    ["operation"],
    buckets=(0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, float("inf")),
)

# =============================================================================
# Availability Metrics
# =============================================================================

availability_checks = Counter(
    "cottage_availability_checks_total",
    "Availability decisions made while booking",
    ["result"],
)
"""
Counter for availability decisions.

Labels:
    result: available, conflict, room_disabled
"""

room_lock_wait = Histogram(
    "cottage_room_lock_wait_seconds",
    "Time spent waiting for a per-room booking lock",
    buckets=(0.001, 0.005, 0.01, 0.05, 0.1, 0.5, 1.0, 5.0, float("inf")),
)

# =============================================================================
# Sweep Metrics
# =============================================================================

stays_completed = Counter(
    "cottage_stays_completed_total",
    "Reservations moved to COMPLETED by the completion sweep",
)
