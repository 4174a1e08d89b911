"""
Unit tests for structured logging setup.
"""

from __future__ import annotations

import json
import logging

import pytest
import structlog

from cottage_reservations.logging_config import (
    QUIET_LOGGERS,
    SERVICE_NAME,
    add_service_name,
    build_processors,
    setup_logging,
)


def _render(processors, method_name: str, event_dict: dict):
    result = event_dict
    for processor in processors:
        result = processor(None, method_name, result)
    return result


@pytest.mark.unit
def test_add_service_name_keeps_explicit_value() -> None:
    assert add_service_name(None, "info", {})["service"] == SERVICE_NAME
    assert add_service_name(None, "info", {"service": "cron"})["service"] == "cron"


@pytest.mark.unit
def test_json_chain_carries_request_id_and_service() -> None:
    """Test that a booking event rendered as JSON has the request context on it."""
    structlog.contextvars.bind_contextvars(request_id="req-1")
    try:
        line = _render(
            build_processors(json_output=True),
            "info",
            {"event": "reservation_created", "room_id": 1},
        )
    finally:
        structlog.contextvars.clear_contextvars()

    data = json.loads(line)
    assert data["event"] == "reservation_created"
    assert data["room_id"] == 1
    assert data["request_id"] == "req-1"
    assert data["service"] == SERVICE_NAME
    assert data["level"] == "info"
    assert "timestamp" in data


@pytest.mark.unit
def test_console_chain_ends_with_console_renderer() -> None:
    processors = build_processors(json_output=False)

    assert isinstance(processors[-1], structlog.dev.ConsoleRenderer)
    assert structlog.processors.format_exc_info not in processors


@pytest.mark.unit
def test_setup_logging_quiets_library_loggers() -> None:
    try:
        setup_logging("WARNING")

        assert isinstance(
            structlog.get_config()["processors"][-1], structlog.processors.JSONRenderer
        )
        for name in QUIET_LOGGERS:
            assert logging.getLogger(name).level == logging.WARNING
    finally:
        setup_logging()
