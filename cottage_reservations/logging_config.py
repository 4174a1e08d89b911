from __future__ import annotations

import logging
import sys
from typing import Any, Callable, MutableMapping, Optional, cast

import structlog

from cottage_reservations.config import LOG_LEVEL

# Type alias for structlog processor
Processor = Callable[[Any, str, MutableMapping[str, Any]], Any]

SERVICE_NAME = "cottage-reservations"

# Chatty below WARNING; the booking events we care about come from our own loggers
QUIET_LOGGERS = (
    "sqlalchemy.engine",
    "sqlalchemy.pool",
    "alembic.runtime.migration",
    "uvicorn.access",
)


def add_service_name(
    logger: Any, method_name: str, event_dict: MutableMapping[str, Any]
) -> MutableMapping[str, Any]:
    """Tag every event so booking logs can be told apart in a shared aggregator."""
    event_dict.setdefault("service", SERVICE_NAME)
    return event_dict


def build_processors(json_output: bool) -> list[Processor]:
    """
    Processor chain shared by the API and the cron scripts.

    merge_contextvars must come first so the request_id bound by
    RequestIDMiddleware lands on every event of the request.
    """
    renderer: Processor = cast(
        Processor,
        (
            structlog.processors.JSONRenderer()
            if json_output
            else structlog.dev.ConsoleRenderer(colors=True)
        ),
    )
    processors: list[Processor] = [
        structlog.contextvars.merge_contextvars,
        add_service_name,
        structlog.processors.add_log_level,
        structlog.processors.StackInfoRenderer(),
        structlog.dev.set_exc_info,
        structlog.processors.TimeStamper(fmt="iso", utc=True),
    ]
    if json_output:
        # Tracebacks from logger.exception in the routes become a string field
        processors.append(structlog.processors.format_exc_info)
    processors.append(renderer)
    return processors


def setup_logging(level: Optional[str] = None) -> None:
    """
    Configures structured logging globally using structlog.

    Args:
        level: Overrides LOG_LEVEL (scripts pass "DEBUG" for a verbose run)

    Anything above DEBUG emits JSON for log aggregation. DEBUG switches to
    the human-readable console renderer.
    """
    level_name = (level or LOG_LEVEL).upper()

    logging.basicConfig(
        format="[%(asctime)s] %(levelname)s in %(name)s:%(lineno)d: %(message)s",
        datefmt="%Y-%m-%d %H:%M:%S",
        stream=sys.stdout,
        level=level_name,
    )
    for noisy_logger in QUIET_LOGGERS:
        logging.getLogger(noisy_logger).setLevel(logging.WARNING)

    structlog.configure(
        processors=build_processors(json_output=level_name != "DEBUG"),
        wrapper_class=structlog.make_filtering_bound_logger(logging.getLevelName(level_name)),
        context_class=dict,
        logger_factory=structlog.PrintLoggerFactory(),
        cache_logger_on_first_use=True,
    )
