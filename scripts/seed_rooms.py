"""Create the schema (if missing) and load the default room inventory."""

import structlog

from cottage_reservations.db.engine import engine
from cottage_reservations.db.writers.rooms import seed_rooms
from cottage_reservations.logging_config import setup_logging
from cottage_reservations.models import reservations, rooms  # noqa: F401
from cottage_reservations.models.base import Base

setup_logging()
logger = structlog.get_logger(__name__)


def main() -> None:
    """
    Insert Bedroom 1-3 and Entire Cottage when the rooms table is empty.

    Safe to run repeatedly; existing rooms are left untouched.
    """
    Base.metadata.create_all(engine)
    inserted = seed_rooms(engine)
    logger.info("seed_rooms_finished", inserted=inserted)


if __name__ == "__main__":
    main()
