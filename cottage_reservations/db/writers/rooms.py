import logging
from typing import Any

from sqlalchemy import insert
from sqlalchemy.engine import Engine

from cottage_reservations.db.readers.rooms import count_rooms
from cottage_reservations.domain import RoomType
from cottage_reservations.models.rooms import Room

logger = logging.getLogger(__name__)

DEFAULT_ROOMS: list[dict[str, Any]] = [
    {
        "name": "Bedroom 1",
        "description": "Cozy bedroom with queen bed and garden view. Perfect for couples.",
        "max_occupancy": 2,
        "room_type": RoomType.BEDROOM_1.value,
    },
    {
        "name": "Bedroom 2",
        "description": "Spacious bedroom with twin beds and lake view. Great for friends or family.",
        "max_occupancy": 2,
        "room_type": RoomType.BEDROOM_2.value,
    },
    {
        "name": "Bedroom 3",
        "description": "Master bedroom with king bed, ensuite bathroom, and private balcony.",
        "max_occupancy": 2,
        "room_type": RoomType.BEDROOM_3.value,
    },
    {
        "name": "Entire Cottage",
        "description": (
            "Reserve the entire 3-bedroom cottage with full kitchen, living room, "
            "and outdoor deck. Perfect for groups and families."
        ),
        "max_occupancy": 6,
        "room_type": RoomType.ENTIRE_COTTAGE.value,
    },
]


def seed_rooms(engine: Engine, data: list[dict[str, Any]] = DEFAULT_ROOMS) -> int:
    """
    Insert the initial room inventory if the rooms table is empty.

    Args:
        engine (Engine): SQLAlchemy engine to open a transaction.
        data (list[dict[str, Any]]): Room rows to insert.

    Returns:
        int: Number of rooms inserted (0 when rooms already exist)
    """
    with engine.begin() as conn:
        if count_rooms(conn) > 0:
            logger.info("Rooms already present, skipping seed")
            return 0

        rows = [{**room, "is_available": room.get("is_available", True)} for room in data]
        conn.execute(insert(Room), rows)

    logger.info("Seeded %d rooms", len(rows))
    return len(rows)
