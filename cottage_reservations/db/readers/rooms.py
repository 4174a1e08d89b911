from typing import Any, Optional

from sqlalchemy import func, select
from sqlalchemy.engine import Connection

from cottage_reservations.domain import Room, RoomType
from cottage_reservations.models.rooms import Room as RoomRow


def room_from_row(row: Any) -> Room:
    """Map a ``rooms`` row to a Room record."""
    return Room(
        id=row.id,
        name=row.name,
        description=row.description,
        max_occupancy=row.max_occupancy,
        room_type=RoomType(row.room_type) if row.room_type else None,
        is_available=bool(row.is_available),
    )


def get_room(conn: Connection, room_id: int) -> Optional[Room]:
    """
    Fetch a single room.

    Args:
        conn (Connection): An active SQLAlchemy database connection.
        room_id (int): Room ID

    Returns:
        Optional[Room]: The room, or None if it does not exist
    """
    row = conn.execute(select(RoomRow).where(RoomRow.id == room_id)).fetchone()
    return room_from_row(row) if row else None


def lock_room(conn: Connection, room_id: int) -> Optional[Room]:
    """
    Fetch a room with a row lock held until the transaction ends.

    On PostgreSQL this is ``SELECT ... FOR UPDATE`` and serializes bookings for
    the room across processes. SQLite ignores the clause; its single-writer
    model plus the in-process room lock give the same guarantee.
    """
    row = conn.execute(
        select(RoomRow).where(RoomRow.id == room_id).with_for_update()
    ).fetchone()
    return room_from_row(row) if row else None


def list_rooms(conn: Connection) -> list[Room]:
    """Return every room ordered by id."""
    rows = conn.execute(select(RoomRow).order_by(RoomRow.id)).fetchall()
    return [room_from_row(row) for row in rows]


def count_rooms(conn: Connection) -> int:
    return conn.execute(select(func.count()).select_from(RoomRow)).scalar_one()
