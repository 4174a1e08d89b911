from typing import Optional

from pydantic import BaseModel

from cottage_reservations.domain import Room, RoomType


class RoomResponse(BaseModel):
    """Public view of a room."""

    id: int
    name: str
    description: Optional[str] = None
    max_occupancy: int
    room_type: Optional[RoomType] = None
    is_available: bool

    @classmethod
    def from_record(cls, room: Room) -> "RoomResponse":
        return cls(
            id=room.id,
            name=room.name,
            description=room.description,
            max_occupancy=room.max_occupancy,
            room_type=room.room_type,
            is_available=room.is_available,
        )
