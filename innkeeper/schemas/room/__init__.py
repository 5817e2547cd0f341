from innkeeper.schemas.room.room_request import RoomStatusUpdate
from innkeeper.schemas.room.room_response import RoomResponse

__all__ = ["RoomStatusUpdate", "RoomResponse"]
