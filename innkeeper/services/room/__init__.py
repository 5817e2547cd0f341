from innkeeper.services.room.room_status_service import RoomStatusService

__all__ = ["RoomStatusService"]
