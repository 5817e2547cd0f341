"""
Room housekeeping status.
"""

from typing import Optional
from uuid import UUID

from innkeeper.models.base.enums import RoomStatus
from innkeeper.models.property import Room
from innkeeper.repositories.property import RoomRepository
from innkeeper.services.base import BaseService, ServiceResult


class RoomStatusService(BaseService):
    """
    Sets room status, either as a reservation side effect or on request.
    """

    def __init__(self, db_session, tenant_id: UUID, settings=None):
        super().__init__(db_session, tenant_id, settings)
        self.rooms = RoomRepository(db_session, tenant_id)

    def set_status(self, room_id: UUID, status: RoomStatus, notes: Optional[str] = None) -> Room:
        """Apply the status without committing. Raises ResourceNotFoundError."""
        room = self.rooms.get_by_id(room_id)
        room.update_status(status, notes)
        self.rooms.save(room)
        return room

    def update_room_status(
        self,
        room_id: UUID,
        status: RoomStatus,
        notes: Optional[str] = None,
        actor_id: Optional[UUID] = None,
    ) -> ServiceResult[Room]:
        try:
            with self.transaction():
                room = self.set_status(room_id, status, notes)
                room.updated_by = actor_id
            self._log_operation("Room status updated", room_id, status=status.value)
            return ServiceResult.success(room, message="Room status updated successfully")
        except Exception as e:
            return self._handle_exception(e, "update room status", room_id)
