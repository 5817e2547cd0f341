"""
Room repository with the lookups used by reservation validation and
availability search.
"""

from typing import List, Optional
from uuid import UUID

from sqlalchemy import asc

from innkeeper.core.exceptions import ResourceNotFoundError
from innkeeper.models.base.enums import RoomStatus
from innkeeper.models.property import Room
from innkeeper.repositories.base import TenantScopedRepository


class RoomRepository(TenantScopedRepository[Room]):
    model = Room
    resource_name = "Room"

    def get_in_property(self, room_id: UUID, property_id: UUID, lock: bool = False) -> Room:
        """
        Active room belonging to both the tenant and the given property.

        With lock=True the room row is locked for the rest of the
        transaction, serializing writers that book the same room.
        """
        stmt = self._select(Room.id == room_id, Room.property_id == property_id)
        if lock:
            stmt = stmt.with_for_update().execution_options(populate_existing=True)
        room = self.db.scalars(stmt).first()
        if room is None:
            raise ResourceNotFoundError(self.resource_name, room_id)
        return room

    def find_bookable(self, property_id: Optional[UUID] = None, min_capacity: int = 1) -> List[Room]:
        """Active rooms not under maintenance with at least min_capacity places."""
        stmt = self._select(
            Room.status != RoomStatus.MAINTENANCE,
            (Room.capacity_adults + Room.capacity_children) >= min_capacity,
        )
        if property_id is not None:
            stmt = stmt.where(Room.property_id == property_id)
        stmt = stmt.order_by(asc(Room.property_id), asc(Room.name_or_number))
        return list(self.db.scalars(stmt))
