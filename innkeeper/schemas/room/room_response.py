from datetime import datetime
from decimal import Decimal
from typing import Optional
from uuid import UUID

from innkeeper.models.base.enums import RoomStatus, RoomType
from innkeeper.schemas.common.base import BaseResponseSchema

__all__ = ["RoomResponse"]


class RoomResponse(BaseResponseSchema):
    id: UUID
    property_id: UUID
    name_or_number: str
    room_type: RoomType
    status: RoomStatus
    capacity_adults: int
    capacity_children: int
    base_price: Decimal
    currency: str
    last_cleaned_at: Optional[datetime] = None
    last_maintenance_at: Optional[datetime] = None
    maintenance_notes: Optional[str] = None
