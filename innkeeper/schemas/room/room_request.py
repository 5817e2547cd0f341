from typing import Optional

from pydantic import Field

from innkeeper.models.base.enums import RoomStatus
from innkeeper.schemas.common.base import BaseSchema

__all__ = ["RoomStatusUpdate"]


class RoomStatusUpdate(BaseSchema):
    status: RoomStatus
    notes: Optional[str] = Field(default=None, max_length=2000)
