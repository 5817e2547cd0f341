"""
Room endpoints.
"""

from uuid import UUID

from fastapi import APIRouter, Depends

from innkeeper.api.deps import get_room_status_service, require_permission, unwrap_result
from innkeeper.schemas.common import SuccessResponse
from innkeeper.schemas.room import RoomResponse, RoomStatusUpdate
from innkeeper.services.common import CAN_MANAGE_ROOMS, CallerIdentity
from innkeeper.services.room import RoomStatusService

router = APIRouter(prefix="/rooms", tags=["Rooms"])


@router.put("/{room_id}/status", response_model=SuccessResponse[RoomResponse])
def update_room_status(
    room_id: UUID,
    payload: RoomStatusUpdate,
    identity: CallerIdentity = Depends(require_permission(CAN_MANAGE_ROOMS)),
    service: RoomStatusService = Depends(get_room_status_service),
):
    result = service.update_room_status(room_id, payload.status, payload.notes, actor_id=identity.user_id)
    room = unwrap_result(result)
    return SuccessResponse.create(result.message, RoomResponse.model_validate(room))
