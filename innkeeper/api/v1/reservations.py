"""
Reservation endpoints.
"""

from datetime import date
from typing import List, Optional
from uuid import UUID

from fastapi import APIRouter, Depends, Query, status

from innkeeper.api.deps import (
    get_lifecycle_service,
    get_reservation_service,
    require_permission,
    unwrap_result,
)
from innkeeper.models.base.enums import BookingSource, ReservationPaymentStatus, ReservationStatus
from innkeeper.schemas.common import MessageResponse, PaginatedResponse, PaginationMeta, SuccessResponse
from innkeeper.schemas.reservation import (
    AvailabilityRequest,
    AvailableRoomResponse,
    CancelRequest,
    CheckInRequest,
    CheckOutRequest,
    ReservationCreate,
    ReservationFilters,
    ReservationResponse,
    ReservationUpdate,
)
from innkeeper.services.common import CAN_MANAGE_RESERVATIONS, CallerIdentity
from innkeeper.services.reservation import ReservationLifecycleService, ReservationService

router = APIRouter(prefix="/reservations", tags=["Reservations"])

manage_reservations = require_permission(CAN_MANAGE_RESERVATIONS)


@router.post(
    "/check-availability",
    response_model=SuccessResponse[List[AvailableRoomResponse]],
    summary="Search rooms free for a stay",
)
def check_availability(
    payload: AvailabilityRequest,
    identity: CallerIdentity = Depends(manage_reservations),
    service: ReservationService = Depends(get_reservation_service),
):
    rooms = unwrap_result(service.search_available_rooms(payload))
    return SuccessResponse.create(
        f"{len(rooms)} room(s) available",
        [AvailableRoomResponse.from_availability(item) for item in rooms],
    )


@router.get(
    "/current",
    response_model=SuccessResponse[List[ReservationResponse]],
    summary="Guests currently in house",
)
def list_current_reservations(
    identity: CallerIdentity = Depends(manage_reservations),
    service: ReservationService = Depends(get_reservation_service),
):
    reservations = unwrap_result(service.list_current())
    return SuccessResponse.create("OK", [ReservationResponse.from_reservation(r) for r in reservations])


@router.get(
    "",
    response_model=PaginatedResponse[ReservationResponse],
    summary="List reservations",
)
def list_reservations(
    property_id: Optional[UUID] = Query(default=None, alias="propertyId"),
    room_id: Optional[UUID] = Query(default=None, alias="roomId"),
    guest_id: Optional[UUID] = Query(default=None, alias="guestId"),
    reservation_status: Optional[ReservationStatus] = Query(default=None, alias="status"),
    payment_status: Optional[ReservationPaymentStatus] = Query(default=None, alias="paymentStatus"),
    source: Optional[BookingSource] = Query(default=None),
    check_in_from: Optional[date] = Query(default=None, alias="checkInFrom"),
    check_in_to: Optional[date] = Query(default=None, alias="checkInTo"),
    confirmation_number: Optional[str] = Query(default=None, alias="confirmationNumber", max_length=20),
    page: int = Query(default=1, ge=1),
    page_size: int = Query(default=20, ge=1, le=100, alias="pageSize"),
    identity: CallerIdentity = Depends(manage_reservations),
    service: ReservationService = Depends(get_reservation_service),
):
    filters = ReservationFilters(
        property_id=property_id,
        room_id=room_id,
        guest_id=guest_id,
        status=reservation_status,
        payment_status=payment_status,
        source=source,
        check_in_from=check_in_from,
        check_in_to=check_in_to,
        confirmation_number=confirmation_number,
        page=page,
        page_size=page_size,
    )
    result = service.list_reservations(filters)
    reservations = unwrap_result(result)
    return PaginatedResponse(
        data=[ReservationResponse.from_reservation(r) for r in reservations],
        pagination=PaginationMeta.build(filters.page, filters.page_size, result.metadata["total"]),
    )


@router.post(
    "",
    response_model=SuccessResponse[ReservationResponse],
    status_code=status.HTTP_201_CREATED,
    summary="Create a reservation",
)
def create_reservation(
    payload: ReservationCreate,
    identity: CallerIdentity = Depends(manage_reservations),
    service: ReservationService = Depends(get_reservation_service),
):
    result = service.create_reservation(payload, actor_id=identity.user_id)
    reservation = unwrap_result(result)
    return SuccessResponse.create(result.message, ReservationResponse.from_reservation(reservation))


@router.get(
    "/{reservation_id}",
    response_model=SuccessResponse[ReservationResponse],
    summary="Get a reservation",
)
def get_reservation(
    reservation_id: UUID,
    identity: CallerIdentity = Depends(manage_reservations),
    service: ReservationService = Depends(get_reservation_service),
):
    reservation = unwrap_result(service.get_reservation(reservation_id))
    return SuccessResponse.create("OK", ReservationResponse.from_reservation(reservation))


@router.put(
    "/{reservation_id}",
    response_model=SuccessResponse[ReservationResponse],
    summary="Update a reservation",
)
def update_reservation(
    reservation_id: UUID,
    payload: ReservationUpdate,
    identity: CallerIdentity = Depends(manage_reservations),
    service: ReservationService = Depends(get_reservation_service),
):
    result = service.update_reservation(reservation_id, payload, actor_id=identity.user_id)
    reservation = unwrap_result(result)
    return SuccessResponse.create(result.message, ReservationResponse.from_reservation(reservation))


@router.delete(
    "/{reservation_id}",
    response_model=MessageResponse,
    summary="Delete a reservation",
)
def delete_reservation(
    reservation_id: UUID,
    identity: CallerIdentity = Depends(manage_reservations),
    service: ReservationService = Depends(get_reservation_service),
):
    result = service.delete_reservation(reservation_id, actor_id=identity.user_id)
    unwrap_result(result)
    return MessageResponse(message=result.message)


# ------------------------------------------------------------------ #
# Lifecycle
# ------------------------------------------------------------------ #
@router.put("/{reservation_id}/confirm", response_model=SuccessResponse[ReservationResponse])
def confirm_reservation(
    reservation_id: UUID,
    identity: CallerIdentity = Depends(manage_reservations),
    service: ReservationLifecycleService = Depends(get_lifecycle_service),
):
    result = service.confirm(reservation_id, actor_id=identity.user_id)
    reservation = unwrap_result(result)
    return SuccessResponse.create(result.message, ReservationResponse.from_reservation(reservation))


@router.put("/{reservation_id}/checkin", response_model=SuccessResponse[ReservationResponse])
def check_in_reservation(
    reservation_id: UUID,
    payload: Optional[CheckInRequest] = None,
    identity: CallerIdentity = Depends(manage_reservations),
    service: ReservationLifecycleService = Depends(get_lifecycle_service),
):
    payload = payload or CheckInRequest()
    result = service.check_in(reservation_id, actor_id=identity.user_id, notes=payload.notes)
    reservation = unwrap_result(result)
    return SuccessResponse.create(result.message, ReservationResponse.from_reservation(reservation))


@router.put("/{reservation_id}/checkout", response_model=SuccessResponse[ReservationResponse])
def check_out_reservation(
    reservation_id: UUID,
    payload: Optional[CheckOutRequest] = None,
    identity: CallerIdentity = Depends(manage_reservations),
    service: ReservationLifecycleService = Depends(get_lifecycle_service),
):
    payload = payload or CheckOutRequest()
    result = service.check_out(
        reservation_id,
        actor_id=identity.user_id,
        notes=payload.notes,
        additional_charges=payload.additional_charges,
    )
    reservation = unwrap_result(result)
    return SuccessResponse.create(result.message, ReservationResponse.from_reservation(reservation))


@router.put("/{reservation_id}/cancel", response_model=SuccessResponse[ReservationResponse])
def cancel_reservation(
    reservation_id: UUID,
    payload: Optional[CancelRequest] = None,
    identity: CallerIdentity = Depends(manage_reservations),
    service: ReservationLifecycleService = Depends(get_lifecycle_service),
):
    payload = payload or CancelRequest()
    result = service.cancel(
        reservation_id,
        actor_id=identity.user_id,
        reason=payload.reason,
        refund_amount=payload.refund_amount,
    )
    reservation = unwrap_result(result)
    return SuccessResponse.create(result.message, ReservationResponse.from_reservation(reservation))
