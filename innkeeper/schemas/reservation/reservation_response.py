"""
Reservation response schemas.
"""

from datetime import date as Date, datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional
from uuid import UUID

from innkeeper.models.base.enums import (
    BookingSource,
    ReservationPaymentStatus,
    ReservationStatus,
    RoomStatus,
    RoomType,
)
from innkeeper.models.reservation import Reservation
from innkeeper.schemas.common.base import BaseResponseSchema
from innkeeper.schemas.reservation.reservation_base import GuestCounts

__all__ = [
    "StayDatesResponse",
    "PricingResponse",
    "PaymentSummaryResponse",
    "ReservationResponse",
    "AvailableRoomResponse",
]


class StayDatesResponse(BaseResponseSchema):
    check_in_date: Date
    check_out_date: Date


class PricingResponse(BaseResponseSchema):
    room_rate: Decimal
    nights: int
    subtotal: Decimal
    cleaning_fee: Decimal
    service_fee: Decimal
    extra_fee: Decimal
    taxes: Decimal
    total_price: Decimal
    currency: str


class PaymentSummaryResponse(BaseResponseSchema):
    payment_status: ReservationPaymentStatus
    total_paid: Decimal
    remaining_balance: Decimal
    deposit_required: Decimal
    deposit_paid: bool


class ReservationResponse(BaseResponseSchema):
    id: UUID
    tenant_id: UUID
    property_id: UUID
    room_id: UUID
    guest_id: UUID
    confirmation_number: str
    status: ReservationStatus
    dates: StayDatesResponse
    guests: GuestCounts
    additional_guests: List[Dict[str, Any]]
    pricing: PricingResponse
    payment: PaymentSummaryResponse
    source: BookingSource
    special_requests: Optional[str] = None
    notes: Optional[str] = None
    actual_check_in: Optional[datetime] = None
    actual_check_out: Optional[datetime] = None
    confirmed_at: Optional[datetime] = None
    cancelled_at: Optional[datetime] = None
    cancellation_reason: Optional[str] = None
    refund_amount: Decimal
    created_at: datetime
    updated_at: datetime

    @classmethod
    def from_reservation(cls, reservation: Reservation) -> "ReservationResponse":
        return cls(
            id=reservation.id,
            tenant_id=reservation.tenant_id,
            property_id=reservation.property_id,
            room_id=reservation.room_id,
            guest_id=reservation.guest_id,
            confirmation_number=reservation.confirmation_number,
            status=reservation.status,
            dates=StayDatesResponse.model_validate(reservation),
            guests=GuestCounts(adults=reservation.adults, children=reservation.children),
            additional_guests=reservation.additional_guests or [],
            pricing=PricingResponse.model_validate(reservation),
            payment=PaymentSummaryResponse.model_validate(reservation),
            source=reservation.source,
            special_requests=reservation.special_requests,
            notes=reservation.notes,
            actual_check_in=reservation.actual_check_in,
            actual_check_out=reservation.actual_check_out,
            confirmed_at=reservation.confirmed_at,
            cancelled_at=reservation.cancelled_at,
            cancellation_reason=reservation.cancellation_reason,
            refund_amount=reservation.refund_amount,
            created_at=reservation.created_at,
            updated_at=reservation.updated_at,
        )


class AvailableRoomResponse(BaseResponseSchema):
    room_id: UUID
    property_id: UUID
    name_or_number: str
    room_type: RoomType
    status: RoomStatus
    capacity_adults: int
    capacity_children: int
    nights: int
    base_price: Decimal
    total_price: Decimal
    currency: str

    @classmethod
    def from_availability(cls, item) -> "AvailableRoomResponse":
        room = item.room
        return cls(
            room_id=room.id,
            property_id=room.property_id,
            name_or_number=room.name_or_number,
            room_type=room.room_type,
            status=room.status,
            capacity_adults=room.capacity_adults,
            capacity_children=room.capacity_children,
            nights=item.nights,
            base_price=item.base_price,
            total_price=item.total_price,
            currency=item.currency,
        )
