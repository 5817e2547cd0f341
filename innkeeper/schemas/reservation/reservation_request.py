"""
Reservation request schemas: create, update, lifecycle actions,
availability search and list filters.
"""

from datetime import date as Date
from decimal import Decimal
from typing import List, Optional
from uuid import UUID

from pydantic import Field

from innkeeper.models.base.enums import BookingSource, ReservationPaymentStatus, ReservationStatus
from innkeeper.schemas.common.base import BaseCreateSchema, BaseSchema, BaseUpdateSchema
from innkeeper.schemas.reservation.reservation_base import (
    AdditionalGuest,
    DateInput,
    FeesInput,
    GuestCounts,
    StayDates,
    StayDatesUpdate,
)

__all__ = [
    "ReservationCreate",
    "ReservationUpdate",
    "CheckInRequest",
    "AdditionalCharge",
    "CheckOutRequest",
    "CancelRequest",
    "AvailabilityRequest",
    "ReservationFilters",
]


class ReservationCreate(BaseCreateSchema):
    """
    New reservation for one room.

    With direct_check_in the reservation is created already checked in
    (walk-in guests), skipping pending and confirmed.
    """

    property_id: UUID
    room_id: UUID
    guest_id: UUID
    dates: StayDates
    guests: GuestCounts = Field(default_factory=GuestCounts)
    additional_guests: List[AdditionalGuest] = Field(default_factory=list)
    fees: Optional[FeesInput] = None
    source: BookingSource = BookingSource.DIRECT
    special_requests: Optional[str] = Field(default=None, max_length=2000)
    notes: Optional[str] = Field(default=None, max_length=5000)
    deposit_required: Decimal = Field(default=Decimal("0"), ge=0, max_digits=12, decimal_places=2)
    direct_check_in: bool = False


class ReservationUpdate(BaseUpdateSchema):
    dates: Optional[StayDatesUpdate] = None
    room_id: Optional[UUID] = None
    guests: Optional[GuestCounts] = None
    additional_guests: Optional[List[AdditionalGuest]] = None
    fees: Optional[FeesInput] = None
    source: Optional[BookingSource] = None
    special_requests: Optional[str] = Field(default=None, max_length=2000)
    notes: Optional[str] = Field(default=None, max_length=5000)
    deposit_required: Optional[Decimal] = Field(default=None, ge=0, max_digits=12, decimal_places=2)


class CheckInRequest(BaseSchema):
    notes: Optional[str] = Field(default=None, max_length=2000)


class AdditionalCharge(BaseSchema):
    description: str = Field(..., min_length=1, max_length=200)
    amount: Decimal = Field(..., gt=0, max_digits=12, decimal_places=2)


class CheckOutRequest(BaseSchema):
    notes: Optional[str] = Field(default=None, max_length=2000)
    additional_charges: List[AdditionalCharge] = Field(default_factory=list)


class CancelRequest(BaseSchema):
    reason: Optional[str] = Field(default=None, max_length=1000)
    refund_amount: Optional[Decimal] = Field(default=None, ge=0, max_digits=12, decimal_places=2)


class AvailabilityRequest(BaseSchema):
    check_in_date: DateInput
    check_out_date: DateInput
    property_id: Optional[UUID] = None
    adults: int = Field(default=1, ge=0, le=50)
    children: int = Field(default=0, ge=0, le=50)


class ReservationFilters(BaseSchema):
    property_id: Optional[UUID] = None
    room_id: Optional[UUID] = None
    guest_id: Optional[UUID] = None
    status: Optional[ReservationStatus] = None
    payment_status: Optional[ReservationPaymentStatus] = None
    source: Optional[BookingSource] = None
    check_in_from: Optional[Date] = None
    check_in_to: Optional[Date] = None
    confirmation_number: Optional[str] = Field(default=None, max_length=20)
    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=20, ge=1, le=100)
