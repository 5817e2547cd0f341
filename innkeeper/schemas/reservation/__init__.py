from innkeeper.schemas.reservation.reservation_base import (
    AdditionalGuest,
    FeesInput,
    GuestCounts,
    StayDates,
    StayDatesUpdate,
)
from innkeeper.schemas.reservation.reservation_request import (
    AdditionalCharge,
    AvailabilityRequest,
    CancelRequest,
    CheckInRequest,
    CheckOutRequest,
    ReservationCreate,
    ReservationFilters,
    ReservationUpdate,
)
from innkeeper.schemas.reservation.reservation_response import (
    AvailableRoomResponse,
    PaymentSummaryResponse,
    PricingResponse,
    ReservationResponse,
    StayDatesResponse,
)

__all__ = [
    "AdditionalGuest",
    "FeesInput",
    "GuestCounts",
    "StayDates",
    "StayDatesUpdate",
    "AdditionalCharge",
    "AvailabilityRequest",
    "CancelRequest",
    "CheckInRequest",
    "CheckOutRequest",
    "ReservationCreate",
    "ReservationFilters",
    "ReservationUpdate",
    "AvailableRoomResponse",
    "PaymentSummaryResponse",
    "PricingResponse",
    "ReservationResponse",
    "StayDatesResponse",
]
