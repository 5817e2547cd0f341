from innkeeper.services.reservation.availability_service import (
    AvailabilityResult,
    ConflictSummary,
    RoomAvailability,
    RoomAvailabilityService,
)
from innkeeper.services.reservation.pricing_service import PriceQuote, PricingCalculator, StayFees
from innkeeper.services.reservation.reservation_lifecycle_service import ReservationLifecycleService
from innkeeper.services.reservation.reservation_service import ReservationService

__all__ = [
    "AvailabilityResult",
    "ConflictSummary",
    "RoomAvailability",
    "RoomAvailabilityService",
    "PriceQuote",
    "PricingCalculator",
    "StayFees",
    "ReservationLifecycleService",
    "ReservationService",
]
