"""
Enumerations shared by models, schemas and services.

Reservation lifecycle status and payment status are deliberately separate
types even where their member names overlap.
"""

from enum import Enum


class ReservationStatus(str, Enum):
    """Reservation lifecycle states."""

    PENDING = "pending"
    CONFIRMED = "confirmed"
    CHECKED_IN = "checked_in"
    CHECKED_OUT = "checked_out"
    CANCELLED = "cancelled"

    @classmethod
    def blocking(cls) -> tuple["ReservationStatus", ...]:
        """Statuses that hold a room for their date range."""
        return (cls.PENDING, cls.CONFIRMED, cls.CHECKED_IN)

    @property
    def is_terminal(self) -> bool:
        return self in (ReservationStatus.CHECKED_OUT, ReservationStatus.CANCELLED)


class ReservationPaymentStatus(str, Enum):
    """Payment summary of a reservation, derived from its ledger."""

    PENDING = "pending"
    PARTIAL = "partial"
    PAID = "paid"


class PaymentStatus(str, Enum):
    """Status of an individual payment record."""

    PENDING = "pending"
    PARTIAL = "partial"
    PAID = "paid"
    REFUNDED = "refunded"


class PaymentMethod(str, Enum):
    CASH = "cash"
    TRANSFER = "transfer"
    CARD = "card"


class CardBrand(str, Enum):
    VISA = "visa"
    MASTERCARD = "mastercard"
    AMEX = "amex"
    DISCOVER = "discover"
    OTHER = "other"


class RoomStatus(str, Enum):
    AVAILABLE = "available"
    OCCUPIED = "occupied"
    MAINTENANCE = "maintenance"
    CLEANING = "cleaning"


class RoomType(str, Enum):
    ROOM = "room"
    SUITE = "suite"
    APARTMENT = "apartment"


class BookingSource(str, Enum):
    """Channel a reservation was taken through."""

    DIRECT = "direct"
    BOOKING_COM = "booking_com"
    AIRBNB = "airbnb"
    EXPEDIA = "expedia"
    PHONE = "phone"
    WALK_IN = "walk_in"
    OTHER = "other"


__all__ = [
    "ReservationStatus",
    "ReservationPaymentStatus",
    "PaymentStatus",
    "PaymentMethod",
    "CardBrand",
    "RoomStatus",
    "RoomType",
    "BookingSource",
]
