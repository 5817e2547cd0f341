from innkeeper.models.base.base_model import Base, BaseModel, TimestampModel, enum_column_type, utcnow
from innkeeper.models.base.enums import (
    BookingSource,
    CardBrand,
    PaymentMethod,
    PaymentStatus,
    ReservationPaymentStatus,
    ReservationStatus,
    RoomStatus,
    RoomType,
)
from innkeeper.models.base.mixins import AuditMixin, SoftDeleteMixin, TenantMixin, UUIDMixin

__all__ = [
    "Base",
    "BaseModel",
    "TimestampModel",
    "enum_column_type",
    "utcnow",
    "AuditMixin",
    "SoftDeleteMixin",
    "TenantMixin",
    "UUIDMixin",
    "BookingSource",
    "CardBrand",
    "PaymentMethod",
    "PaymentStatus",
    "ReservationPaymentStatus",
    "ReservationStatus",
    "RoomStatus",
    "RoomType",
]
