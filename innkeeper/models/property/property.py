"""
Property model: a physical site (hotel, guesthouse, rental) owned by a tenant.
"""

from typing import TYPE_CHECKING, List, Optional

from sqlalchemy import Boolean, CheckConstraint, Integer, String, Text
from sqlalchemy.orm import Mapped, mapped_column, relationship

from innkeeper.models.base.base_model import TimestampModel
from innkeeper.models.base.mixins import AuditMixin, SoftDeleteMixin, TenantMixin, UUIDMixin

if TYPE_CHECKING:
    from innkeeper.models.property.room import Room

__all__ = ["Property"]


class Property(UUIDMixin, TimestampModel, TenantMixin, SoftDeleteMixin, AuditMixin):
    """
    Physical site. Holds the booking-window policy applied to every
    reservation made against its rooms.
    """

    __tablename__ = "properties"

    name: Mapped[str] = mapped_column(String(200), nullable=False)
    property_type: Mapped[str] = mapped_column(String(50), nullable=False, default="hotel")
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    address_street: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    address_city: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    address_state: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    address_country: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    address_zip_code: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)

    check_in_time: Mapped[str] = mapped_column(
        String(5), nullable=False, default="15:00", comment="Standard check-in time (HH:MM)"
    )
    check_out_time: Mapped[str] = mapped_column(
        String(5), nullable=False, default="11:00", comment="Standard check-out time (HH:MM)"
    )
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="USD")
    allow_online_booking: Mapped[bool] = mapped_column(Boolean, nullable=False, default=True)
    advance_booking_days: Mapped[int] = mapped_column(
        Integer,
        nullable=False,
        default=365,
        comment="How far ahead a stay may start, in days",
    )

    rooms: Mapped[List["Room"]] = relationship(back_populates="parent_property")

    __table_args__ = (
        CheckConstraint(
            "advance_booking_days >= 0 AND advance_booking_days <= 365",
            name="ck_properties_advance_booking_days",
        ),
    )

    def __repr__(self) -> str:
        return f"<Property(id={self.id}, name={self.name!r})>"
