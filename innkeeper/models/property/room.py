"""
Room model: a bookable unit within a property.
"""

from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Optional
from uuid import UUID

from sqlalchemy import (
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from innkeeper.models.base.base_model import TimestampModel, enum_column_type, utcnow
from innkeeper.models.base.enums import RoomStatus, RoomType
from innkeeper.models.base.mixins import AuditMixin, SoftDeleteMixin, TenantMixin, UUIDMixin

if TYPE_CHECKING:
    from innkeeper.models.property.property import Property

__all__ = ["Room"]


class Room(UUIDMixin, TimestampModel, TenantMixin, SoftDeleteMixin, AuditMixin):
    """
    Room, suite or apartment with a nightly rate schedule.

    `status` is the housekeeping state; whether the room is free for a
    date range is decided by its reservations, not by this field.
    """

    __tablename__ = "rooms"

    property_id: Mapped[UUID] = mapped_column(
        Uuid,
        ForeignKey("properties.id", ondelete="RESTRICT"),
        nullable=False,
        index=True,
    )
    name_or_number: Mapped[str] = mapped_column(String(50), nullable=False)
    room_type: Mapped[RoomType] = mapped_column(
        enum_column_type(RoomType, "room_type"),
        nullable=False,
        default=RoomType.ROOM,
    )
    description: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Capacity
    capacity_adults: Mapped[int] = mapped_column(Integer, nullable=False, default=2)
    capacity_children: Mapped[int] = mapped_column(Integer, nullable=False, default=0)

    # Rate schedule (tax inclusive)
    base_price: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), nullable=False, comment="Nightly rate, tax inclusive"
    )
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="USD")
    extra_adult_price: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), nullable=False, default=Decimal("0.00"),
        comment="Per night, per adult above capacity",
    )
    extra_child_price: Mapped[Decimal] = mapped_column(
        Numeric(12, 2), nullable=False, default=Decimal("0.00"),
        comment="Per night, per child above capacity",
    )

    # Housekeeping
    status: Mapped[RoomStatus] = mapped_column(
        enum_column_type(RoomStatus, "room_status"),
        nullable=False,
        default=RoomStatus.AVAILABLE,
        index=True,
    )
    last_cleaned_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    last_maintenance_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    maintenance_notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    parent_property: Mapped["Property"] = relationship(back_populates="rooms")

    __table_args__ = (
        UniqueConstraint("tenant_id", "property_id", "name_or_number", name="uq_rooms_tenant_property_name"),
        CheckConstraint("capacity_adults >= 1", name="ck_rooms_capacity_adults"),
        CheckConstraint("capacity_children >= 0", name="ck_rooms_capacity_children"),
        CheckConstraint("base_price >= 0", name="ck_rooms_base_price"),
        Index("ix_rooms_tenant_property_status", "tenant_id", "property_id", "status"),
    )

    @validates("base_price", "extra_adult_price", "extra_child_price")
    def validate_prices(self, key: str, value) -> Decimal:
        value = Decimal(str(value))
        if value < 0:
            raise ValueError(f"{key} cannot be negative")
        return value

    @property
    def total_capacity(self) -> int:
        return self.capacity_adults + self.capacity_children

    def update_status(self, new_status: RoomStatus, notes: Optional[str] = None) -> None:
        """Set housekeeping status, stamping cleaning/maintenance times."""
        self.status = new_status
        if new_status == RoomStatus.CLEANING:
            self.last_cleaned_at = utcnow()
        elif new_status == RoomStatus.MAINTENANCE:
            self.last_maintenance_at = utcnow()
            if notes:
                self.maintenance_notes = notes

    def __repr__(self) -> str:
        return f"<Room(id={self.id}, name_or_number={self.name_or_number!r}, status={self.status})>"
