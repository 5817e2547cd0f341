"""
Guest model: a customer record scoped to a tenant.
"""

from decimal import Decimal
from typing import Optional

from sqlalchemy import Boolean, Index, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column, validates

from innkeeper.models.base.base_model import TimestampModel
from innkeeper.models.base.mixins import AuditMixin, SoftDeleteMixin, TenantMixin, UUIDMixin

__all__ = ["Guest"]


class Guest(UUIDMixin, TimestampModel, TenantMixin, SoftDeleteMixin, AuditMixin):
    """
    Guest with cumulative stay statistics.

    Statistics move only through record_stay, which also handles the
    automatic VIP promotion.
    """

    __tablename__ = "guests"

    first_name: Mapped[str] = mapped_column(String(100), nullable=False)
    last_name: Mapped[str] = mapped_column(String(100), nullable=False)
    email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    phone: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)
    nationality: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)

    identification_type: Mapped[Optional[str]] = mapped_column(
        String(30), nullable=True, comment="passport, national_id, drivers_license, other"
    )
    identification_number: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)

    total_stays: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    total_spent: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=Decimal("0.00"))
    loyalty_points: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    is_vip: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    is_blacklisted: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    __table_args__ = (
        Index("ix_guests_tenant_email", "tenant_id", "email"),
        Index("ix_guests_tenant_name", "tenant_id", "last_name", "first_name"),
    )

    @validates("email")
    def validate_email(self, key: str, value: Optional[str]) -> Optional[str]:
        if value:
            return value.strip().lower()
        return value

    @property
    def full_name(self) -> str:
        return f"{self.first_name} {self.last_name}"

    def record_stay(self, amount: Decimal, vip_stay_threshold: int, vip_spend_threshold: Decimal) -> None:
        """Count one more stay and its spend; promote to VIP past either threshold."""
        self.total_stays = (self.total_stays or 0) + 1
        self.total_spent = (self.total_spent or Decimal("0")) + Decimal(amount)

        if self.total_stays >= vip_stay_threshold or self.total_spent >= vip_spend_threshold:
            self.is_vip = True

    def __repr__(self) -> str:
        return f"<Guest(id={self.id}, name={self.full_name!r})>"
