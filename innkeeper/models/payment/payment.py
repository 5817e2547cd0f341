"""
Payment model: a monetary transaction recorded against one reservation.
"""

from datetime import datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Dict, Optional
from uuid import UUID

from sqlalchemy import (
    JSON,
    Boolean,
    CheckConstraint,
    DateTime,
    ForeignKey,
    Index,
    Numeric,
    String,
    Text,
    UniqueConstraint,
    Uuid,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship, validates

from innkeeper.core.exceptions import (
    AmountExceedsAvailableError,
    InvalidPaymentStateError,
    ValidationError,
)
from innkeeper.models.base.base_model import TimestampModel, enum_column_type, utcnow
from innkeeper.models.base.enums import PaymentMethod, PaymentStatus
from innkeeper.models.base.mixins import AuditMixin, SoftDeleteMixin, TenantMixin, UUIDMixin

if TYPE_CHECKING:
    from innkeeper.models.reservation.reservation import Reservation

__all__ = ["Payment", "TRANSACTION_ID_CONSTRAINT"]

TRANSACTION_ID_CONSTRAINT = "uq_payments_transaction_id"

ZERO = Decimal("0.00")


class Payment(UUIDMixin, TimestampModel, TenantMixin, SoftDeleteMixin, AuditMixin):
    """
    Payment with its refund sub-record.

    `details` holds the method-specific variant (cash, transfer or card)
    as a dict tagged with its method; the schema layer validates the
    variant before it is stored.
    """

    __tablename__ = "payments"

    reservation_id: Mapped[UUID] = mapped_column(
        Uuid, ForeignKey("reservations.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    transaction_id: Mapped[str] = mapped_column(String(40), nullable=False)

    amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False)
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="USD")
    method: Mapped[PaymentMethod] = mapped_column(
        enum_column_type(PaymentMethod, "payment_method"), nullable=False
    )
    status: Mapped[PaymentStatus] = mapped_column(
        enum_column_type(PaymentStatus, "payment_status"),
        nullable=False,
        default=PaymentStatus.PAID,
        index=True,
    )
    details: Mapped[Dict[str, Any]] = mapped_column(JSON, nullable=False, default=dict)

    # Fee breakdown
    processing_fee: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=ZERO)
    gateway_fee: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=ZERO)
    net_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=ZERO)

    payment_date: Mapped[datetime] = mapped_column(DateTime(timezone=True), nullable=False, default=utcnow)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Refund record
    is_refunded: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)
    refunded_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=ZERO)
    refund_reason: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    refunded_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    refunded_by: Mapped[Optional[UUID]] = mapped_column(Uuid, nullable=True)

    reservation: Mapped["Reservation"] = relationship(back_populates="payments")

    __table_args__ = (
        UniqueConstraint("transaction_id", name=TRANSACTION_ID_CONSTRAINT),
        CheckConstraint("amount > 0", name="ck_payments_amount_positive"),
        CheckConstraint(
            "refunded_amount >= 0 AND refunded_amount <= amount",
            name="ck_payments_refund_within_amount",
        ),
        Index("ix_payments_tenant_status", "tenant_id", "status"),
    )

    @validates("amount", "processing_fee", "gateway_fee")
    def validate_money(self, key: str, value) -> Decimal:
        value = Decimal(str(value))
        if value < 0:
            raise ValueError(f"{key} cannot be negative")
        return value

    @property
    def refundable_amount(self) -> Decimal:
        return Decimal(self.amount) - Decimal(self.refunded_amount or ZERO)

    @property
    def net_received(self) -> Decimal:
        """What this payment contributes to its reservation's ledger."""
        return self.refundable_amount

    def compute_net_amount(self) -> None:
        self.net_amount = (
            Decimal(self.amount)
            - Decimal(self.processing_fee or ZERO)
            - Decimal(self.gateway_fee or ZERO)
        )

    def refund(
        self,
        amount: Decimal,
        reason: Optional[str],
        actor_id: Optional[UUID],
        full_refund_status: PaymentStatus = PaymentStatus.PENDING,
    ) -> None:
        """
        Refund part or all of the payment.

        Only paid payments are refundable, and never beyond
        amount - refunded_amount. A full refund moves the payment to
        full_refund_status.
        """
        if self.status != PaymentStatus.PAID:
            raise InvalidPaymentStateError("Only paid payments can be refunded", self.status)

        amount = Decimal(amount)
        available = self.refundable_amount
        if amount <= 0:
            raise ValidationError("Refund amount must be greater than zero", field="amount")
        if amount > available:
            raise AmountExceedsAvailableError(
                amount, available, message=f"Refund amount {amount} exceeds refundable amount {available}"
            )

        self.is_refunded = True
        self.refunded_amount = Decimal(self.refunded_amount or ZERO) + amount
        self.refund_reason = reason
        self.refunded_at = utcnow()
        self.refunded_by = actor_id
        self.updated_by = actor_id

        if self.refunded_amount >= Decimal(self.amount):
            self.status = full_refund_status

    def __repr__(self) -> str:
        return f"<Payment(id={self.id}, transaction_id={self.transaction_id!r}, status={self.status})>"
