"""
Reservation model and its lifecycle state machine.

This module defines the central booking entity: the stay window, the
pricing snapshot, the payment summary and the transition methods that
move a reservation through pending -> confirmed -> checked_in ->
checked_out, or to cancelled.
"""

from datetime import date as Date, datetime
from decimal import Decimal
from typing import TYPE_CHECKING, Any, Dict, Iterable, List, Optional
from uuid import UUID

from sqlalchemy import (
    DDL,
    JSON,
    Boolean,
    CheckConstraint,
    Date as SQLDate,
    DateTime,
    ForeignKey,
    Index,
    Integer,
    Numeric,
    String,
    Text,
    UniqueConstraint,
    Uuid,
    event,
)
from sqlalchemy.orm import Mapped, mapped_column, relationship

from innkeeper.core.exceptions import InvalidStateTransitionError
from innkeeper.models.base.base_model import TimestampModel, enum_column_type, utcnow
from innkeeper.models.base.enums import (
    BookingSource,
    ReservationPaymentStatus,
    ReservationStatus,
)
from innkeeper.models.base.mixins import AuditMixin, SoftDeleteMixin, TenantMixin, UUIDMixin

if TYPE_CHECKING:
    from innkeeper.models.guest.guest import Guest
    from innkeeper.models.payment.payment import Payment
    from innkeeper.models.property.property import Property
    from innkeeper.models.property.room import Room

__all__ = [
    "Reservation",
    "RESERVATION_OVERLAP_CONSTRAINT",
    "CONFIRMATION_NUMBER_CONSTRAINT",
]

RESERVATION_OVERLAP_CONSTRAINT = "ex_reservations_room_overlap"
CONFIRMATION_NUMBER_CONSTRAINT = "uq_reservations_confirmation_number"

ZERO = Decimal("0.00")


class Reservation(UUIDMixin, TimestampModel, TenantMixin, SoftDeleteMixin, AuditMixin):
    """
    Core reservation entity.

    Status changes go through confirm/check_in/check_out/cancel, each of
    which raises InvalidStateTransitionError when called from a status it
    does not accept. Room and guest side effects are left to the services.
    """

    __tablename__ = "reservations"

    # References
    property_id: Mapped[UUID] = mapped_column(
        Uuid, ForeignKey("properties.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    room_id: Mapped[UUID] = mapped_column(
        Uuid, ForeignKey("rooms.id", ondelete="RESTRICT"), nullable=False, index=True
    )
    guest_id: Mapped[UUID] = mapped_column(
        Uuid, ForeignKey("guests.id", ondelete="RESTRICT"), nullable=False, index=True
    )

    confirmation_number: Mapped[str] = mapped_column(
        String(20), nullable=False, comment="Human-shareable unique code"
    )

    # Stay window, half-open [check_in_date, check_out_date)
    check_in_date: Mapped[Date] = mapped_column(SQLDate, nullable=False)
    check_out_date: Mapped[Date] = mapped_column(SQLDate, nullable=False)
    actual_check_in: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    actual_check_out: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)

    # Guests
    adults: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    children: Mapped[int] = mapped_column(Integer, nullable=False, default=0)
    additional_guests: Mapped[List[Dict[str, Any]]] = mapped_column(JSON, nullable=False, default=list)

    status: Mapped[ReservationStatus] = mapped_column(
        enum_column_type(ReservationStatus, "reservation_status"),
        nullable=False,
        default=ReservationStatus.PENDING,
        index=True,
    )

    # Pricing snapshot; room rates are tax inclusive so taxes stays zero
    room_rate: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=ZERO)
    nights: Mapped[int] = mapped_column(Integer, nullable=False, default=1)
    subtotal: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=ZERO)
    cleaning_fee: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=ZERO)
    service_fee: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=ZERO)
    extra_fee: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=ZERO)
    taxes: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=ZERO)
    total_price: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=ZERO)
    currency: Mapped[str] = mapped_column(String(3), nullable=False, default="USD")

    # Payment summary, maintained by the payment ledger
    payment_status: Mapped[ReservationPaymentStatus] = mapped_column(
        enum_column_type(ReservationPaymentStatus, "reservation_payment_status"),
        nullable=False,
        default=ReservationPaymentStatus.PENDING,
    )
    total_paid: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=ZERO)
    remaining_balance: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=ZERO)
    deposit_required: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=ZERO)
    deposit_paid: Mapped[bool] = mapped_column(Boolean, nullable=False, default=False)

    source: Mapped[BookingSource] = mapped_column(
        enum_column_type(BookingSource, "booking_source"),
        nullable=False,
        default=BookingSource.DIRECT,
    )
    special_requests: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)

    # Lifecycle stamps
    confirmed_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    confirmed_by: Mapped[Optional[UUID]] = mapped_column(Uuid, nullable=True)
    checked_in_by: Mapped[Optional[UUID]] = mapped_column(Uuid, nullable=True)
    checked_out_by: Mapped[Optional[UUID]] = mapped_column(Uuid, nullable=True)

    # Cancellation record
    cancelled_at: Mapped[Optional[datetime]] = mapped_column(DateTime(timezone=True), nullable=True)
    cancelled_by: Mapped[Optional[UUID]] = mapped_column(Uuid, nullable=True)
    cancellation_reason: Mapped[Optional[str]] = mapped_column(Text, nullable=True)
    refund_amount: Mapped[Decimal] = mapped_column(Numeric(12, 2), nullable=False, default=ZERO)

    room: Mapped["Room"] = relationship()
    guest: Mapped["Guest"] = relationship()
    reservation_property: Mapped["Property"] = relationship()
    payments: Mapped[List["Payment"]] = relationship(back_populates="reservation")

    __table_args__ = (
        UniqueConstraint("confirmation_number", name=CONFIRMATION_NUMBER_CONSTRAINT),
        CheckConstraint("check_out_date > check_in_date", name="ck_reservations_date_order"),
        CheckConstraint("adults >= 0 AND children >= 0", name="ck_reservations_guest_counts"),
        CheckConstraint("taxes = 0", name="ck_reservations_tax_inclusive"),
        Index("ix_reservations_room_window", "tenant_id", "room_id", "check_in_date", "check_out_date"),
        Index("ix_reservations_tenant_status", "tenant_id", "status"),
    )

    # ------------------------------------------------------------------
    # Pricing and payment summary
    # ------------------------------------------------------------------

    def apply_pricing(
        self,
        room_rate: Decimal,
        nights: int,
        subtotal: Decimal,
        cleaning_fee: Decimal,
        service_fee: Decimal,
        extra_fee: Decimal,
        total_price: Decimal,
        currency: str,
    ) -> None:
        self.room_rate = room_rate
        self.nights = nights
        self.subtotal = subtotal
        self.cleaning_fee = cleaning_fee
        self.service_fee = service_fee
        self.extra_fee = extra_fee
        self.taxes = ZERO
        self.total_price = total_price
        self.currency = currency

    def update_payment_summary(self, total_paid: Optional[Decimal] = None) -> None:
        """
        Recompute remaining balance and payment status.

        remaining = total_price - total_paid; nothing paid is pending, a
        balance at or below zero is paid, anything between is partial.
        """
        if total_paid is not None:
            self.total_paid = total_paid

        paid = Decimal(self.total_paid or ZERO)
        self.remaining_balance = Decimal(self.total_price or ZERO) - paid

        if paid <= 0:
            self.payment_status = ReservationPaymentStatus.PENDING
        elif self.remaining_balance <= 0:
            self.payment_status = ReservationPaymentStatus.PAID
        else:
            self.payment_status = ReservationPaymentStatus.PARTIAL

        required = Decimal(self.deposit_required or ZERO)
        self.deposit_paid = required > 0 and paid >= required

    # ------------------------------------------------------------------
    # State machine
    # ------------------------------------------------------------------

    def _require_status(self, action: str, *allowed: ReservationStatus) -> None:
        if self.status not in allowed:
            raise InvalidStateTransitionError(action, self.status, list(allowed))

    def _append_note(self, label: str, text: Optional[str]) -> None:
        if not text:
            return
        entry = f"{label}: {text}"
        self.notes = f"{self.notes}\n\n{entry}" if self.notes else entry

    def confirm(self, actor_id: Optional[UUID] = None) -> None:
        self._require_status("confirm", ReservationStatus.PENDING)
        self.status = ReservationStatus.CONFIRMED
        self.confirmed_at = utcnow()
        self.confirmed_by = actor_id
        self.updated_by = actor_id

    def start_stay(self, actor_id: Optional[UUID] = None, notes: Optional[str] = None) -> None:
        """Enter checked_in without a status check; used by direct check-in at creation."""
        self.status = ReservationStatus.CHECKED_IN
        self.actual_check_in = utcnow()
        self.checked_in_by = actor_id
        self.updated_by = actor_id
        self._append_note("Check-in", notes)

    def check_in(self, actor_id: Optional[UUID] = None, notes: Optional[str] = None) -> None:
        self._require_status("check in", ReservationStatus.CONFIRMED)
        self.start_stay(actor_id, notes)

    def check_out(
        self,
        actor_id: Optional[UUID] = None,
        notes: Optional[str] = None,
        additional_charges: Optional[Iterable[Decimal]] = None,
    ) -> Decimal:
        """
        Close the stay. Late charges are folded into extra_fee and
        total_price before the transition. Returns the charge total.
        """
        self._require_status("check out", ReservationStatus.CHECKED_IN)

        charges = sum((Decimal(c) for c in (additional_charges or [])), ZERO)
        if charges:
            self.extra_fee = Decimal(self.extra_fee or ZERO) + charges
            self.total_price = Decimal(self.total_price or ZERO) + charges

        self.status = ReservationStatus.CHECKED_OUT
        self.actual_check_out = utcnow()
        self.checked_out_by = actor_id
        self.updated_by = actor_id
        self._append_note("Check-out", notes)
        return charges

    def cancel(
        self,
        actor_id: Optional[UUID] = None,
        reason: Optional[str] = None,
        refund_amount: Optional[Decimal] = None,
    ) -> ReservationStatus:
        """Cancel from any non-terminal status. Returns the status held before."""
        self._require_status(
            "cancel",
            ReservationStatus.PENDING,
            ReservationStatus.CONFIRMED,
            ReservationStatus.CHECKED_IN,
        )
        previous = self.status
        self.status = ReservationStatus.CANCELLED
        self.cancelled_at = utcnow()
        self.cancelled_by = actor_id
        self.cancellation_reason = reason
        self.refund_amount = Decimal(refund_amount or ZERO)
        self.updated_by = actor_id
        return previous

    def __repr__(self) -> str:
        return (
            f"<Reservation(id={self.id}, confirmation_number={self.confirmation_number!r}, "
            f"status={self.status})>"
        )


# PostgreSQL guard against overlapping blocking reservations on one room.
# Other dialects rely on the room row lock taken by the reservation service.
event.listen(
    Reservation.__table__,
    "before_create",
    DDL("CREATE EXTENSION IF NOT EXISTS btree_gist").execute_if(dialect="postgresql"),
)
event.listen(
    Reservation.__table__,
    "after_create",
    DDL(
        f"ALTER TABLE reservations ADD CONSTRAINT {RESERVATION_OVERLAP_CONSTRAINT} "
        "EXCLUDE USING gist ("
        "tenant_id WITH =, "
        "room_id WITH =, "
        "daterange(check_in_date, check_out_date, '[)') WITH &&"
        ") WHERE (deleted_at IS NULL AND status IN ('pending', 'confirmed', 'checked_in'))"
    ).execute_if(dialect="postgresql"),
)
