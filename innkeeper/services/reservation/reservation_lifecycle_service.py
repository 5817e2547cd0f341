"""
Reservation lifecycle: confirm, check-in, check-out and cancel.

The status change and the payment summary commit together. Room status
and guest statistics follow as best-effort side effects, each in its own
savepoint: a failing side effect is logged and does not undo the
transition.
"""

from decimal import Decimal
from typing import Iterable, Optional
from uuid import UUID

from sqlalchemy.orm import Session

from innkeeper.config.settings import Settings
from innkeeper.models.base.enums import ReservationStatus, RoomStatus
from innkeeper.models.reservation import Reservation
from innkeeper.repositories.reservation import ReservationRepository
from innkeeper.schemas.reservation import AdditionalCharge
from innkeeper.services.base import BaseService, ServiceResult
from innkeeper.services.guest import GuestStatsService
from innkeeper.services.payment.payment_ledger_service import PaymentLedgerService
from innkeeper.services.room import RoomStatusService


class ReservationLifecycleService(BaseService):
    """
    State transitions of existing reservations.

    Transition rules live on the Reservation model; this service loads
    the row under lock, applies the transition, runs its side effects
    and commits.
    """

    def __init__(self, db_session: Session, tenant_id: UUID, settings: Optional[Settings] = None):
        super().__init__(db_session, tenant_id, settings)
        self.reservations = ReservationRepository(db_session, tenant_id)
        self.ledger = PaymentLedgerService(db_session, tenant_id)
        self.room_status = RoomStatusService(db_session, tenant_id, self.settings)
        self.guest_stats = GuestStatsService(db_session, tenant_id, self.settings)

    # -------------------------------------------------------------------------
    # Transitions
    # -------------------------------------------------------------------------

    def confirm(self, reservation_id: UUID, actor_id: Optional[UUID] = None) -> ServiceResult[Reservation]:
        try:
            with self.transaction():
                reservation = self.reservations.get_for_update(reservation_id)
                reservation.confirm(actor_id)
                self._finish(reservation, actor_id)

            self._log_operation(
                "Reservation confirmed",
                reservation.id,
                confirmation_number=reservation.confirmation_number,
            )
            return ServiceResult.success(reservation, message="Reservation confirmed successfully")
        except Exception as e:
            return self._handle_exception(e, "confirm reservation", reservation_id)

    def check_in(
        self,
        reservation_id: UUID,
        actor_id: Optional[UUID] = None,
        notes: Optional[str] = None,
    ) -> ServiceResult[Reservation]:
        """Check in a confirmed reservation; the room becomes occupied."""
        try:
            with self.transaction():
                reservation = self.reservations.get_for_update(reservation_id)
                reservation.check_in(actor_id, notes)
                self._finish(reservation, actor_id)
                self.run_check_in_side_effects(reservation)

            self._log_operation(
                "Guest checked in",
                reservation.id,
                confirmation_number=reservation.confirmation_number,
                room_id=str(reservation.room_id),
            )
            return ServiceResult.success(reservation, message="Guest checked in successfully")
        except Exception as e:
            return self._handle_exception(e, "check in reservation", reservation_id)

    def check_out(
        self,
        reservation_id: UUID,
        actor_id: Optional[UUID] = None,
        notes: Optional[str] = None,
        additional_charges: Optional[Iterable[AdditionalCharge]] = None,
    ) -> ServiceResult[Reservation]:
        """
        Check out a checked-in reservation.

        Additional charges are added to the extra fee and the total before
        the transition, so the remaining balance grows by their sum. The
        room moves to cleaning.
        """
        charges = list(additional_charges or [])
        try:
            with self.transaction():
                reservation = self.reservations.get_for_update(reservation_id)
                charged = reservation.check_out(actor_id, notes, [c.amount for c in charges])
                self._finish(reservation, actor_id)
                self._run_side_effect(
                    "room_status_cleaning",
                    reservation.id,
                    lambda: self.room_status.set_status(reservation.room_id, RoomStatus.CLEANING),
                )

            self._log_operation(
                "Guest checked out",
                reservation.id,
                confirmation_number=reservation.confirmation_number,
                additional_charges=str(charged),
                charge_descriptions=[c.description for c in charges],
            )
            return ServiceResult.success(reservation, message="Guest checked out successfully")
        except Exception as e:
            return self._handle_exception(e, "check out reservation", reservation_id)

    def cancel(
        self,
        reservation_id: UUID,
        actor_id: Optional[UUID] = None,
        reason: Optional[str] = None,
        refund_amount: Optional[Decimal] = None,
    ) -> ServiceResult[Reservation]:
        """
        Cancel a pending, confirmed or checked-in reservation.

        A room held by a confirmed or checked-in reservation is released
        back to available. refund_amount is recorded on the reservation
        only; money moves through payment refunds.
        """
        try:
            with self.transaction():
                reservation = self.reservations.get_for_update(reservation_id)
                previous = reservation.cancel(actor_id, reason, refund_amount)
                self._finish(reservation, actor_id)

                if previous in (ReservationStatus.CONFIRMED, ReservationStatus.CHECKED_IN):
                    self._run_side_effect(
                        "room_status_available",
                        reservation.id,
                        lambda: self.room_status.set_status(reservation.room_id, RoomStatus.AVAILABLE),
                    )

            self._log_operation(
                "Reservation cancelled",
                reservation.id,
                confirmation_number=reservation.confirmation_number,
                previous_status=previous.value,
            )
            return ServiceResult.success(reservation, message="Reservation cancelled successfully")
        except Exception as e:
            return self._handle_exception(e, "cancel reservation", reservation_id)

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    def run_check_in_side_effects(self, reservation: Reservation) -> None:
        """Room to occupied and one more stay on the guest's record."""
        self._run_side_effect(
            "room_status_occupied",
            reservation.id,
            lambda: self.room_status.set_status(reservation.room_id, RoomStatus.OCCUPIED),
        )
        self._run_side_effect(
            "guest_stay_statistics",
            reservation.id,
            lambda: self.guest_stats.record_stay(reservation.guest_id, reservation.total_price),
        )

    def run_room_move_side_effects(self, reservation: Reservation, previous_room_id: UUID) -> None:
        """A checked-in guest changed rooms: the old one needs cleaning."""
        self._run_side_effect(
            "room_status_cleaning",
            reservation.id,
            lambda: self.room_status.set_status(previous_room_id, RoomStatus.CLEANING),
        )
        self._run_side_effect(
            "room_status_occupied",
            reservation.id,
            lambda: self.room_status.set_status(reservation.room_id, RoomStatus.OCCUPIED),
        )

    def _finish(self, reservation: Reservation, actor_id: Optional[UUID]) -> None:
        self.reservations.save(reservation, actor_id)
        self.ledger.reconcile(reservation)
