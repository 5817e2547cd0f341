"""
Payment service: record, query, update, delete and refund payments.

Every change that can move money re-derives the reservation's payment
summary through the ledger.
"""

from decimal import Decimal
from typing import Any, Dict, List, Optional
from uuid import UUID

from sqlalchemy.exc import IntegrityError
from sqlalchemy.orm import Session

from innkeeper.config.settings import Settings
from innkeeper.core.exceptions import (
    DuplicateResourceError,
    ExceedsRemainingBalanceError,
    InvalidPaymentStateError,
    RepositoryError,
)
from innkeeper.core.logging import log_execution_time
from innkeeper.models.base.enums import PaymentStatus
from innkeeper.models.payment import TRANSACTION_ID_CONSTRAINT, Payment
from innkeeper.models.reservation import Reservation
from innkeeper.repositories.payment import PaymentRepository
from innkeeper.repositories.reservation import ReservationRepository
from innkeeper.schemas.payment import PaymentCreate, PaymentUpdate, RefundRequest
from innkeeper.services.base import BaseService, ServiceResult
from innkeeper.services.payment.payment_ledger_service import PaymentLedgerService
from innkeeper.utils.code_generator import generate_transaction_id


class PaymentService(BaseService):
    """
    Payment operations against tenant reservations.
    """

    def __init__(self, db_session: Session, tenant_id: UUID, settings: Optional[Settings] = None):
        super().__init__(db_session, tenant_id, settings)
        self.payments = PaymentRepository(db_session, tenant_id)
        self.reservations = ReservationRepository(db_session, tenant_id)
        self.ledger = PaymentLedgerService(db_session, tenant_id)

    # -------------------------------------------------------------------------
    # Helpers
    # -------------------------------------------------------------------------

    @property
    def _full_refund_status(self) -> PaymentStatus:
        return PaymentStatus(self.settings.FULL_REFUND_PAYMENT_STATUS)

    def _new_transaction_id(self) -> str:
        attempts = self.settings.CODE_GENERATION_MAX_ATTEMPTS
        for _ in range(attempts):
            code = generate_transaction_id(self.settings.TRANSACTION_CODE_PREFIX)
            if not self.payments.transaction_id_exists(code):
                return code
        raise DuplicateResourceError("transaction id", attempts)

    def _insert(self, payment: Payment, actor_id: Optional[UUID]) -> None:
        attempts = self.settings.CODE_GENERATION_MAX_ATTEMPTS
        for _ in range(attempts):
            payment.transaction_id = self._new_transaction_id()
            try:
                with self.db.begin_nested():
                    self.payments.add(payment, actor_id)
                return
            except IntegrityError as e:
                message = str(e.orig)
                if "transaction_id" not in message and TRANSACTION_ID_CONSTRAINT not in message:
                    raise RepositoryError(f"Create Payment failed: {message}") from e
                self._logger.warning(
                    "Transaction id collision, regenerating",
                    extra={"transaction_id": payment.transaction_id},
                )
        raise DuplicateResourceError("transaction id", attempts)

    @staticmethod
    def _details_of(request: PaymentCreate) -> Dict[str, Any]:
        if request.details is None:
            return {"method": request.method.value}
        return request.details.model_dump(mode="json")

    @staticmethod
    def summary(reservation: Reservation) -> Dict[str, Any]:
        return {
            "total_price": reservation.total_price,
            "total_paid": reservation.total_paid,
            "remaining_balance": reservation.remaining_balance,
            "payment_status": reservation.payment_status,
            "deposit_required": reservation.deposit_required,
            "deposit_paid": reservation.deposit_paid,
        }

    # -------------------------------------------------------------------------
    # Create
    # -------------------------------------------------------------------------

    @log_execution_time()
    def create_payment(self, request: PaymentCreate, actor_id: Optional[UUID] = None) -> ServiceResult[Payment]:
        """
        Record a paid payment.

        The amount may not exceed the reservation's remaining balance at
        submission time. The reservation row is locked so concurrent
        payments are checked against each other's effect.
        """
        try:
            with self.transaction():
                reservation = self.reservations.get_for_update(request.reservation_id)
                self.ledger.reconcile(reservation)

                amount = Decimal(request.amount)
                if amount > reservation.remaining_balance:
                    raise ExceedsRemainingBalanceError(amount, reservation.remaining_balance)

                payment = Payment(
                    reservation_id=reservation.id,
                    amount=amount,
                    currency=request.currency or reservation.currency,
                    method=request.method,
                    status=PaymentStatus.PAID,
                    details=self._details_of(request),
                    processing_fee=request.fees.processing_fee,
                    gateway_fee=request.fees.gateway_fee,
                    notes=request.notes,
                )
                if request.payment_date is not None:
                    payment.payment_date = request.payment_date
                payment.compute_net_amount()

                self._insert(payment, actor_id)
                self.ledger.reconcile(reservation)

            self._log_operation(
                "Payment recorded",
                payment.id,
                transaction_id=payment.transaction_id,
                reservation_id=str(reservation.id),
                amount=str(payment.amount),
                payment_status=reservation.payment_status.value,
            )
            return ServiceResult.success(payment, message="Payment recorded successfully")
        except Exception as e:
            return self._handle_exception(
                e, "create payment", request.reservation_id, {"amount": str(request.amount)}
            )

    # -------------------------------------------------------------------------
    # Queries
    # -------------------------------------------------------------------------

    def get_payment(self, payment_id: UUID) -> ServiceResult[Payment]:
        try:
            payment = self.payments.find_by_id(payment_id)
            if payment is None:
                return ServiceResult.not_found("Payment", str(payment_id))
            return ServiceResult.success(payment)
        except Exception as e:
            return self._handle_exception(e, "get payment", payment_id)

    def list_for_reservation(self, reservation_id: UUID) -> ServiceResult[Dict[str, Any]]:
        """Payments of one reservation, newest first, with its ledger summary."""
        try:
            reservation = self.reservations.get_by_id(reservation_id)
            payments = self.payments.list_for_reservation(reservation.id)
            return ServiceResult.success({"payments": payments, "summary": self.summary(reservation)})
        except Exception as e:
            return self._handle_exception(e, "list reservation payments", reservation_id)

    def list_pending(self) -> ServiceResult[List[Payment]]:
        try:
            return ServiceResult.success(self.payments.list_pending())
        except Exception as e:
            return self._handle_exception(e, "list pending payments")

    # -------------------------------------------------------------------------
    # Update / Delete
    # -------------------------------------------------------------------------

    def update_payment(
        self,
        payment_id: UUID,
        request: PaymentUpdate,
        actor_id: Optional[UUID] = None,
    ) -> ServiceResult[Payment]:
        try:
            with self.transaction():
                payment = self.payments.get_for_update(payment_id)
                previous_status = payment.status

                if request.status == PaymentStatus.PAID and previous_status != PaymentStatus.PAID:
                    reservation = self.reservations.get_for_update(payment.reservation_id)
                    self.ledger.reconcile(reservation)
                    if payment.net_received > reservation.remaining_balance:
                        raise ExceedsRemainingBalanceError(payment.net_received, reservation.remaining_balance)

                if request.status is not None:
                    payment.status = request.status
                if request.notes is not None:
                    payment.notes = request.notes
                if request.payment_date is not None:
                    payment.payment_date = request.payment_date
                self.payments.save(payment, actor_id)

                if payment.status != previous_status:
                    self.ledger.reconcile(self.reservations.get_for_update(payment.reservation_id))

            self._log_operation(
                "Payment updated",
                payment.id,
                previous_status=previous_status.value,
                status=payment.status.value,
            )
            return ServiceResult.success(payment, message="Payment updated successfully")
        except Exception as e:
            return self._handle_exception(e, "update payment", payment_id)

    def delete_payment(self, payment_id: UUID, actor_id: Optional[UUID] = None) -> ServiceResult[bool]:
        """Tombstone a payment that is not paid; paid payments must be refunded instead."""
        try:
            with self.transaction():
                payment = self.payments.get_for_update(payment_id)
                if payment.status == PaymentStatus.PAID:
                    raise InvalidPaymentStateError(
                        "Paid payments cannot be deleted; refund them instead", payment.status
                    )
                self.payments.soft_delete(payment, actor_id)
                self.ledger.reconcile(self.reservations.get_for_update(payment.reservation_id))

            self._log_operation("Payment deleted", payment_id, transaction_id=payment.transaction_id)
            return ServiceResult.success(True, message="Payment deleted successfully")
        except Exception as e:
            return self._handle_exception(e, "delete payment", payment_id)

    # -------------------------------------------------------------------------
    # Refund
    # -------------------------------------------------------------------------

    @log_execution_time()
    def refund_payment(
        self,
        payment_id: UUID,
        request: RefundRequest,
        actor_id: Optional[UUID] = None,
    ) -> ServiceResult[Payment]:
        """
        Refund part or all of a paid payment.

        A full refund moves the payment to the configured full-refund
        status. The reservation is reconciled whatever the outcome.
        """
        try:
            with self.transaction():
                payment = self.payments.get_for_update(payment_id)
                reservation = self.reservations.get_for_update(payment.reservation_id)

                payment.refund(request.amount, request.reason, actor_id, self._full_refund_status)
                self.payments.save(payment, actor_id)
                self.ledger.reconcile(reservation)

            self._log_operation(
                "Payment refunded",
                payment.id,
                transaction_id=payment.transaction_id,
                refund_amount=str(request.amount),
                refunded_total=str(payment.refunded_amount),
                status=payment.status.value,
            )
            return ServiceResult.success(payment, message="Refund processed successfully")
        except Exception as e:
            return self._handle_exception(e, "refund payment", payment_id, {"amount": str(request.amount)})
