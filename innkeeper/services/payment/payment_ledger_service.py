"""
Payment ledger reconciliation.

A reservation's payment summary is always derived from its payments,
never accumulated incrementally.
"""

from decimal import Decimal
from uuid import UUID

from sqlalchemy.orm import Session

from innkeeper.core.logging import get_logger
from innkeeper.models.reservation import Reservation
from innkeeper.repositories.payment import PaymentRepository

logger = get_logger(__name__)


class PaymentLedgerService:
    def __init__(self, db: Session, tenant_id: UUID):
        self.db = db
        self.payments = PaymentRepository(db, tenant_id)

    def reconcile(self, reservation: Reservation) -> Decimal:
        """
        Recompute total_paid, remaining_balance, payment_status and
        deposit_paid from the active paid payments. Returns total_paid.
        """
        # autoflush is off; staged payment changes must reach the sum
        self.db.flush()
        total_paid = self.payments.sum_net_paid(reservation.id)
        reservation.update_payment_summary(total_paid)
        self.db.flush()

        logger.debug(
            "Reservation ledger reconciled",
            extra={
                "reservation_id": str(reservation.id),
                "total_paid": str(total_paid),
                "remaining_balance": str(reservation.remaining_balance),
                "payment_status": reservation.payment_status.value,
            },
        )
        return total_paid
