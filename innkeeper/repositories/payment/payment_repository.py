"""
Payment repository: ledger aggregation and payment listings.
"""

from decimal import Decimal
from typing import List
from uuid import UUID

from sqlalchemy import desc, exists, func, select

from innkeeper.models.base.enums import PaymentStatus
from innkeeper.models.payment import Payment
from innkeeper.repositories.base import TenantScopedRepository


class PaymentRepository(TenantScopedRepository[Payment]):
    model = Payment
    resource_name = "Payment"

    def sum_net_paid(self, reservation_id: UUID) -> Decimal:
        """Sum of (amount - refunded_amount) over the reservation's active paid payments."""
        stmt = select(
            func.coalesce(func.sum(Payment.amount - Payment.refunded_amount), 0)
        ).where(
            Payment.tenant_id == self.tenant_id,
            Payment.reservation_id == reservation_id,
            Payment.status == PaymentStatus.PAID,
            Payment.is_active,
        )
        return Decimal(str(self.db.scalar(stmt) or 0)).quantize(Decimal("0.01"))

    def list_for_reservation(self, reservation_id: UUID) -> List[Payment]:
        stmt = self._select(Payment.reservation_id == reservation_id).order_by(desc(Payment.payment_date))
        return list(self.db.scalars(stmt))

    def list_pending(self) -> List[Payment]:
        stmt = self._select(
            Payment.status.in_((PaymentStatus.PENDING, PaymentStatus.PARTIAL))
        ).order_by(desc(Payment.created_at))
        return list(self.db.scalars(stmt))

    def transaction_id_exists(self, transaction_id: str) -> bool:
        """Global check; transaction ids are unique across tenants."""
        return bool(self.db.scalar(select(exists().where(Payment.transaction_id == transaction_id))))
