from innkeeper.services.payment.payment_ledger_service import PaymentLedgerService
from innkeeper.services.payment.payment_service import PaymentService

__all__ = ["PaymentLedgerService", "PaymentService"]
