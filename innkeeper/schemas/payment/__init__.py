from innkeeper.schemas.payment.payment_details import (
    CardDetails,
    CashDetails,
    PaymentDetails,
    TransferDetails,
)
from innkeeper.schemas.payment.payment_request import (
    PaymentCreate,
    PaymentFees,
    PaymentUpdate,
    RefundRequest,
)
from innkeeper.schemas.payment.payment_response import (
    LedgerSummaryResponse,
    PaymentResponse,
    ReservationPaymentsResponse,
)

__all__ = [
    "CardDetails",
    "CashDetails",
    "PaymentDetails",
    "TransferDetails",
    "PaymentCreate",
    "PaymentFees",
    "PaymentUpdate",
    "RefundRequest",
    "LedgerSummaryResponse",
    "PaymentResponse",
    "ReservationPaymentsResponse",
]
