"""
Payment response schemas.
"""

from datetime import datetime
from decimal import Decimal
from typing import Any, Dict, List, Optional
from uuid import UUID

from innkeeper.models.base.enums import PaymentMethod, PaymentStatus, ReservationPaymentStatus
from innkeeper.schemas.common.base import BaseResponseSchema

__all__ = ["PaymentResponse", "LedgerSummaryResponse", "ReservationPaymentsResponse"]


class PaymentResponse(BaseResponseSchema):
    id: UUID
    reservation_id: UUID
    transaction_id: str
    amount: Decimal
    currency: str
    method: PaymentMethod
    status: PaymentStatus
    details: Dict[str, Any]
    processing_fee: Decimal
    gateway_fee: Decimal
    net_amount: Decimal
    payment_date: datetime
    notes: Optional[str] = None
    is_refunded: bool
    refunded_amount: Decimal
    refund_reason: Optional[str] = None
    refunded_at: Optional[datetime] = None
    created_at: datetime


class LedgerSummaryResponse(BaseResponseSchema):
    total_price: Decimal
    total_paid: Decimal
    remaining_balance: Decimal
    payment_status: ReservationPaymentStatus
    deposit_required: Decimal
    deposit_paid: bool


class ReservationPaymentsResponse(BaseResponseSchema):
    payments: List[PaymentResponse]
    summary: LedgerSummaryResponse
