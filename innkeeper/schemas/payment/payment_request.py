"""
Payment request schemas.
"""

from datetime import datetime
from decimal import Decimal
from typing import Any, Optional
from uuid import UUID

from pydantic import Field, model_validator

from innkeeper.models.base.enums import PaymentMethod, PaymentStatus
from innkeeper.schemas.common.base import BaseCreateSchema, BaseSchema, BaseUpdateSchema
from innkeeper.schemas.payment.payment_details import PaymentDetails

__all__ = ["PaymentFees", "PaymentCreate", "PaymentUpdate", "RefundRequest"]


class PaymentFees(BaseSchema):
    processing_fee: Decimal = Field(default=Decimal("0"), ge=0, max_digits=12, decimal_places=2)
    gateway_fee: Decimal = Field(default=Decimal("0"), ge=0, max_digits=12, decimal_places=2)


class PaymentCreate(BaseCreateSchema):
    """
    Record a payment against a reservation.

    `details` may omit its `method` tag; it is taken from the payment's
    method. A tag that disagrees with the method is rejected.
    """

    reservation_id: UUID
    amount: Decimal = Field(..., gt=0, max_digits=12, decimal_places=2)
    method: PaymentMethod
    details: Optional[PaymentDetails] = None
    fees: PaymentFees = Field(default_factory=PaymentFees)
    currency: Optional[str] = Field(default=None, min_length=3, max_length=3)
    payment_date: Optional[datetime] = None
    notes: Optional[str] = Field(default=None, max_length=2000)

    @model_validator(mode="before")
    @classmethod
    def tag_details(cls, data: Any) -> Any:
        if not isinstance(data, dict):
            return data
        method = data.get("method")
        details = data.get("details")
        if isinstance(details, dict) and "method" not in details and method is not None:
            data = dict(data)
            data["details"] = {**details, "method": getattr(method, "value", method)}
        return data

    @model_validator(mode="after")
    def details_match_method(self) -> "PaymentCreate":
        if self.details is not None and self.details.method != self.method.value:
            raise ValueError("details.method must match the payment method")
        return self


class PaymentUpdate(BaseUpdateSchema):
    status: Optional[PaymentStatus] = None
    notes: Optional[str] = Field(default=None, max_length=2000)
    payment_date: Optional[datetime] = None


class RefundRequest(BaseSchema):
    amount: Decimal = Field(..., max_digits=12, decimal_places=2)
    reason: Optional[str] = Field(default=None, max_length=1000)
