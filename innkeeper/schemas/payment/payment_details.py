"""
Method-specific payment details as a tagged union keyed by `method`.

Each variant carries only the fields relevant to its payment method.
"""

from typing import Annotated, Literal, Optional, Union

from pydantic import Field

from innkeeper.models.base.enums import CardBrand
from innkeeper.schemas.common.base import BaseSchema

__all__ = ["CashDetails", "TransferDetails", "CardDetails", "PaymentDetails"]


class CashDetails(BaseSchema):
    method: Literal["cash"] = "cash"
    received_by: Optional[str] = Field(default=None, max_length=100)


class TransferDetails(BaseSchema):
    method: Literal["transfer"] = "transfer"
    transfer_reference: Optional[str] = Field(default=None, max_length=100)
    bank_name: Optional[str] = Field(default=None, max_length=100)


class CardDetails(BaseSchema):
    method: Literal["card"] = "card"
    card_last4: Optional[str] = Field(default=None, pattern=r"^\d{4}$")
    card_brand: Optional[CardBrand] = None
    gateway_transaction_id: Optional[str] = Field(default=None, max_length=100)


PaymentDetails = Annotated[
    Union[CashDetails, TransferDetails, CardDetails],
    Field(discriminator="method"),
]
