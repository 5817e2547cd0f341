"""
Reservation building-block schemas shared by requests and responses.

Stay dates are accepted as ISO strings or dates and parsed by the
service layer, so malformed dates surface as an invalid date range
rather than a generic request validation error.
"""

from datetime import date as Date
from decimal import Decimal
from typing import Optional, Union

from pydantic import Field

from innkeeper.schemas.common.base import BaseSchema

__all__ = [
    "StayDates",
    "StayDatesUpdate",
    "GuestCounts",
    "AdditionalGuest",
    "FeesInput",
]

DateInput = Union[Date, str]


class StayDates(BaseSchema):
    """Half-open stay window: the guest leaves on check_out_date."""

    check_in_date: DateInput = Field(..., description="First night of the stay")
    check_out_date: DateInput = Field(..., description="Departure day, not a night of the stay")


class StayDatesUpdate(BaseSchema):
    check_in_date: Optional[DateInput] = None
    check_out_date: Optional[DateInput] = None


class GuestCounts(BaseSchema):
    adults: int = Field(default=1, ge=0, le=50)
    children: int = Field(default=0, ge=0, le=50)


class AdditionalGuest(BaseSchema):
    first_name: str = Field(..., min_length=1, max_length=100)
    last_name: str = Field(..., min_length=1, max_length=100)
    age: Optional[int] = Field(default=None, ge=0, le=130)
    identification: Optional[str] = Field(default=None, max_length=100)


class FeesInput(BaseSchema):
    cleaning_fee: Decimal = Field(default=Decimal("0"), ge=0, max_digits=12, decimal_places=2)
    service_fee: Decimal = Field(default=Decimal("0"), ge=0, max_digits=12, decimal_places=2)
    extra_fee: Decimal = Field(default=Decimal("0"), ge=0, max_digits=12, decimal_places=2)
