"""
Reservation pricing.

Room rates are tax inclusive: the quote never adds tax on top of the
subtotal and always reports taxes as zero.
"""

from dataclasses import dataclass, field
from datetime import date
from decimal import ROUND_HALF_UP, Decimal
from typing import Any, Dict

from innkeeper.models.property import Room
from innkeeper.utils.datetime_utils import DateTimeHelper

CENT = Decimal("0.01")
ZERO = Decimal("0.00")


def _money(value) -> Decimal:
    return Decimal(str(value)).quantize(CENT, rounding=ROUND_HALF_UP)


@dataclass(frozen=True)
class StayFees:
    """Flat fees added on top of the room cost."""

    cleaning: Decimal = ZERO
    service: Decimal = ZERO
    extra: Decimal = ZERO

    @property
    def total(self) -> Decimal:
        return _money(self.cleaning) + _money(self.service) + _money(self.extra)


@dataclass(frozen=True)
class PriceQuote:
    room_rate: Decimal
    nights: int
    base_cost: Decimal
    extra_adult_cost: Decimal
    extra_child_cost: Decimal
    subtotal: Decimal
    fees: StayFees = field(default_factory=StayFees)
    taxes: Decimal = ZERO
    total_price: Decimal = ZERO
    currency: str = "USD"

    def as_reservation_fields(self) -> Dict[str, Any]:
        """Keyword arguments for Reservation.apply_pricing."""
        return {
            "room_rate": self.room_rate,
            "nights": self.nights,
            "subtotal": self.subtotal,
            "cleaning_fee": _money(self.fees.cleaning),
            "service_fee": _money(self.fees.service),
            "extra_fee": _money(self.fees.extra),
            "total_price": self.total_price,
            "currency": self.currency,
        }


class PricingCalculator:
    """
    Pure pricing functions; no I/O.
    """

    @staticmethod
    def room_cost(room: Room, nights: int, adults: int, children: int = 0) -> Decimal:
        """
        base_price * nights, plus per-night surcharges for each adult and
        child above the room's capacity.
        """
        return sum(PricingCalculator._components(room, nights, adults, children), ZERO)

    @staticmethod
    def _components(room: Room, nights: int, adults: int, children: int):
        base = _money(room.base_price) * nights

        extra_adults = max(adults - (room.capacity_adults or 0), 0)
        extra_adult_cost = extra_adults * _money(room.extra_adult_price or ZERO) * nights

        extra_children = max(children - (room.capacity_children or 0), 0)
        extra_child_cost = extra_children * _money(room.extra_child_price or ZERO) * nights

        return _money(base), _money(extra_adult_cost), _money(extra_child_cost)

    @classmethod
    def quote(
        cls,
        room: Room,
        check_in: date,
        check_out: date,
        adults: int,
        children: int = 0,
        fees: StayFees = StayFees(),
    ) -> PriceQuote:
        nights = DateTimeHelper.nights_between(check_in, check_out)
        base, extra_adult_cost, extra_child_cost = cls._components(room, nights, adults, children)
        subtotal = base + extra_adult_cost + extra_child_cost

        return PriceQuote(
            room_rate=_money(room.base_price),
            nights=nights,
            base_cost=base,
            extra_adult_cost=extra_adult_cost,
            extra_child_cost=extra_child_cost,
            subtotal=subtotal,
            fees=fees,
            taxes=ZERO,
            total_price=subtotal + fees.total,
            currency=room.currency or "USD",
        )
