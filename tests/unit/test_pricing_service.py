from datetime import date
from decimal import Decimal

from innkeeper.models import Room
from innkeeper.services.reservation.pricing_service import PricingCalculator, StayFees


def make_room(**overrides) -> Room:
    values = {
        "base_price": Decimal("100.00"),
        "capacity_adults": 2,
        "capacity_children": 0,
        "extra_adult_price": Decimal("20.00"),
        "extra_child_price": Decimal("10.00"),
        "currency": "USD",
    }
    values.update(overrides)
    return Room(**values)


def test_extra_adult_surcharge_per_night():
    quote = PricingCalculator.quote(make_room(), date(2030, 1, 10), date(2030, 1, 13), adults=3)

    assert quote.nights == 3
    assert quote.base_cost == Decimal("300.00")
    assert quote.extra_adult_cost == Decimal("60.00")
    assert quote.subtotal == Decimal("360.00")
    assert quote.taxes == Decimal("0")
    assert quote.total_price == Decimal("360.00")


def test_within_capacity_has_no_surcharge():
    quote = PricingCalculator.quote(make_room(), date(2030, 1, 1), date(2030, 1, 3), adults=2)

    assert quote.subtotal == Decimal("200.00")
    assert quote.extra_adult_cost == Decimal("0.00")
    assert quote.extra_child_cost == Decimal("0.00")


def test_children_above_capacity_are_charged():
    room = make_room(capacity_children=1)
    quote = PricingCalculator.quote(room, date(2030, 1, 1), date(2030, 1, 3), adults=2, children=3)

    # 2 extra children * 10 * 2 nights
    assert quote.extra_child_cost == Decimal("40.00")
    assert quote.subtotal == Decimal("240.00")


def test_fees_are_added_to_total_but_not_taxed():
    fees = StayFees(cleaning=Decimal("25"), service=Decimal("10.50"), extra=Decimal("4.50"))
    quote = PricingCalculator.quote(make_room(), date(2030, 1, 1), date(2030, 1, 2), adults=1, fees=fees)

    assert quote.subtotal == Decimal("100.00")
    assert quote.total_price == Decimal("140.00")
    assert quote.taxes == Decimal("0")


def test_quote_maps_onto_reservation_fields():
    fees = StayFees(cleaning=Decimal("15"))
    fields = PricingCalculator.quote(
        make_room(currency="EUR"), date(2030, 1, 1), date(2030, 1, 4), adults=2, fees=fees
    ).as_reservation_fields()

    assert fields == {
        "room_rate": Decimal("100.00"),
        "nights": 3,
        "subtotal": Decimal("300.00"),
        "cleaning_fee": Decimal("15.00"),
        "service_fee": Decimal("0.00"),
        "extra_fee": Decimal("0.00"),
        "total_price": Decimal("315.00"),
        "currency": "EUR",
    }


def test_room_cost_matches_quote_subtotal():
    room = make_room()
    assert PricingCalculator.room_cost(room, 3, adults=3) == Decimal("360.00")
