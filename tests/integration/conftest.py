from decimal import Decimal
from typing import Callable

import pytest

from innkeeper.models import Reservation
from innkeeper.schemas.reservation import ReservationCreate
from innkeeper.services.payment import PaymentService
from innkeeper.services.reservation import (
    ReservationLifecycleService,
    ReservationService,
    RoomAvailabilityService,
)
from tests.helpers import days_ahead


@pytest.fixture
def reservation_service(db_session, tenant, settings) -> ReservationService:
    return ReservationService(db_session, tenant.id, settings)


@pytest.fixture
def lifecycle_service(db_session, tenant, settings) -> ReservationLifecycleService:
    return ReservationLifecycleService(db_session, tenant.id, settings)


@pytest.fixture
def payment_service(db_session, tenant, settings) -> PaymentService:
    return PaymentService(db_session, tenant.id, settings)


@pytest.fixture
def availability_service(db_session, tenant) -> RoomAvailabilityService:
    return RoomAvailabilityService(db_session, tenant.id)


@pytest.fixture
def booking_request(hotel, room, guest) -> Callable[..., ReservationCreate]:
    """Build a create request; start/end are day offsets from today."""

    def make(start: int = 10, end: int = 12, adults: int = 2, children: int = 0, **overrides) -> ReservationCreate:
        values = {
            "property_id": hotel.id,
            "room_id": room.id,
            "guest_id": guest.id,
            "dates": {"check_in_date": days_ahead(start), "check_out_date": days_ahead(end)},
            "guests": {"adults": adults, "children": children},
        }
        values.update(overrides)
        return ReservationCreate(**values)

    return make


@pytest.fixture
def book(reservation_service, booking_request) -> Callable[..., Reservation]:
    """Create a reservation and return it, failing the test if creation fails."""

    def make(*args, **kwargs) -> Reservation:
        result = reservation_service.create_reservation(booking_request(*args, **kwargs))
        assert result.is_success, result.error
        return result.data

    return make


@pytest.fixture
def priced_reservation(db_session, book) -> Reservation:
    """A pending reservation whose total is 500.00."""
    reservation = book(10, 15, adults=1)
    assert reservation.total_price == Decimal("500.00")
    return reservation
