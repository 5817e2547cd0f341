from decimal import Decimal

from innkeeper.core.exceptions import ErrorCode
from innkeeper.models.base.enums import RoomStatus
from innkeeper.schemas.reservation import AvailabilityRequest
from innkeeper.services.reservation import RoomAvailabilityService
from tests.helpers import days_ahead


def test_back_to_back_stays_do_not_conflict(book, availability_service, room):
    book(10, 12)

    result = availability_service.is_available(room.id, days_ahead(12), days_ahead(14))

    assert result.available
    assert result.conflict is None


def test_overlapping_stay_reports_conflict(book, availability_service, room):
    existing = book(10, 12)

    result = availability_service.is_available(room.id, days_ahead(9), days_ahead(11))

    assert not result.available
    assert result.conflict.reservation_id == existing.id
    assert result.conflict.confirmation_number == existing.confirmation_number
    assert result.conflict.check_in_date == days_ahead(10)


def test_stay_ending_on_check_in_day_is_free(book, availability_service, room):
    book(10, 12)

    assert availability_service.is_available(room.id, days_ahead(8), days_ahead(10)).available


def test_check_is_repeatable(book, availability_service, room):
    book(10, 12)

    first = availability_service.is_available(room.id, days_ahead(11), days_ahead(13))
    second = availability_service.is_available(room.id, days_ahead(11), days_ahead(13))

    assert first == second


def test_excluding_own_reservation(book, availability_service, room):
    existing = book(10, 12)

    result = availability_service.is_available(
        room.id, days_ahead(10), days_ahead(13), exclude_reservation_id=existing.id
    )

    assert result.available


def test_earliest_conflict_is_reported(book, availability_service, room):
    book(14, 16)
    earlier = book(10, 12)

    result = availability_service.is_available(room.id, days_ahead(9), days_ahead(20))

    assert result.conflict.reservation_id == earlier.id


def test_deleted_reservation_frees_the_room(book, reservation_service, availability_service, room):
    existing = book(10, 12)
    assert reservation_service.delete_reservation(existing.id).is_success

    assert availability_service.is_available(room.id, days_ahead(10), days_ahead(12)).available


def test_cancelled_reservation_frees_the_room(book, lifecycle_service, availability_service, room):
    existing = book(10, 12)
    assert lifecycle_service.cancel(existing.id, reason="Plans changed").is_success

    assert availability_service.is_available(room.id, days_ahead(10), days_ahead(12)).available


def test_other_tenant_reservations_are_invisible(db_session, book, other_tenant, room):
    book(10, 12)
    foreign = RoomAvailabilityService(db_session, other_tenant.id)

    assert foreign.is_available(room.id, days_ahead(10), days_ahead(12)).available


class TestSearch:
    def test_skips_booked_and_maintenance_rooms(self, book, room_factory, availability_service, room):
        book(10, 12)
        free = room_factory(name_or_number="102")
        room_factory(name_or_number="103", status=RoomStatus.MAINTENANCE)

        results = availability_service.search(days_ahead(10), days_ahead(12), adults=2)

        assert [r.room.id for r in results] == [free.id]
        assert results[0].nights == 2
        assert results[0].base_price == Decimal("100.00")
        assert results[0].total_price == Decimal("200.00")
        assert results[0].currency == "USD"

    def test_filters_by_capacity(self, room_factory, availability_service, room):
        family = room_factory(name_or_number="201", capacity_adults=2, capacity_children=2)

        results = availability_service.search(days_ahead(3), days_ahead(5), adults=2, children=1)

        assert [r.room.id for r in results] == [family.id]

    def test_filters_by_property(self, property_factory, room_factory, tenant, availability_service, room):
        annex = property_factory(name="Annex")
        annex_room = room_factory(property_id=annex.id, name_or_number="A1")

        results = availability_service.search(days_ahead(3), days_ahead(5), adults=1, property_id=annex.id)

        assert [r.room.id for r in results] == [annex_room.id]

    def test_service_search_reports_count(self, reservation_service, room):
        request = AvailabilityRequest(
            check_in_date=days_ahead(3), check_out_date=days_ahead(5), adults=1
        )

        result = reservation_service.search_available_rooms(request)

        assert result.is_success
        assert result.metadata["count"] == 1

    def test_service_search_rejects_inverted_dates(self, reservation_service):
        request = AvailabilityRequest(
            check_in_date=days_ahead(5), check_out_date=days_ahead(3), adults=1
        )

        result = reservation_service.search_available_rooms(request)

        assert not result.is_success
        assert result.error.code == ErrorCode.INVALID_DATE_RANGE
