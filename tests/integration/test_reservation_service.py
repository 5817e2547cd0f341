from datetime import timedelta
from decimal import Decimal

import pytest

from innkeeper.core.exceptions import ErrorCode
from innkeeper.models.base.enums import ReservationPaymentStatus, ReservationStatus, RoomStatus
from innkeeper.schemas.reservation import ReservationFilters, ReservationUpdate
from innkeeper.services.reservation import ReservationService
from tests.helpers import days_ahead


class TestCreate:
    def test_creates_pending_reservation_with_pricing(self, book, room, guest):
        reservation = book(10, 13, adults=2)

        assert reservation.status == ReservationStatus.PENDING
        assert reservation.room_id == room.id
        assert reservation.guest_id == guest.id
        assert reservation.nights == 3
        assert reservation.room_rate == Decimal("100.00")
        assert reservation.subtotal == Decimal("300.00")
        assert reservation.taxes == Decimal("0")
        assert reservation.total_price == Decimal("300.00")
        assert reservation.total_paid == Decimal("0")
        assert reservation.remaining_balance == Decimal("300.00")
        assert reservation.payment_status == ReservationPaymentStatus.PENDING
        assert reservation.confirmation_number.startswith("MH")

    def test_fees_are_part_of_the_total(self, book):
        reservation = book(10, 11, fees={"cleaning_fee": "25", "service_fee": "5"})

        assert reservation.cleaning_fee == Decimal("25.00")
        assert reservation.service_fee == Decimal("5.00")
        assert reservation.total_price == Decimal("130.00")

    def test_confirmation_numbers_are_unique(self, book):
        first = book(10, 11)
        second = book(11, 12)

        assert first.confirmation_number != second.confirmation_number

    def test_additional_guests_are_stored(self, book):
        reservation = book(
            10, 11, additional_guests=[{"first_name": "Grace", "last_name": "Hopper", "age": 30}]
        )

        assert reservation.additional_guests[0]["first_name"] == "Grace"

    @pytest.mark.parametrize(
        "start, end, message",
        [
            (-1, 2, "Check-in date cannot be in the past"),
            (5, 5, "Check-out date must be after check-in date"),
            (6, 4, "Check-out date must be after check-in date"),
        ],
    )
    def test_rejects_bad_dates(self, reservation_service, booking_request, start, end, message):
        result = reservation_service.create_reservation(booking_request(start, end))

        assert not result.is_success
        assert result.error.code == ErrorCode.INVALID_DATE_RANGE
        assert result.error.message == message

    def test_rejects_malformed_date(self, reservation_service, booking_request):
        request = booking_request(dates={"check_in_date": "not-a-date", "check_out_date": "2030-01-02"})

        result = reservation_service.create_reservation(request)

        assert result.error.code == ErrorCode.INVALID_DATE_RANGE
        assert result.error.message == "Invalid date format"

    def test_today_is_bookable(self, book):
        assert book(0, 1).status == ReservationStatus.PENDING

    def test_rejects_check_in_beyond_booking_window(self, reservation_service, booking_request, property_factory, room_factory):
        prop = property_factory(name="Short Notice Inn", advance_booking_days=30)
        near_room = room_factory(property_id=prop.id)

        result = reservation_service.create_reservation(
            booking_request(31, 33, property_id=prop.id, room_id=near_room.id)
        )

        assert result.error.code == ErrorCode.INVALID_DATE_RANGE
        assert result.error.details["latest_check_in_date"] == days_ahead(30).isoformat()

    def test_rejects_guests_over_capacity(self, reservation_service, booking_request):
        result = reservation_service.create_reservation(booking_request(adults=2, children=1))

        assert result.error.code == ErrorCode.CAPACITY_EXCEEDED

    def test_rejects_zero_guests(self, reservation_service, booking_request):
        result = reservation_service.create_reservation(booking_request(adults=0))

        assert result.error.code == ErrorCode.CAPACITY_EXCEEDED

    def test_rejects_room_from_another_property(self, reservation_service, booking_request, property_factory, room_factory):
        elsewhere = room_factory(property_id=property_factory(name="Elsewhere").id)

        result = reservation_service.create_reservation(booking_request(room_id=elsewhere.id))

        assert result.error.code == ErrorCode.NOT_FOUND

    def test_conflict_names_the_blocking_reservation(self, book, reservation_service, booking_request):
        existing = book(10, 12)

        result = reservation_service.create_reservation(booking_request(9, 11))

        assert result.error.code == ErrorCode.ROOM_CONFLICT
        conflicting = result.error.details["conflictingReservation"]
        assert conflicting["confirmationNumber"] == existing.confirmation_number
        assert conflicting["dates"] == {
            "checkInDate": days_ahead(10).isoformat(),
            "checkOutDate": days_ahead(12).isoformat(),
        }
        assert conflicting["status"] == "pending"

    def test_failed_create_leaves_nothing_behind(self, book, reservation_service, booking_request, room):
        book(10, 12)
        reservation_service.create_reservation(booking_request(11, 13))

        result = reservation_service.list_reservations(ReservationFilters(room_id=room.id))

        assert result.metadata["total"] == 1

    def test_direct_check_in(self, book, room, guest):
        reservation = book(0, 2, direct_check_in=True)

        assert reservation.status == ReservationStatus.CHECKED_IN
        assert reservation.actual_check_in is not None
        assert room.status == RoomStatus.OCCUPIED
        assert guest.total_stays == 1
        assert guest.total_spent == Decimal("200.00")

    def test_other_tenant_cannot_use_rooms(self, db_session, other_tenant, settings, booking_request):
        foreign = ReservationService(db_session, other_tenant.id, settings)

        result = foreign.create_reservation(booking_request())

        assert result.error.code == ErrorCode.NOT_FOUND


class TestUpdate:
    def test_new_dates_are_repriced(self, book, reservation_service):
        reservation = book(10, 12)

        result = reservation_service.update_reservation(
            reservation.id,
            ReservationUpdate(dates={"check_out_date": days_ahead(14)}),
        )

        assert result.is_success
        assert result.data.nights == 4
        assert result.data.total_price == Decimal("400.00")
        assert result.data.remaining_balance == Decimal("400.00")

    def test_moving_within_own_dates_is_not_a_conflict(self, book, reservation_service):
        reservation = book(10, 12)

        result = reservation_service.update_reservation(
            reservation.id,
            ReservationUpdate(dates={"check_in_date": days_ahead(11), "check_out_date": days_ahead(13)}),
        )

        assert result.is_success

    def test_moving_onto_another_stay_conflicts(self, book, reservation_service):
        book(14, 16)
        reservation = book(10, 12)

        result = reservation_service.update_reservation(
            reservation.id, ReservationUpdate(dates={"check_out_date": days_ahead(15)})
        )

        assert result.error.code == ErrorCode.ROOM_CONFLICT

    def test_room_change_checks_the_new_room(self, book, reservation_service, room_factory):
        other_room = room_factory(name_or_number="102")
        book(10, 12, room_id=other_room.id)
        reservation = book(10, 12)

        result = reservation_service.update_reservation(reservation.id, ReservationUpdate(room_id=other_room.id))

        assert result.error.code == ErrorCode.ROOM_CONFLICT

    def test_moving_a_checked_in_guest_moves_room_status(self, book, reservation_service, room, room_factory):
        reservation = book(0, 2, direct_check_in=True)
        new_room = room_factory(name_or_number="202")

        result = reservation_service.update_reservation(reservation.id, ReservationUpdate(room_id=new_room.id))

        assert result.is_success
        assert room.status == RoomStatus.CLEANING
        assert new_room.status == RoomStatus.OCCUPIED

    def test_moving_a_future_stay_leaves_room_status(self, book, reservation_service, room, room_factory):
        reservation = book(10, 12)
        new_room = room_factory(name_or_number="202")

        result = reservation_service.update_reservation(reservation.id, ReservationUpdate(room_id=new_room.id))

        assert result.data.room_id == new_room.id
        assert room.status == RoomStatus.AVAILABLE
        assert new_room.status == RoomStatus.AVAILABLE

    def test_guest_change_checks_capacity(self, book, reservation_service):
        reservation = book(10, 12, adults=1)

        result = reservation_service.update_reservation(
            reservation.id, ReservationUpdate(guests={"adults": 3, "children": 0})
        )

        assert result.error.code == ErrorCode.CAPACITY_EXCEEDED

    def test_notes_only_keeps_pricing(self, book, reservation_service):
        reservation = book(10, 12)

        result = reservation_service.update_reservation(reservation.id, ReservationUpdate(notes="Late arrival"))

        assert result.data.notes == "Late arrival"
        assert result.data.total_price == Decimal("200.00")

    def test_terminal_reservation_cannot_be_updated(self, book, reservation_service, lifecycle_service):
        reservation = book(10, 12)
        lifecycle_service.cancel(reservation.id)

        result = reservation_service.update_reservation(reservation.id, ReservationUpdate(notes="x"))

        assert result.error.code == ErrorCode.INVALID_STATE_TRANSITION

    def test_rejects_moving_into_the_past(self, book, reservation_service):
        reservation = book(10, 12)

        result = reservation_service.update_reservation(
            reservation.id, ReservationUpdate(dates={"check_in_date": days_ahead(-2)})
        )

        assert result.error.message == "Check-in date cannot be in the past"


class TestQueries:
    def test_get_unknown_reservation(self, reservation_service, room):
        result = reservation_service.get_reservation(room.id)

        assert result.error.code == ErrorCode.NOT_FOUND

    def test_get_from_another_tenant(self, db_session, book, other_tenant, settings):
        reservation = book()

        result = ReservationService(db_session, other_tenant.id, settings).get_reservation(reservation.id)

        assert result.error.code == ErrorCode.NOT_FOUND

    def test_list_filters_and_pages(self, book, reservation_service, lifecycle_service):
        first = book(10, 11)
        book(11, 12)
        book(12, 13)
        lifecycle_service.confirm(first.id)

        confirmed = reservation_service.list_reservations(ReservationFilters(status=ReservationStatus.CONFIRMED))
        page = reservation_service.list_reservations(ReservationFilters(page=1, page_size=2))

        assert [r.id for r in confirmed.data] == [first.id]
        assert len(page.data) == 2
        assert page.metadata["total"] == 3
        assert page.data[0].check_in_date == days_ahead(12)

    def test_list_by_check_in_range(self, book, reservation_service):
        book(10, 11)
        later = book(20, 21)

        result = reservation_service.list_reservations(
            ReservationFilters(check_in_from=days_ahead(15), check_in_to=days_ahead(25))
        )

        assert [r.id for r in result.data] == [later.id]

    def test_current_lists_in_house_guests(self, book, reservation_service):
        in_house = book(0, 2, direct_check_in=True)
        book(5, 6)

        result = reservation_service.list_current()

        assert [r.id for r in result.data] == [in_house.id]

    def test_delete_hides_reservation(self, book, reservation_service):
        reservation = book()

        assert reservation_service.delete_reservation(reservation.id).is_success
        assert reservation_service.get_reservation(reservation.id).error.code == ErrorCode.NOT_FOUND
        assert reservation.deleted_at is not None

    def test_check_availability(self, book, reservation_service, room):
        book(10, 12)

        busy = reservation_service.check_availability(room.id, days_ahead(11), days_ahead(12))
        free = reservation_service.check_availability(
            room.id, days_ahead(12).isoformat(), (days_ahead(12) + timedelta(days=3)).isoformat()
        )

        assert not busy.data.available
        assert free.data.available


class TestConfirmationNumbers:
    def test_collision_is_regenerated(self, book, reservation_service, monkeypatch):
        taken = book(10, 12).confirmation_number
        codes = iter([taken, "MHFRESH01234"])
        monkeypatch.setattr(
            "innkeeper.services.reservation.reservation_service.generate_confirmation_number",
            lambda prefix: next(codes),
        )
        monkeypatch.setattr(reservation_service.reservations, "confirmation_number_exists", lambda code: False)

        reservation = book(20, 22)

        assert reservation.confirmation_number == "MHFRESH01234"

    def test_retries_are_bounded(self, book, reservation_service, booking_request, monkeypatch):
        taken = book(10, 12).confirmation_number
        monkeypatch.setattr(
            "innkeeper.services.reservation.reservation_service.generate_confirmation_number",
            lambda prefix: taken,
        )

        result = reservation_service.create_reservation(booking_request(20, 22))

        assert result.error.code == ErrorCode.DUPLICATE_RESOURCE
        assert result.error.details["attempts"] == reservation_service.settings.CODE_GENERATION_MAX_ATTEMPTS
        assert reservation_service.list_reservations(ReservationFilters()).metadata["total"] == 1
