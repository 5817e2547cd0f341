import logging
from decimal import Decimal

import pytest

from innkeeper.core.exceptions import ErrorCode, RepositoryError
from innkeeper.models.base.enums import ReservationStatus, RoomStatus
from innkeeper.schemas.reservation import AdditionalCharge


@pytest.fixture
def confirmed(book, lifecycle_service):
    reservation = book(0, 2)
    assert lifecycle_service.confirm(reservation.id).is_success
    return reservation


@pytest.fixture
def checked_in(confirmed, lifecycle_service):
    assert lifecycle_service.check_in(confirmed.id).is_success
    return confirmed


def test_confirm_stamps_actor(book, lifecycle_service, guest):
    reservation = book()

    result = lifecycle_service.confirm(reservation.id, actor_id=guest.id)

    assert result.message == "Reservation confirmed successfully"
    assert result.data.status == ReservationStatus.CONFIRMED
    assert result.data.confirmed_at is not None
    assert result.data.confirmed_by == guest.id


def test_confirm_twice_is_rejected(confirmed, lifecycle_service):
    result = lifecycle_service.confirm(confirmed.id)

    assert result.error.code == ErrorCode.INVALID_STATE_TRANSITION
    assert result.error.details["current_status"] == "confirmed"


def test_check_in_requires_confirmation(book, lifecycle_service, room):
    reservation = book()

    result = lifecycle_service.check_in(reservation.id)

    assert result.error.code == ErrorCode.INVALID_STATE_TRANSITION
    assert reservation.status == ReservationStatus.PENDING
    assert room.status == RoomStatus.AVAILABLE


def test_check_in_occupies_room_and_counts_stay(confirmed, lifecycle_service, room, guest):
    result = lifecycle_service.check_in(confirmed.id, notes="Early arrival")

    assert result.data.status == ReservationStatus.CHECKED_IN
    assert result.data.actual_check_in is not None
    assert "Early arrival" in result.data.notes
    assert room.status == RoomStatus.OCCUPIED
    assert guest.total_stays == 1


def test_check_out_adds_charges_and_frees_room_for_cleaning(checked_in, lifecycle_service, room):
    result = lifecycle_service.check_out(
        checked_in.id,
        additional_charges=[
            AdditionalCharge(description="Minibar", amount=Decimal("12.50")),
            AdditionalCharge(description="Laundry", amount=Decimal("7.50")),
        ],
    )

    reservation = result.data
    assert reservation.status == ReservationStatus.CHECKED_OUT
    assert reservation.actual_check_out is not None
    assert reservation.extra_fee == Decimal("20.00")
    assert reservation.total_price == Decimal("220.00")
    assert reservation.remaining_balance == Decimal("220.00")
    assert room.status == RoomStatus.CLEANING
    assert room.last_cleaned_at is not None


def test_check_out_requires_check_in(confirmed, lifecycle_service):
    result = lifecycle_service.check_out(confirmed.id)

    assert result.error.code == ErrorCode.INVALID_STATE_TRANSITION


def test_cancel_pending_leaves_room_alone(book, lifecycle_service, room):
    reservation = book()
    room.status = RoomStatus.CLEANING

    result = lifecycle_service.cancel(reservation.id, reason="Duplicate", refund_amount=Decimal("10"))

    assert result.data.status == ReservationStatus.CANCELLED
    assert result.data.cancellation_reason == "Duplicate"
    assert result.data.refund_amount == Decimal("10")
    assert room.status == RoomStatus.CLEANING


def test_cancel_checked_in_releases_room(checked_in, lifecycle_service, room):
    result = lifecycle_service.cancel(checked_in.id, reason="Left early")

    assert result.is_success
    assert room.status == RoomStatus.AVAILABLE


def test_cancel_after_check_out_is_rejected(checked_in, lifecycle_service):
    lifecycle_service.check_out(checked_in.id)

    result = lifecycle_service.cancel(checked_in.id)

    assert result.error.code == ErrorCode.INVALID_STATE_TRANSITION
    assert result.error.details["allowed_from"] == ["pending", "confirmed", "checked_in"]


def test_unknown_reservation(lifecycle_service, room):
    assert lifecycle_service.confirm(room.id).error.code == ErrorCode.NOT_FOUND


def test_failed_side_effect_keeps_transition(confirmed, lifecycle_service, room, guest, monkeypatch, caplog):
    def broken(*args, **kwargs):
        raise RepositoryError("room table locked")

    monkeypatch.setattr(lifecycle_service.room_status, "set_status", broken)

    with caplog.at_level(logging.ERROR):
        result = lifecycle_service.check_in(confirmed.id)

    assert result.is_success
    assert result.data.status == ReservationStatus.CHECKED_IN
    assert room.status == RoomStatus.AVAILABLE
    assert guest.total_stays == 1

    failures = [r for r in caplog.records if getattr(r, "side_effect", None) == "room_status_occupied"]
    assert len(failures) == 1
    assert failures[0].reservation_id == str(confirmed.id)
    assert failures[0].error_type == "RepositoryError"


def test_cancel_confirmed_frees_room(confirmed, lifecycle_service, room):
    room.status = RoomStatus.OCCUPIED

    result = lifecycle_service.cancel(confirmed.id, reason="No show")

    assert result.data.status == ReservationStatus.CANCELLED
    assert room.status == RoomStatus.AVAILABLE


def test_unexpected_side_effect_error_keeps_transition(confirmed, lifecycle_service, room, guest, monkeypatch, caplog):
    def broken(*args, **kwargs):
        raise RuntimeError("status cache unavailable")

    monkeypatch.setattr(lifecycle_service.room_status, "set_status", broken)

    with caplog.at_level(logging.ERROR):
        result = lifecycle_service.check_in(confirmed.id)

    assert result.is_success
    assert result.data.status == ReservationStatus.CHECKED_IN
    assert room.status == RoomStatus.AVAILABLE
    assert guest.total_stays == 1

    failures = [r for r in caplog.records if getattr(r, "side_effect", None) == "room_status_occupied"]
    assert [r.error_type for r in failures] == ["RuntimeError"]
