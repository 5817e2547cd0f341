from decimal import Decimal

import pytest

from innkeeper.core.exceptions import InvalidStateTransitionError
from innkeeper.models import Reservation
from innkeeper.models.base.enums import ReservationPaymentStatus, ReservationStatus


def make_reservation(status=ReservationStatus.PENDING, total=Decimal("500.00"), **overrides) -> Reservation:
    values = {
        "status": status,
        "total_price": total,
        "total_paid": Decimal("0.00"),
        "extra_fee": Decimal("0.00"),
        "deposit_required": Decimal("0.00"),
        "adults": 2,
        "children": 0,
    }
    values.update(overrides)
    return Reservation(**values)


class TestTransitions:
    def test_confirm_from_pending(self):
        reservation = make_reservation()
        reservation.confirm()

        assert reservation.status == ReservationStatus.CONFIRMED
        assert reservation.confirmed_at is not None

    @pytest.mark.parametrize(
        "status",
        [ReservationStatus.CONFIRMED, ReservationStatus.CHECKED_IN, ReservationStatus.CANCELLED],
    )
    def test_confirm_rejected_outside_pending(self, status):
        with pytest.raises(InvalidStateTransitionError):
            make_reservation(status).confirm()

    def test_check_in_requires_confirmed(self):
        with pytest.raises(InvalidStateTransitionError) as exc_info:
            make_reservation(ReservationStatus.PENDING).check_in()

        assert exc_info.value.details["current_status"] == "pending"
        assert exc_info.value.details["allowed_from"] == ["confirmed"]

    def test_check_in_appends_note(self):
        reservation = make_reservation(ReservationStatus.CONFIRMED, notes="VIP guest")
        reservation.check_in(notes="Early arrival")

        assert reservation.status == ReservationStatus.CHECKED_IN
        assert reservation.actual_check_in is not None
        assert reservation.notes == "VIP guest\n\nCheck-in: Early arrival"

    def test_check_out_folds_charges_into_total(self):
        reservation = make_reservation(ReservationStatus.CHECKED_IN, total=Decimal("200.00"))

        charged = reservation.check_out(additional_charges=[Decimal("15.00"), Decimal("5.50")])

        assert charged == Decimal("20.50")
        assert reservation.extra_fee == Decimal("20.50")
        assert reservation.total_price == Decimal("220.50")
        assert reservation.status == ReservationStatus.CHECKED_OUT
        assert reservation.actual_check_out is not None

    def test_check_out_requires_checked_in(self):
        with pytest.raises(InvalidStateTransitionError):
            make_reservation(ReservationStatus.CONFIRMED).check_out()

    @pytest.mark.parametrize(
        "status",
        [ReservationStatus.PENDING, ReservationStatus.CONFIRMED, ReservationStatus.CHECKED_IN],
    )
    def test_cancel_returns_previous_status(self, status):
        reservation = make_reservation(status)

        previous = reservation.cancel(reason="Plans changed", refund_amount=Decimal("50"))

        assert previous == status
        assert reservation.status == ReservationStatus.CANCELLED
        assert reservation.cancellation_reason == "Plans changed"
        assert reservation.refund_amount == Decimal("50")

    @pytest.mark.parametrize("status", [ReservationStatus.CHECKED_OUT, ReservationStatus.CANCELLED])
    def test_cancel_rejected_from_terminal(self, status):
        with pytest.raises(InvalidStateTransitionError):
            make_reservation(status).cancel()

    def test_start_stay_skips_status_check(self):
        reservation = make_reservation(ReservationStatus.PENDING)
        reservation.start_stay()
        assert reservation.status == ReservationStatus.CHECKED_IN


class TestPaymentSummary:
    def test_nothing_paid_is_pending(self):
        reservation = make_reservation()
        reservation.update_payment_summary(Decimal("0.00"))

        assert reservation.payment_status == ReservationPaymentStatus.PENDING
        assert reservation.remaining_balance == Decimal("500.00")

    def test_partial_payment(self):
        reservation = make_reservation()
        reservation.update_payment_summary(Decimal("300.00"))

        assert reservation.payment_status == ReservationPaymentStatus.PARTIAL
        assert reservation.remaining_balance == Decimal("200.00")

    def test_fully_paid(self):
        reservation = make_reservation()
        reservation.update_payment_summary(Decimal("500.00"))

        assert reservation.payment_status == ReservationPaymentStatus.PAID
        assert reservation.remaining_balance == Decimal("0.00")

    def test_overpaid_balance_goes_negative(self):
        reservation = make_reservation(total=Decimal("100.00"))
        reservation.update_payment_summary(Decimal("120.00"))

        assert reservation.payment_status == ReservationPaymentStatus.PAID
        assert reservation.remaining_balance == Decimal("-20.00")

    def test_deposit_paid_once_required_amount_reached(self):
        reservation = make_reservation(deposit_required=Decimal("100.00"))

        reservation.update_payment_summary(Decimal("99.99"))
        assert reservation.deposit_paid is False

        reservation.update_payment_summary(Decimal("100.00"))
        assert reservation.deposit_paid is True

    def test_no_deposit_required_is_never_paid(self):
        reservation = make_reservation()
        reservation.update_payment_summary(Decimal("500.00"))
        assert reservation.deposit_paid is False
