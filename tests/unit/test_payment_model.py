from decimal import Decimal

import pytest

from innkeeper.core.exceptions import (
    AmountExceedsAvailableError,
    InvalidPaymentStateError,
    ValidationError,
)
from innkeeper.models import Payment
from innkeeper.models.base.enums import PaymentMethod, PaymentStatus


def make_payment(amount="300.00", status=PaymentStatus.PAID) -> Payment:
    return Payment(
        amount=Decimal(amount),
        method=PaymentMethod.CASH,
        status=status,
        refunded_amount=Decimal("0.00"),
        processing_fee=Decimal("0.00"),
        gateway_fee=Decimal("0.00"),
    )


def test_partial_refund_keeps_payment_paid():
    payment = make_payment()

    payment.refund(Decimal("100.00"), "Late checkout dispute", None)

    assert payment.status == PaymentStatus.PAID
    assert payment.is_refunded is True
    assert payment.refunded_amount == Decimal("100.00")
    assert payment.refundable_amount == Decimal("200.00")
    assert payment.refunded_at is not None


def test_full_refund_reverts_to_configured_status():
    pending = make_payment()
    pending.refund(Decimal("300.00"), None, None)
    assert pending.status == PaymentStatus.PENDING

    refunded = make_payment()
    refunded.refund(Decimal("300.00"), None, None, full_refund_status=PaymentStatus.REFUNDED)
    assert refunded.status == PaymentStatus.REFUNDED


def test_refund_beyond_refundable_amount_is_rejected():
    payment = make_payment()
    payment.refund(Decimal("250.00"), None, None)

    with pytest.raises(AmountExceedsAvailableError) as exc_info:
        payment.refund(Decimal("60.00"), None, None)

    assert exc_info.value.details == {"requested": "60.00", "available": "50.00"}
    assert payment.refunded_amount == Decimal("250.00")


def test_only_paid_payments_are_refundable():
    with pytest.raises(InvalidPaymentStateError):
        make_payment(status=PaymentStatus.PENDING).refund(Decimal("10"), None, None)


def test_refund_amount_must_be_positive():
    with pytest.raises(ValidationError):
        make_payment().refund(Decimal("0"), None, None)


def test_net_amount_subtracts_fees():
    payment = make_payment("100.00")
    payment.processing_fee = Decimal("2.50")
    payment.gateway_fee = Decimal("1.25")
    payment.compute_net_amount()

    assert payment.net_amount == Decimal("96.25")


def test_negative_fee_rejected():
    with pytest.raises(ValueError):
        make_payment().processing_fee = Decimal("-1")
