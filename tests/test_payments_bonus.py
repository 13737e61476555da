"""Tests for payments and bonus transactions."""

from decimal import Decimal

import pytest

from crowdvest.domain.errors import ConflictError, NotFoundError, ValidationError
from crowdvest.domain.payments import BonusService, PaymentService


@pytest.fixture
def payments(temp_db):
    return PaymentService(temp_db)


@pytest.fixture
def bonuses(temp_db):
    return BonusService(temp_db)


def test_record_payment_is_pending(payments, users):
    payment_id = payments.record_payment(
        users["alice"], Decimal("5000"), gateway="razorpay", gateway_order_id="order_001"
    )
    payment = payments.get_payment(payment_id)

    assert payment.status == "pending"
    assert payment.amount == Decimal("5000.00")
    assert payment.currency == "INR"
    assert payment.paid_at is None


def test_negative_payment_is_rejected(payments, users):
    with pytest.raises(ValidationError):
        payments.record_payment(users["alice"], Decimal("-1"))


def test_gateway_order_is_unique(payments, users):
    payments.record_payment(users["alice"], Decimal("100"), gateway_order_id="order_001")
    with pytest.raises(ConflictError):
        payments.record_payment(users["bob"], Decimal("100"), gateway_order_id="order_001")


def test_mark_paid(payments, users):
    payment_id = payments.record_payment(users["alice"], Decimal("100"))
    payments.mark_paid(payment_id, gateway_payment_id="pay_123")
    payment = payments.get_payment(payment_id)

    assert payment.status == "paid"
    assert payment.gateway_payment_id == "pay_123"
    assert payment.paid_at is not None

    with pytest.raises(ValidationError):
        payments.mark_failed(payment_id, "late failure")


def test_mark_failed(payments, users):
    payment_id = payments.record_payment(users["alice"], Decimal("100"))
    payments.mark_failed(payment_id, "Card declined")
    payment = payments.get_payment(payment_id)

    assert payment.status == "failed"
    assert payment.failure_reason == "Card declined"


def test_mark_paid_unknown_payment(payments):
    with pytest.raises(NotFoundError):
        payments.mark_paid(42)


def test_award_bonus(bonuses, users):
    bonus_id = bonuses.award_bonus(
        users["alice"], "milestone", Decimal("1000"), tds_deducted=Decimal("100"), description="12 months"
    )
    bonus = bonuses.get_bonus(bonus_id)

    assert bonus.amount == Decimal("1000.00")
    assert bonus.net_amount == Decimal("900.00")
    assert bonus.is_reversal is False


@pytest.mark.parametrize(
    "kwargs",
    [
        {"bonus_type": "jackpot", "amount": Decimal("10")},
        {"bonus_type": "referral", "amount": Decimal("-10")},
        {"bonus_type": "referral", "amount": Decimal("10"), "tds_deducted": Decimal("11")},
    ],
)
def test_award_bonus_validation(bonuses, users, kwargs):
    with pytest.raises(ValidationError):
        bonuses.award_bonus(users["alice"], **kwargs)


def test_reverse_bonus_nets_out(bonuses, users):
    bonus_id = bonuses.award_bonus(users["alice"], "referral", Decimal("500"), tds_deducted=Decimal("50"))
    reversal_id = bonuses.reverse(bonus_id, "Referred user failed KYC")

    reversal = bonuses.get_bonus(reversal_id)
    assert reversal.is_reversal is True
    assert reversal.reversal_of_id == bonus_id
    assert reversal.amount == Decimal("-500.00")
    assert reversal.tds_deducted == Decimal("-50.00")
    assert reversal.description == "Referred user failed KYC"
    assert bonuses.get_bonus(bonus_id).reversed_at is not None

    assert bonuses.net_total(users["alice"]) == Decimal("0.00")
    assert len(bonuses.list_bonuses(users["alice"])) == 2


def test_bonus_is_reversed_once(bonuses, users):
    bonus_id = bonuses.award_bonus(users["alice"], "referral", Decimal("500"))
    reversal_id = bonuses.reverse(bonus_id)

    with pytest.raises(ValidationError, match="already been reversed"):
        bonuses.reverse(bonus_id)
    with pytest.raises(ValidationError, match="itself a reversal"):
        bonuses.reverse(reversal_id)


def test_reverse_unknown_bonus(bonuses):
    with pytest.raises(NotFoundError):
        bonuses.reverse(999)


def test_net_total(bonuses, users):
    bonuses.award_bonus(users["alice"], "progressive", Decimal("100.50"), tds_deducted=Decimal("10.05"))
    bonuses.award_bonus(users["alice"], "celebration", Decimal("50"))
    bonuses.award_bonus(users["bob"], "celebration", Decimal("50"))

    assert bonuses.net_total(users["alice"]) == Decimal("140.45")
