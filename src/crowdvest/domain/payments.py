"""Payment and bonus domain services."""

import logging
from datetime import datetime, UTC
from decimal import Decimal
from typing import Optional

from crowdvest.database.base import Database
from crowdvest.domain import errors
from crowdvest.domain.entities import BonusTransaction, Payment
from crowdvest.domain.errors import NotFoundError, ValidationError
from crowdvest.domain.guards import check_non_negative
from crowdvest.utils.amount_parser import quantize_money

logger = logging.getLogger(__name__)

PAYMENT_PENDING = "pending"
PAYMENT_PAID = "paid"
PAYMENT_FAILED = "failed"

BONUS_TYPES = ("progressive", "milestone", "referral", "celebration", "consistency")


class PaymentService:
    """Service for recording gateway payments."""

    def __init__(self, db: Database):
        """Initialize payment service.

        Args:
            db: Database instance
        """
        self.db = db

    def _require(self, payment_id: int) -> Payment:
        payment = self.db.get_payment(payment_id)
        if payment is None:
            raise NotFoundError(errors.not_found("Payment", payment_id))
        return payment

    def record_payment(
        self,
        user_id: int,
        amount: Decimal,
        gateway: Optional[str] = None,
        gateway_order_id: Optional[str] = None,
        subscription_id: Optional[int] = None,
        currency: str = "INR",
    ) -> int:
        """Record a pending payment.

        Args:
            user_id: Paying user
            amount: Amount in rupees (Decimal, never float)
            gateway: Payment gateway name
            gateway_order_id: Gateway order reference (unique)
            subscription_id: Subscription the payment is for, if any
            currency: ISO currency code

        Returns:
            Payment ID

        Raises:
            ValidationError: If the amount is negative
            ConflictError: If the gateway order was already recorded
        """
        check_non_negative("amount", amount).raise_if_failed()
        return self.db.create_payment(
            user_id=user_id,
            amount=quantize_money(amount),
            currency=currency,
            gateway=gateway,
            gateway_order_id=gateway_order_id,
            subscription_id=subscription_id,
        )

    def get_payment(self, payment_id: int) -> Optional[Payment]:
        """Get a payment by ID."""
        return self.db.get_payment(payment_id)

    def mark_paid(self, payment_id: int, gateway_payment_id: Optional[str] = None) -> None:
        """Mark a pending payment paid.

        Raises:
            ValidationError: If the payment is not pending
        """
        payment = self._require(payment_id)
        if payment.status != PAYMENT_PENDING:
            raise ValidationError(f"Payment {payment_id} is {payment.status}, not pending")
        self.db.update_payment_status(
            payment_id, PAYMENT_PAID, gateway_payment_id=gateway_payment_id, paid_at=datetime.now(UTC)
        )
        logger.info("Payment %d paid", payment_id)

    def mark_failed(self, payment_id: int, reason: str) -> None:
        """Mark a pending payment failed.

        Raises:
            ValidationError: If the payment is not pending
        """
        payment = self._require(payment_id)
        if payment.status != PAYMENT_PENDING:
            raise ValidationError(f"Payment {payment_id} is {payment.status}, not pending")
        self.db.update_payment_status(payment_id, PAYMENT_FAILED, failure_reason=reason)
        logger.warning("Payment %d failed: %s", payment_id, reason)


class BonusService:
    """Service for bonus credits.

    Bonuses are never edited or deleted. A wrong bonus is cancelled by
    ``reverse``, which writes a second row with the negated amounts so the
    user's total nets out.
    """

    def __init__(self, db: Database):
        """Initialize bonus service.

        Args:
            db: Database instance
        """
        self.db = db

    def award_bonus(
        self,
        user_id: int,
        bonus_type: str,
        amount: Decimal,
        tds_deducted: Decimal = Decimal("0.00"),
        multiplier: Decimal = Decimal("1.00"),
        base_amount: Optional[Decimal] = None,
        description: Optional[str] = None,
        payment_id: Optional[int] = None,
        subscription_id: Optional[int] = None,
    ) -> int:
        """Credit a bonus.

        Returns:
            Bonus ID

        Raises:
            ValidationError: If the type is unknown, an amount is negative, or
                the tax withheld exceeds the amount
        """
        if bonus_type not in BONUS_TYPES:
            raise ValidationError(
                f"Invalid bonus type '{bonus_type}'. Expected one of: {', '.join(BONUS_TYPES)}"
            )
        for field, value in (("amount", amount), ("tds_deducted", tds_deducted), ("base_amount", base_amount)):
            check_non_negative(field, value).raise_if_failed()
        if tds_deducted > amount:
            raise ValidationError(f"tds_deducted {tds_deducted} exceeds amount {amount}")

        bonus_id = self.db.create_bonus_transaction(
            user_id=user_id,
            bonus_type=bonus_type,
            amount=quantize_money(amount),
            tds_deducted=quantize_money(tds_deducted),
            multiplier=multiplier,
            base_amount=quantize_money(base_amount) if base_amount is not None else None,
            description=description,
            payment_id=payment_id,
            subscription_id=subscription_id,
        )
        logger.info("Awarded %s bonus %d of %s to user %d", bonus_type, bonus_id, amount, user_id)
        return bonus_id

    def get_bonus(self, bonus_id: int) -> Optional[BonusTransaction]:
        """Get a bonus by ID."""
        return self.db.get_bonus_transaction(bonus_id)

    def list_bonuses(self, user_id: int) -> list[BonusTransaction]:
        """List a user's bonuses, reversals included."""
        return self.db.list_bonus_transactions(user_id)

    def reverse(self, bonus_id: int, reason: Optional[str] = None) -> int:
        """Reverse a bonus.

        Returns:
            ID of the reversal row

        Raises:
            NotFoundError: If the bonus does not exist
            ValidationError: If it is a reversal itself or already reversed
        """
        reversal_id = self.db.reverse_bonus_transaction(
            bonus_id, reversed_at=datetime.now(UTC), description=reason
        )
        logger.info("Reversed bonus %d with %d", bonus_id, reversal_id)
        return reversal_id

    def net_total(self, user_id: int) -> Decimal:
        """Sum of net amounts (amount minus tax withheld) over all bonus rows."""
        total = sum((b.net_amount for b in self.db.list_bonus_transactions(user_id)), Decimal("0.00"))
        return quantize_money(total)
