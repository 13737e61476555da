"""Payment, wallet, withdrawal and bonus models.

Gateway amounts are two-decimal Numeric columns; wallet balances and wallet
ledger rows are integer paise.
"""

from decimal import Decimal
from sqlalchemy import (
    Column,
    Integer,
    BigInteger,
    String,
    Text,
    ForeignKey,
    DateTime,
    Numeric,
    JSON,
    Index,
)
from sqlalchemy.orm import relationship

from crowdvest.database.models.base import Base, TimestampMixin, now_utc


class Payment(TimestampMixin, Base):
    """A gateway payment made by a user."""

    __tablename__ = "payments"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    subscription_id = Column(Integer, ForeignKey("subscriptions.id"), nullable=True)
    amount = Column(Numeric(12, 2), nullable=False)
    currency = Column(String(3), default="INR", nullable=False)
    status = Column(String(20), default="pending", nullable=False)  # pending, paid, failed, refunded
    gateway = Column(String(30), nullable=True)
    gateway_order_id = Column(String(100), unique=True, nullable=True)
    gateway_payment_id = Column(String(100), nullable=True)
    payment_method = Column(String(30), nullable=True)
    failure_reason = Column(Text, nullable=True)
    paid_at = Column(DateTime, nullable=True)
    gateway_response = Column(JSON, nullable=True)

    __table_args__ = (Index("ix_payments_user_status", "user_id", "status"),)

    # Relationships
    user = relationship("User", back_populates="payments")
    subscription = relationship("Subscription", back_populates="payments")
    bonuses = relationship("BonusTransaction", back_populates="payment")

    @classmethod
    def paid(cls):
        return cls.status == "paid"


class Wallet(TimestampMixin, Base):
    """User wallet; balances in paise."""

    __tablename__ = "wallets"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), unique=True, nullable=False)
    balance_paise = Column(BigInteger, default=0, nullable=False)
    locked_balance_paise = Column(BigInteger, default=0, nullable=False)

    # Relationships
    user = relationship("User", back_populates="wallet")
    transactions = relationship("WalletTransaction", back_populates="wallet")

    @property
    def available_balance_paise(self) -> int:
        return self.balance_paise - self.locked_balance_paise


class WalletTransaction(Base):
    """Wallet ledger row; amounts and running balances in paise."""

    __tablename__ = "wallet_transactions"

    id = Column(Integer, primary_key=True)
    wallet_id = Column(Integer, ForeignKey("wallets.id"), nullable=False)
    transaction_type = Column(String(30), nullable=False)  # deposit, withdrawal, bonus, investment, refund
    amount_paise = Column(BigInteger, nullable=False)
    balance_before_paise = Column(BigInteger, nullable=False)
    balance_after_paise = Column(BigInteger, nullable=False)
    reference_type = Column(String(30), nullable=True)
    reference_id = Column(Integer, nullable=True)
    description = Column(String(255), nullable=True)
    created_at = Column(DateTime, default=now_utc, nullable=False)

    # Relationships
    wallet = relationship("Wallet", back_populates="transactions")


class Withdrawal(TimestampMixin, Base):
    """A user's request to withdraw wallet funds to their bank."""

    __tablename__ = "withdrawals"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    fee = Column(Numeric(10, 2), default=Decimal("0.00"), nullable=False)
    tds_deducted = Column(Numeric(10, 2), default=Decimal("0.00"), nullable=False)
    status = Column(String(20), default="pending", nullable=False)  # pending, approved, processed, rejected
    bank_reference = Column(String(100), nullable=True)
    rejection_reason = Column(Text, nullable=True)
    approved_by_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    processed_at = Column(DateTime, nullable=True)

    # Relationships
    user = relationship("User", foreign_keys=[user_id])
    approved_by = relationship("User", foreign_keys=[approved_by_id])

    @property
    def net_amount(self) -> Decimal:
        return self.amount - (self.fee or Decimal("0")) - (self.tds_deducted or Decimal("0"))


class BonusTransaction(Base):
    """A bonus credited to a user. Reversals are new rows with negated amounts."""

    __tablename__ = "bonus_transactions"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    subscription_id = Column(Integer, ForeignKey("subscriptions.id"), nullable=True)
    payment_id = Column(Integer, ForeignKey("payments.id"), nullable=True)
    bonus_type = Column(String(30), nullable=False)  # progressive, milestone, referral, celebration, reversal
    amount = Column(Numeric(10, 2), nullable=False)
    tds_deducted = Column(Numeric(10, 2), default=Decimal("0.00"), nullable=False)
    multiplier = Column(Numeric(5, 2), default=Decimal("1.00"), nullable=False)
    base_amount = Column(Numeric(10, 2), nullable=True)
    description = Column(String(255), nullable=True)
    reversal_of_id = Column(Integer, ForeignKey("bonus_transactions.id"), nullable=True)
    reversed_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=now_utc, nullable=False)

    # Relationships
    user = relationship("User")
    payment = relationship("Payment", back_populates="bonuses")
    reversal_of = relationship("BonusTransaction", remote_side=[id])

    @property
    def net_amount(self) -> Decimal:
        return self.amount - (self.tds_deducted or Decimal("0"))
