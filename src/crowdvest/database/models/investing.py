"""Plan, subscription and investment models."""

from decimal import Decimal
from sqlalchemy import (
    Column,
    Integer,
    String,
    Text,
    ForeignKey,
    DateTime,
    Date,
    Numeric,
    Boolean,
    JSON,
)
from sqlalchemy.orm import relationship

from crowdvest.database.models.base import Base, TimestampMixin, SoftDeleteMixin


class Plan(TimestampMixin, SoftDeleteMixin, Base):
    """Recurring investment plan users subscribe to."""

    __tablename__ = "plans"

    id = Column(Integer, primary_key=True)
    name = Column(String(100), nullable=False)
    slug = Column(String(120), unique=True, nullable=False)
    description = Column(Text, nullable=True)
    monthly_amount = Column(Numeric(12, 2), nullable=False)
    duration_months = Column(Integer, nullable=False)
    bonus_percentage = Column(Numeric(5, 2), default=Decimal("0.00"), nullable=False)
    features = Column(JSON, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)
    display_order = Column(Integer, default=0, nullable=False)

    # Relationships
    subscriptions = relationship("Subscription", back_populates="plan")

    @property
    def total_commitment(self) -> Decimal:
        return self.monthly_amount * self.duration_months


class Subscription(TimestampMixin, Base):
    """A user's subscription to a plan."""

    __tablename__ = "subscriptions"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    plan_id = Column(Integer, ForeignKey("plans.id"), nullable=False)
    subscription_code = Column(String(32), unique=True, nullable=False)
    amount = Column(Numeric(12, 2), nullable=False)
    status = Column(String(20), default="active", nullable=False)  # active, paused, cancelled, completed
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=True)
    next_payment_date = Column(Date, nullable=True)
    consecutive_payments_count = Column(Integer, default=0, nullable=False)
    is_auto_debit = Column(Boolean, default=False, nullable=False)
    cancelled_at = Column(DateTime, nullable=True)
    cancellation_reason = Column(Text, nullable=True)

    # Relationships
    user = relationship("User", back_populates="subscriptions")
    plan = relationship("Plan", back_populates="subscriptions")
    payments = relationship("Payment", back_populates="subscription")
    investments = relationship("UserInvestment", back_populates="subscription")

    @classmethod
    def active(cls):
        return cls.status == "active"


class UserInvestment(TimestampMixin, Base):
    """Shares allocated to a user in a deal."""

    __tablename__ = "user_investments"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    deal_id = Column(Integer, ForeignKey("deals.id"), nullable=False)
    subscription_id = Column(Integer, ForeignKey("subscriptions.id"), nullable=True)
    payment_id = Column(Integer, ForeignKey("payments.id"), nullable=True)
    shares = Column(Integer, nullable=False)
    price_per_share = Column(Numeric(12, 2), nullable=False)
    value_allocated = Column(Numeric(14, 2), nullable=False)
    status = Column(String(20), default="active", nullable=False)  # active, exited, reversed
    is_reversed = Column(Boolean, default=False, nullable=False)
    reversed_at = Column(DateTime, nullable=True)
    reversal_reason = Column(Text, nullable=True)

    # Relationships
    user = relationship("User")
    deal = relationship("Deal", back_populates="investments")
    subscription = relationship("Subscription", back_populates="investments")
    payment = relationship("Payment")

    @classmethod
    def active(cls):
        return cls.is_reversed.is_(False)
