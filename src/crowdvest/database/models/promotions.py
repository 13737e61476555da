"""Referral, offer campaign and lucky draw models."""

from datetime import date, datetime
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
    UniqueConstraint,
    Index,
)
from sqlalchemy.orm import relationship

from crowdvest.database.models.base import Base, TimestampMixin, now_utc


class ReferralCampaign(TimestampMixin, Base):
    """Time-boxed referral campaign with a bonus multiplier."""

    __tablename__ = "referral_campaigns"

    id = Column(Integer, primary_key=True)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    start_date = Column(Date, nullable=False)
    end_date = Column(Date, nullable=False)
    multiplier = Column(Numeric(5, 2), default=Decimal("1.00"), nullable=False)
    bonus_amount = Column(Numeric(10, 2), default=Decimal("0.00"), nullable=False)
    max_referrals = Column(Integer, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)

    # Relationships
    referrals = relationship("Referral", back_populates="campaign")

    @classmethod
    def running_on(cls, on_date: date):
        return cls.is_active.is_(True) & (cls.start_date <= on_date) & (cls.end_date >= on_date)


class Referral(TimestampMixin, Base):
    """A referrer → referred user link. Each user can be referred once."""

    __tablename__ = "referrals"

    id = Column(Integer, primary_key=True)
    referrer_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    referred_id = Column(Integer, ForeignKey("users.id"), unique=True, nullable=False)
    campaign_id = Column(Integer, ForeignKey("referral_campaigns.id"), nullable=True)
    status = Column(String(20), default="pending", nullable=False)  # pending, completed
    completed_at = Column(DateTime, nullable=True)

    # Relationships
    referrer = relationship("User", foreign_keys=[referrer_id])
    referred = relationship("User", foreign_keys=[referred_id])
    campaign = relationship("ReferralCampaign", back_populates="referrals")


class Campaign(TimestampMixin, Base):
    """Offer campaign redeemable by code against an investment, subscription or payment."""

    __tablename__ = "campaigns"

    id = Column(Integer, primary_key=True)
    code = Column(String(50), unique=True, nullable=False)
    title = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    discount_type = Column(String(20), nullable=False)  # percentage, fixed
    discount_percent = Column(Numeric(5, 2), nullable=True)
    discount_amount = Column(Numeric(10, 2), nullable=True)
    max_discount = Column(Numeric(10, 2), nullable=True)
    min_amount = Column(Numeric(12, 2), nullable=True)
    usage_limit = Column(Integer, nullable=True)
    usage_count = Column(Integer, default=0, nullable=False)
    per_user_limit = Column(Integer, nullable=True)
    starts_at = Column(DateTime, nullable=True)
    ends_at = Column(DateTime, nullable=True)
    is_active = Column(Boolean, default=True, nullable=False)

    # Relationships
    usages = relationship("CampaignUsage", back_populates="campaign")

    @classmethod
    def live_at(cls, moment: datetime):
        return (
            cls.is_active.is_(True)
            & ((cls.starts_at.is_(None)) | (cls.starts_at <= moment))
            & ((cls.ends_at.is_(None)) | (cls.ends_at >= moment))
        )


class CampaignUsage(Base):
    """One redemption of a campaign.

    ``applicable_type``/``applicable_id`` is a tagged reference resolved
    through ``crowdvest.database.polymorphic``.
    """

    __tablename__ = "campaign_usages"

    id = Column(Integer, primary_key=True)
    campaign_id = Column(Integer, ForeignKey("campaigns.id"), nullable=False)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    applicable_type = Column(String(30), nullable=False)  # investment, subscription, payment
    applicable_id = Column(Integer, nullable=False)
    original_amount = Column(Numeric(12, 2), nullable=False)
    discount_applied = Column(Numeric(12, 2), nullable=False)
    used_at = Column(DateTime, default=now_utc, nullable=False)

    __table_args__ = (
        Index("ix_campaign_usages_applicable", "applicable_type", "applicable_id"),
    )

    # Relationships
    campaign = relationship("Campaign", back_populates="usages")
    user = relationship("User")

    @property
    def final_amount(self) -> Decimal:
        return self.original_amount - self.discount_applied


class LuckyDraw(TimestampMixin, Base):
    """Monthly lucky draw."""

    __tablename__ = "lucky_draws"

    id = Column(Integer, primary_key=True)
    name = Column(String(255), nullable=False)
    draw_date = Column(Date, nullable=False)
    prize_structure = Column(JSON, nullable=False)
    status = Column(String(20), default="open", nullable=False)  # open, drawn, cancelled
    drawn_at = Column(DateTime, nullable=True)

    # Relationships
    entries = relationship("LuckyDrawEntry", back_populates="draw", cascade="all, delete-orphan")


class LuckyDrawEntry(TimestampMixin, Base):
    """A user's entries in a draw; total entries are base + bonus."""

    __tablename__ = "lucky_draw_entries"

    id = Column(Integer, primary_key=True)
    lucky_draw_id = Column(Integer, ForeignKey("lucky_draws.id"), nullable=False)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    payment_id = Column(Integer, ForeignKey("payments.id"), nullable=True)
    base_entries = Column(Integer, default=1, nullable=False)
    bonus_entries = Column(Integer, default=0, nullable=False)
    is_winner = Column(Boolean, default=False, nullable=False)
    prize_rank = Column(Integer, nullable=True)
    prize_amount = Column(Numeric(10, 2), nullable=True)

    __table_args__ = (UniqueConstraint("lucky_draw_id", "user_id", name="uq_lucky_draw_user"),)

    # Relationships
    draw = relationship("LuckyDraw", back_populates="entries")
    user = relationship("User")

    @property
    def total_entries(self) -> int:
        return (self.base_entries or 0) + (self.bonus_entries or 0)
