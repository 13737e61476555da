"""Feature flag, published content and secondary market models."""

from decimal import Decimal
from sqlalchemy import (
    Column,
    Integer,
    String,
    Text,
    ForeignKey,
    DateTime,
    Numeric,
    Boolean,
    JSON,
    Index,
)
from sqlalchemy.orm import relationship

from crowdvest.database.models.base import Base, TimestampMixin, SoftDeleteMixin, now_utc


class FeatureFlag(TimestampMixin, Base):
    """Feature flag with optional percentage rollout."""

    __tablename__ = "feature_flags"

    id = Column(Integer, primary_key=True)
    key = Column(String(100), unique=True, nullable=False)
    name = Column(String(255), nullable=False)
    description = Column(Text, nullable=True)
    is_active = Column(Boolean, default=False, nullable=False)
    rollout_percentage = Column(Integer, nullable=True)


class Report(TimestampMixin, SoftDeleteMixin, Base):
    """Downloadable research report; the file lives in external storage."""

    __tablename__ = "reports"

    id = Column(Integer, primary_key=True)
    title = Column(String(255), nullable=False)
    slug = Column(String(280), unique=True, nullable=False)
    description = Column(Text, nullable=True)
    report_type = Column(String(30), default="research", nullable=False)
    file_path = Column(String(500), nullable=False)
    cover_image = Column(String(500), nullable=True)
    file_size_kb = Column(Integer, nullable=True)
    pages = Column(Integer, nullable=True)
    downloads_count = Column(Integer, default=0, nullable=False)
    is_premium = Column(Boolean, default=False, nullable=False)
    published_at = Column(DateTime, nullable=True)


class BlogPost(TimestampMixin, SoftDeleteMixin, Base):
    """Blog article."""

    __tablename__ = "blog_posts"

    id = Column(Integer, primary_key=True)
    title = Column(String(255), nullable=False)
    slug = Column(String(280), unique=True, nullable=False)
    excerpt = Column(Text, nullable=True)
    content = Column(Text, nullable=False)
    author_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    featured_image = Column(String(500), nullable=True)
    tags = Column(JSON, nullable=True)
    status = Column(String(20), default="draft", nullable=False)  # draft, published
    published_at = Column(DateTime, nullable=True)

    # Relationships
    author = relationship("User")

    @classmethod
    def published(cls):
        return (cls.status == "published") & cls.deleted_at.is_(None)


class ShareListing(TimestampMixin, Base):
    """Offer by an investor to sell shares they hold on the secondary market."""

    __tablename__ = "share_listings"

    id = Column(Integer, primary_key=True)
    seller_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    investment_id = Column(Integer, ForeignKey("user_investments.id"), nullable=False)
    company_id = Column(Integer, ForeignKey("companies.id"), nullable=False)
    shares = Column(Integer, nullable=False)
    asking_price_per_share = Column(Numeric(12, 2), nullable=False)
    status = Column(String(20), default="pending", nullable=False)  # pending, approved, sold, rejected, withdrawn
    expires_at = Column(DateTime, nullable=True)

    # Relationships
    seller = relationship("User")
    investment = relationship("UserInvestment")
    company = relationship("Company")
    activities = relationship(
        "ListingActivity", back_populates="listing", order_by="ListingActivity.id"
    )

    @property
    def asking_total(self) -> Decimal:
        return self.asking_price_per_share * self.shares


class ListingActivity(Base):
    """Action taken on a listing; the actor is a tagged reference (user or admin)."""

    __tablename__ = "listing_activities"

    id = Column(Integer, primary_key=True)
    listing_id = Column(Integer, ForeignKey("share_listings.id"), nullable=False)
    actor_type = Column(String(20), nullable=False)  # user, admin
    actor_id = Column(Integer, nullable=False)
    action = Column(String(50), nullable=False)
    notes = Column(Text, nullable=True)
    created_at = Column(DateTime, default=now_utc, nullable=False)

    __table_args__ = (Index("ix_listing_activities_actor", "actor_type", "actor_id"),)

    # Relationships
    listing = relationship("ShareListing", back_populates="activities")
