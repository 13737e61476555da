"""Sector, company, deal and company snapshot models."""

from decimal import Decimal
from typing import Optional
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
    Index,
)
from sqlalchemy.orm import relationship

from crowdvest.database.models.base import (
    Base,
    TimestampMixin,
    SoftDeleteMixin,
    AuditRecordMixin,
)


class Sector(TimestampMixin, SoftDeleteMixin, Base):
    """Industry sector (reference data for companies and deals)."""

    __tablename__ = "sectors"

    id = Column(Integer, primary_key=True)
    name = Column(String(100), nullable=False)
    slug = Column(String(120), unique=True, nullable=False)
    slug_overridden = Column(Boolean, default=False, nullable=False)
    description = Column(Text, nullable=True)
    icon = Column(String(100), nullable=True)
    color = Column(String(20), nullable=True)
    sort_order = Column(Integer, default=0, nullable=False)
    is_active = Column(Boolean, default=True, nullable=False)

    # Relationships
    companies = relationship("Company", back_populates="sector")
    deals = relationship("Deal", back_populates="sector")


class Company(TimestampMixin, SoftDeleteMixin, Base):
    """A company listed on the platform (aggregate root for its documents)."""

    __tablename__ = "companies"

    id = Column(Integer, primary_key=True)
    name = Column(String(255), nullable=False)
    slug = Column(String(280), unique=True, nullable=False)
    slug_overridden = Column(Boolean, default=False, nullable=False)
    sector_id = Column(Integer, ForeignKey("sectors.id"), nullable=True)
    description = Column(Text, nullable=True)
    logo_url = Column(String(500), nullable=True)
    website = Column(String(255), nullable=True)
    founded_year = Column(Integer, nullable=True)
    headquarters = Column(String(255), nullable=True)
    ceo_name = Column(String(255), nullable=True)
    latest_valuation = Column(Numeric(18, 2), nullable=True)
    total_funding = Column(Numeric(18, 2), nullable=True)
    status = Column(String(20), default="draft", nullable=False)  # draft, active, inactive
    is_featured = Column(Boolean, default=False, nullable=False)
    is_verified = Column(Boolean, default=False, nullable=False)

    # Relationships
    sector = relationship("Sector", back_populates="companies")
    documents = relationship("CompanyDocument", back_populates="company", cascade="all, delete-orphan")
    team_members = relationship(
        "CompanyTeamMember", back_populates="company", cascade="all, delete-orphan"
    )
    funding_rounds = relationship(
        "CompanyFundingRound", back_populates="company", cascade="all, delete-orphan"
    )
    deals = relationship("Deal", back_populates="company")
    snapshots = relationship("CompanySnapshot", back_populates="company")

    @classmethod
    def active(cls):
        return (cls.status == "active") & cls.deleted_at.is_(None)


class CompanyDocument(TimestampMixin, Base):
    """Document uploaded for a company (pitch deck, financials, ...)."""

    __tablename__ = "company_documents"

    id = Column(Integer, primary_key=True)
    company_id = Column(Integer, ForeignKey("companies.id"), nullable=False)
    uploaded_by_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    title = Column(String(255), nullable=False)
    document_type = Column(String(50), nullable=False)
    file_path = Column(String(500), nullable=False)
    file_size_kb = Column(Integer, nullable=True)
    is_public = Column(Boolean, default=False, nullable=False)

    # Relationships
    company = relationship("Company", back_populates="documents")
    uploaded_by = relationship("User")


class CompanyTeamMember(TimestampMixin, Base):
    """Founder or key team member of a company."""

    __tablename__ = "company_team_members"

    id = Column(Integer, primary_key=True)
    company_id = Column(Integer, ForeignKey("companies.id"), nullable=False)
    name = Column(String(255), nullable=False)
    designation = Column(String(255), nullable=True)
    bio = Column(Text, nullable=True)
    photo_url = Column(String(500), nullable=True)
    linkedin_url = Column(String(500), nullable=True)
    sort_order = Column(Integer, default=0, nullable=False)

    # Relationships
    company = relationship("Company", back_populates="team_members")


class CompanyFundingRound(TimestampMixin, Base):
    """A historical funding round of a company."""

    __tablename__ = "company_funding_rounds"

    id = Column(Integer, primary_key=True)
    company_id = Column(Integer, ForeignKey("companies.id"), nullable=False)
    round_name = Column(String(50), nullable=False)  # seed, series_a, ...
    amount_raised = Column(Numeric(18, 2), nullable=False)
    valuation = Column(Numeric(18, 2), nullable=True)
    round_date = Column(Date, nullable=True)
    investors = Column(JSON, nullable=True)

    # Relationships
    company = relationship("Company", back_populates="funding_rounds")


class Deal(TimestampMixin, SoftDeleteMixin, Base):
    """An investable offering of a company's shares."""

    __tablename__ = "deals"

    id = Column(Integer, primary_key=True)
    company_id = Column(Integer, ForeignKey("companies.id"), nullable=False)
    sector_id = Column(Integer, ForeignKey("sectors.id"), nullable=True)
    title = Column(String(255), nullable=False)
    slug = Column(String(280), unique=True, nullable=False)
    deal_type = Column(String(20), default="live", nullable=False)  # live, upcoming, closed
    min_investment = Column(Numeric(12, 2), nullable=False)
    max_investment = Column(Numeric(12, 2), nullable=True)
    share_price = Column(Numeric(12, 2), nullable=False)
    total_shares = Column(Integer, nullable=False)
    available_shares = Column(Integer, nullable=False)
    valuation = Column(Numeric(18, 2), nullable=True)
    status = Column(String(20), default="draft", nullable=False)  # draft, active, paused, closed
    opens_at = Column(DateTime, nullable=True)
    closes_at = Column(DateTime, nullable=True)
    highlights = Column(JSON, nullable=True)
    risks = Column(JSON, nullable=True)

    __table_args__ = (Index("ix_deals_status_deal_type", "status", "deal_type"),)

    # Relationships
    company = relationship("Company", back_populates="deals")
    sector = relationship("Sector", back_populates="deals")
    investments = relationship("UserInvestment", back_populates="deal")

    @property
    def subscribed_percentage(self) -> Decimal:
        """Share of the offering already allocated, as a two-decimal percentage."""
        if not self.total_shares:
            return Decimal("0.00")
        sold = self.total_shares - (self.available_shares or 0)
        return (Decimal(sold) * 100 / Decimal(self.total_shares)).quantize(Decimal("0.01"))

    @property
    def deal_value(self) -> Optional[Decimal]:
        if self.share_price is None or self.total_shares is None:
            return None
        return self.share_price * self.total_shares

    @classmethod
    def live(cls):
        return (cls.status == "active") & (cls.deal_type == "live") & cls.deleted_at.is_(None)


class CompanySnapshot(AuditRecordMixin, Base):
    """Point-in-time copy of a company's data. Write-once."""

    __tablename__ = "company_snapshots"
    __immutable_kind__ = "company_snapshot"

    id = Column(Integer, primary_key=True)
    company_id = Column(Integer, ForeignKey("companies.id"), nullable=False)
    snapshot_reason = Column(String(100), nullable=False)
    snapshot_data = Column(JSON, nullable=False)
    captured_by_id = Column(Integer, ForeignKey("users.id"), nullable=True)

    __table_args__ = (Index("ix_company_snapshots_company_created", "company_id", "created_at"),)

    # Relationships
    company = relationship("Company", back_populates="snapshots")
    captured_by = relationship("User")
