"""Legal agreement, version and signature models."""

from sqlalchemy import (
    Column,
    Integer,
    String,
    Text,
    ForeignKey,
    DateTime,
    Date,
    Boolean,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship

from crowdvest.database.models.base import Base, TimestampMixin, AuditRecordMixin, now_utc


class LegalAgreement(TimestampMixin, Base):
    """A legal document users must accept (terms, privacy policy, risk disclosure)."""

    __tablename__ = "legal_agreements"

    id = Column(Integer, primary_key=True)
    agreement_type = Column(String(50), nullable=False)  # terms, privacy, risk_disclosure, ...
    title = Column(String(255), nullable=False)
    slug = Column(String(280), unique=True, nullable=False)
    status = Column(String(20), default="draft", nullable=False)  # draft, active, archived
    current_version = Column(String(20), nullable=True)
    requires_signature = Column(Boolean, default=True, nullable=False)

    # Relationships
    versions = relationship(
        "LegalAgreementVersion",
        back_populates="agreement",
        order_by="LegalAgreementVersion.id",
    )
    signatures = relationship("UserAgreementSignature", back_populates="agreement")


class LegalAgreementVersion(Base):
    """Published text of an agreement at one version."""

    __tablename__ = "legal_agreement_versions"

    id = Column(Integer, primary_key=True)
    agreement_id = Column(Integer, ForeignKey("legal_agreements.id"), nullable=False)
    version = Column(String(20), nullable=False)
    content = Column(Text, nullable=False)
    change_summary = Column(Text, nullable=True)
    effective_date = Column(Date, nullable=False)
    published_by_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    created_at = Column(DateTime, default=now_utc, nullable=False)

    __table_args__ = (UniqueConstraint("agreement_id", "version", name="uq_agreement_version"),)

    # Relationships
    agreement = relationship("LegalAgreement", back_populates="versions")
    published_by = relationship("User")


class UserAgreementSignature(AuditRecordMixin, Base):
    """Proof that a user accepted a specific agreement version. Write-once."""

    __tablename__ = "user_agreement_signatures"
    __immutable_kind__ = "user_agreement_signature"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    agreement_id = Column(Integer, ForeignKey("legal_agreements.id"), nullable=False)
    agreement_version = Column(String(20), nullable=False)
    signed_at = Column(DateTime, default=now_utc, nullable=False)
    ip_address = Column(String(45), nullable=True)
    user_agent = Column(Text, nullable=True)
    content_hash = Column(String(64), nullable=False)

    __table_args__ = (
        UniqueConstraint(
            "user_id", "agreement_id", "agreement_version", name="uq_user_agreement_version"
        ),
    )

    # Relationships
    user = relationship("User")
    agreement = relationship("LegalAgreement", back_populates="signatures")
