"""Activity, error and analytics log models."""

from sqlalchemy import (
    Column,
    Integer,
    String,
    Text,
    ForeignKey,
    DateTime,
    JSON,
    Index,
)
from sqlalchemy.orm import relationship

from crowdvest.database.models.base import Base, AuditRecordMixin, now_utc


class ActivityLog(AuditRecordMixin, Base):
    """A logged action by an actor against an optional target. Write-once.

    ``target_type``/``target_id`` is a tagged reference resolved through
    ``crowdvest.database.polymorphic``.
    """

    __tablename__ = "activity_logs"
    __immutable_kind__ = "activity_log"

    id = Column(Integer, primary_key=True)
    actor_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    action = Column(String(100), nullable=False)
    target_type = Column(String(30), nullable=True)
    target_id = Column(Integer, nullable=True)
    description = Column(Text, nullable=True)
    old_values = Column(JSON, nullable=True)
    new_values = Column(JSON, nullable=True)
    ip_address = Column(String(45), nullable=True)
    user_agent = Column(Text, nullable=True)

    __table_args__ = (
        Index("ix_activity_logs_actor_created", "actor_id", "created_at"),
        Index("ix_activity_logs_target", "target_type", "target_id"),
        Index("ix_activity_logs_action", "action"),
    )

    # Relationships
    actor = relationship("User")


class ErrorLog(Base):
    """Application error captured for later triage."""

    __tablename__ = "error_logs"

    id = Column(Integer, primary_key=True)
    level = Column(String(10), nullable=False)  # error, warning, critical
    message = Column(Text, nullable=False)
    exception_class = Column(String(255), nullable=True)
    context = Column(JSON, nullable=True)
    url = Column(String(500), nullable=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    ip_address = Column(String(45), nullable=True)
    resolved_at = Column(DateTime, nullable=True)
    created_at = Column(DateTime, default=now_utc, nullable=False)

    # Relationships
    user = relationship("User")

    @classmethod
    def unresolved(cls):
        return cls.resolved_at.is_(None)


class InvestorViewHistory(Base):
    """A company page view by an investor (analytics)."""

    __tablename__ = "investor_view_history"

    id = Column(Integer, primary_key=True)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=False)
    company_id = Column(Integer, ForeignKey("companies.id"), nullable=False)
    session_id = Column(String(100), nullable=True)
    ip_address = Column(String(45), nullable=True)
    user_agent = Column(Text, nullable=True)
    duration_seconds = Column(Integer, nullable=True)
    viewed_at = Column(DateTime, default=now_utc, nullable=False)

    __table_args__ = (Index("ix_investor_view_history_company_viewed", "company_id", "viewed_at"),)

    # Relationships
    user = relationship("User")
    company = relationship("Company")
