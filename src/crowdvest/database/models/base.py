"""Shared SQLAlchemy base, mixins and session factory."""

from datetime import datetime, UTC
from sqlalchemy import Column, DateTime, create_engine
from sqlalchemy.orm import declarative_base, sessionmaker, Session

Base = declarative_base()


def now_utc() -> datetime:
    """Return an aware UTC datetime for default/updated timestamps."""
    return datetime.now(UTC)


class TimestampMixin:
    """created_at / updated_at columns for ordinary mutable records."""

    created_at = Column(DateTime, default=now_utc, nullable=False)
    updated_at = Column(DateTime, default=now_utc, onupdate=now_utc, nullable=False)


class SoftDeleteMixin:
    """Rows are hidden by setting deleted_at instead of being removed."""

    deleted_at = Column(DateTime, nullable=True)

    @property
    def is_deleted(self) -> bool:
        return self.deleted_at is not None

    @classmethod
    def visible(cls):
        """Filter expression excluding soft-deleted rows."""
        return cls.deleted_at.is_(None)


class AuditRecordMixin:
    """Write-once records: creation timestamp only, no updated_at.

    Subclasses set ``__immutable_kind__`` to one of the kinds in
    ``crowdvest.domain.guards.AUDIT_KINDS``; the flush listener in
    ``crowdvest.database.immutability`` uses it to pick the rule.
    """

    __immutable_kind__ = ""

    created_at = Column(DateTime, default=now_utc, nullable=False)


def create_session_factory(database_url: str) -> sessionmaker[Session]:
    """Create a SQLAlchemy session factory and make sure all tables exist."""
    engine = create_engine(database_url, echo=False)
    Base.metadata.create_all(engine)
    return sessionmaker(bind=engine)
