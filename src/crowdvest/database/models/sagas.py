"""Saga execution tracking models.

Both tables are audit records: a saga may still progress through its state
machine after creation and steps may still record compensation, but nothing
else changes once written (see ``crowdvest.domain.guards``).
"""

from sqlalchemy import (
    Column,
    Integer,
    String,
    Text,
    ForeignKey,
    DateTime,
    JSON,
    UniqueConstraint,
    Index,
)
from sqlalchemy.orm import relationship

from crowdvest.database.models.base import Base, AuditRecordMixin


class SagaExecution(AuditRecordMixin, Base):
    """A multi-step business transaction tracked for crash recovery."""

    __tablename__ = "saga_executions"
    __immutable_kind__ = "saga_execution"

    id = Column(Integer, primary_key=True)
    saga_id = Column(String(36), unique=True, nullable=False)
    saga_type = Column(String(50), nullable=False)
    user_id = Column(Integer, ForeignKey("users.id"), nullable=True)
    status = Column(String(20), default="pending", nullable=False)
    saga_metadata = Column("metadata", JSON, nullable=True)
    steps_total = Column(Integer, default=0, nullable=False)
    steps_completed = Column(Integer, default=0, nullable=False)
    failure_reason = Column(Text, nullable=True)
    failure_step = Column(Integer, nullable=True)
    started_at = Column(DateTime, nullable=True)
    completed_at = Column(DateTime, nullable=True)
    failed_at = Column(DateTime, nullable=True)
    compensated_at = Column(DateTime, nullable=True)
    resolved_at = Column(DateTime, nullable=True)
    resolved_by = Column(Integer, ForeignKey("users.id"), nullable=True)
    resolution_notes = Column(Text, nullable=True)

    __table_args__ = (Index("ix_saga_executions_status_created", "status", "created_at"),)

    # Relationships
    user = relationship("User", foreign_keys=[user_id])
    resolver = relationship("User", foreign_keys=[resolved_by])
    steps = relationship("SagaStep", back_populates="saga", order_by="SagaStep.step_number")

    @property
    def progress_percentage(self) -> int:
        if not self.steps_total:
            return 0
        return int(self.steps_completed * 100 / self.steps_total)


class SagaStep(AuditRecordMixin, Base):
    """One executed step of a saga and, later, its compensation outcome."""

    __tablename__ = "saga_steps"
    __immutable_kind__ = "saga_step"

    id = Column(Integer, primary_key=True)
    saga_execution_id = Column(Integer, ForeignKey("saga_executions.id"), nullable=False)
    step_number = Column(Integer, nullable=False)
    operation = Column(String(255), nullable=False)
    status = Column(String(20), default="completed", nullable=False)
    result_data = Column(JSON, nullable=True)
    executed_at = Column(DateTime, nullable=False)
    compensation_status = Column(String(20), nullable=True)  # compensated, failed
    compensation_error = Column(Text, nullable=True)
    compensated_at = Column(DateTime, nullable=True)

    __table_args__ = (
        UniqueConstraint("saga_execution_id", "step_number", name="uq_saga_step_number"),
    )

    # Relationships
    saga = relationship("SagaExecution", back_populates="steps")
