"""Saga tracking and orchestration.

A saga is a multi-step business transaction (e.g. investment allocation:
debit wallet, reserve shares, create investment). Each completed step is
recorded so that, when a later step fails, the earlier ones can be
compensated in reverse order and the whole run can be inspected afterwards.
"""

import logging
import uuid
from abc import ABC, abstractmethod
from datetime import datetime, timedelta, UTC
from typing import Any, Optional

from crowdvest.database.base import Database
from crowdvest.domain import errors
from crowdvest.domain.entities import SagaExecution, SagaStep
from crowdvest.domain.errors import NotFoundError, ValidationError
from crowdvest.domain.guards import (
    SAGA_STEP,
    SAGA_PENDING,
    SAGA_IN_PROGRESS,
    SAGA_COMPLETED,
    SAGA_FAILED,
    SAGA_COMPENSATED,
    SAGA_MANUALLY_RESOLVED,
)

logger = logging.getLogger(__name__)

COMPENSATION_SUCCEEDED = "compensated"
COMPENSATION_FAILED = "failed"

DEFAULT_STALE_AFTER = timedelta(hours=1)


class SagaService:
    """Service for recording saga progress."""

    def __init__(self, db: Database):
        """Initialize saga service.

        Args:
            db: Database instance
        """
        self.db = db

    def _require(self, saga_id: str) -> SagaExecution:
        saga = self.db.get_saga(saga_id)
        if saga is None:
            raise NotFoundError(errors.not_found("Saga", saga_id))
        return saga

    def start_saga(
        self,
        saga_type: str,
        metadata: Optional[dict[str, Any]] = None,
        user_id: Optional[int] = None,
        steps_total: int = 0,
    ) -> SagaExecution:
        """Create a pending saga with a fresh UUID.

        Args:
            saga_type: Kind of business transaction (e.g., "investment_allocation")
            metadata: JSON-serialisable context for the run
            user_id: User the saga acts for, if any
            steps_total: Number of steps expected

        Returns:
            The created saga

        Raises:
            ValidationError: If saga_type is empty or steps_total is negative
        """
        if not saga_type or not saga_type.strip():
            raise ValidationError("Saga type is required")
        if steps_total < 0:
            raise ValidationError(f"steps_total cannot be negative (got {steps_total})")

        saga_id = str(uuid.uuid4())
        self.db.create_saga(
            saga_id=saga_id,
            saga_type=saga_type,
            user_id=user_id,
            metadata=metadata,
            steps_total=steps_total,
        )
        logger.info("Started saga %s (%s)", saga_id, saga_type)
        return self._require(saga_id)

    def begin(self, saga_id: str) -> None:
        """Move a pending saga to in_progress."""
        self._require(saga_id)
        self.db.update_saga(
            saga_id, {"status": SAGA_IN_PROGRESS, "started_at": datetime.now(UTC)}
        )

    def record_step(
        self,
        saga_id: str,
        step_number: int,
        operation: str,
        result_data: Optional[dict[str, Any]] = None,
    ) -> int:
        """Record a completed step.

        Step numbers start at 1 and must strictly increase within a saga.

        Returns:
            Step ID

        Raises:
            NotFoundError: If the saga does not exist
            ValidationError: If the step number does not follow the last one
            ImmutableRecordError: If the saga has already finished
        """
        self._require(saga_id)
        if step_number < 1:
            raise ValidationError(f"Step number must be at least 1 (got {step_number})")

        steps = self.db.list_saga_steps(saga_id)
        if steps and step_number <= steps[-1].step_number:
            raise ValidationError(
                f"Step {step_number} of saga {saga_id} must come after step {steps[-1].step_number}"
            )

        step_id = self.db.create_saga_step(
            saga_id=saga_id,
            step_number=step_number,
            operation=operation,
            executed_at=datetime.now(UTC),
            result_data=result_data,
        )
        logger.debug("Saga %s step %d (%s) completed", saga_id, step_number, operation)
        return step_id

    def complete(self, saga_id: str) -> None:
        """Mark a saga completed."""
        self._require(saga_id)
        self.db.update_saga(saga_id, {"status": SAGA_COMPLETED, "completed_at": datetime.now(UTC)})
        logger.info("Saga %s completed", saga_id)

    def fail(self, saga_id: str, reason: str, step: Optional[int] = None) -> None:
        """Mark a saga failed. The reason and failing step are permanent."""
        self._require(saga_id)
        self.db.update_saga(
            saga_id,
            {
                "status": SAGA_FAILED,
                "failure_reason": reason,
                "failure_step": step,
                "failed_at": datetime.now(UTC),
            },
        )
        logger.error("Saga %s failed at step %s: %s", saga_id, step, reason)

    def record_compensation(self, step_id: int, success: bool, error: Optional[str] = None) -> None:
        """Record the outcome of compensating one step.

        The step's result_data is left untouched.
        """
        self.db.update_audit_record(
            SAGA_STEP,
            step_id,
            {
                "compensation_status": COMPENSATION_SUCCEEDED if success else COMPENSATION_FAILED,
                "compensation_error": error,
                "compensated_at": datetime.now(UTC),
            },
        )

    def mark_compensated(self, saga_id: str) -> None:
        """Mark a failed saga as fully compensated."""
        self._require(saga_id)
        self.db.update_saga(
            saga_id, {"status": SAGA_COMPENSATED, "compensated_at": datetime.now(UTC)}
        )
        logger.info("Saga %s compensated", saga_id)

    def resolve_manually(self, saga_id: str, resolved_by: int, notes: Optional[str] = None) -> None:
        """Close a saga by operator decision.

        This is the only transition allowed out of completed or compensated.
        """
        self._require(saga_id)
        self.db.update_saga(
            saga_id,
            {
                "status": SAGA_MANUALLY_RESOLVED,
                "resolved_at": datetime.now(UTC),
                "resolved_by": resolved_by,
                "resolution_notes": notes,
            },
        )
        logger.info("Saga %s manually resolved by user %s", saga_id, resolved_by)

    def get_saga(self, saga_id: str) -> Optional[SagaExecution]:
        """Get a saga by its saga_id."""
        return self.db.get_saga(saga_id)

    def list_sagas(
        self,
        status: Optional[str] = None,
        saga_type: Optional[str] = None,
        limit: Optional[int] = None,
    ) -> list[SagaExecution]:
        """List sagas, newest first."""
        return self.db.list_sagas(status=status, saga_type=saga_type, limit=limit)

    def list_steps(self, saga_id: str) -> list[SagaStep]:
        """List the recorded steps of a saga in order."""
        return self.db.list_saga_steps(saga_id)

    def needs_attention(self, stale_after: timedelta = DEFAULT_STALE_AFTER) -> list[SagaExecution]:
        """Sagas an operator should look at.

        That is every failed saga (compensation did not finish) plus pending or
        in-progress sagas that started longer than ``stale_after`` ago.
        """
        cutoff = datetime.now(UTC) - stale_after
        failed = self.db.list_sagas(status=SAGA_FAILED)
        stale = self.db.list_stale_sagas([SAGA_PENDING, SAGA_IN_PROGRESS], cutoff)
        return failed + stale


class SagaOperation(ABC):
    """One step of a saga: a forward action and the action that undoes it."""

    @property
    def name(self) -> str:
        return type(self).__name__

    @abstractmethod
    def execute(self, context: dict[str, Any]) -> Optional[dict[str, Any]]:
        """Perform the step. The returned dict is stored as the step's result_data."""

    @abstractmethod
    def compensate(self, context: dict[str, Any], result: Optional[dict[str, Any]]) -> None:
        """Undo the step given the result it produced."""


class SagaCoordinator:
    """Runs a list of operations as a tracked saga."""

    def __init__(self, sagas: SagaService):
        self.sagas = sagas

    def execute(
        self,
        saga_type: str,
        operations: list[SagaOperation],
        metadata: Optional[dict[str, Any]] = None,
        user_id: Optional[int] = None,
    ) -> SagaExecution:
        """Run operations in order.

        On the first failure the saga is marked failed, every completed
        operation is compensated in reverse order with its outcome recorded on
        its step, the saga is marked compensated if all compensations
        succeeded, and the original exception is re-raised. A saga whose
        compensation partly failed stays failed and shows up in
        ``SagaService.needs_attention``.

        Args:
            saga_type: Kind of business transaction
            operations: Operations to run
            metadata: Initial context shared by all operations
            user_id: User the saga acts for, if any

        Returns:
            The completed saga
        """
        saga = self.sagas.start_saga(
            saga_type, metadata=metadata, user_id=user_id, steps_total=len(operations)
        )
        context: dict[str, Any] = dict(metadata or {})
        context["saga_id"] = saga.saga_id
        self.sagas.begin(saga.saga_id)

        completed: list[tuple[int, SagaOperation, Optional[dict[str, Any]]]] = []
        for step_number, operation in enumerate(operations, start=1):
            try:
                result = operation.execute(context)
            except Exception as e:
                self.sagas.fail(saga.saga_id, str(e) or type(e).__name__, step_number)
                self._compensate(saga.saga_id, context, completed)
                raise
            step_id = self.sagas.record_step(saga.saga_id, step_number, operation.name, result)
            completed.append((step_id, operation, result))

        self.sagas.complete(saga.saga_id)
        return self.sagas.get_saga(saga.saga_id)

    def _compensate(
        self,
        saga_id: str,
        context: dict[str, Any],
        completed: list[tuple[int, SagaOperation, Optional[dict[str, Any]]]],
    ) -> None:
        all_compensated = True
        for step_id, operation, result in reversed(completed):
            try:
                operation.compensate(context, result)
            except Exception as e:
                all_compensated = False
                logger.exception("Compensation of %s in saga %s failed", operation.name, saga_id)
                self.sagas.record_compensation(step_id, success=False, error=str(e))
            else:
                self.sagas.record_compensation(step_id, success=True)

        if all_compensated:
            self.sagas.mark_compensated(saga_id)
        else:
            logger.error("Saga %s left failed: compensation incomplete", saga_id)
