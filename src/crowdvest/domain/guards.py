"""Validation and lifecycle guard functions.

Guards are pure: they inspect values and return a GuardResult instead of
raising. The write path decides what to do with a failed result (normally
``result.raise_if_failed()`` right before touching storage).
"""

from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any, Mapping, Optional

from crowdvest.domain import errors
from crowdvest.domain.errors import (
    DomainError,
    ImmutableRecordError,
    IntegrityGuardError,
    ValidationError,
)

# Write-once record kinds
ACTIVITY_LOG = "activity_log"
SAGA_EXECUTION = "saga_execution"
SAGA_STEP = "saga_step"
COMPANY_SNAPSHOT = "company_snapshot"
AGREEMENT_SIGNATURE = "user_agreement_signature"

AUDIT_KINDS = frozenset(
    {ACTIVITY_LOG, SAGA_EXECUTION, SAGA_STEP, COMPANY_SNAPSHOT, AGREEMENT_SIGNATURE}
)

# Saga states
SAGA_PENDING = "pending"
SAGA_IN_PROGRESS = "in_progress"
SAGA_COMPLETED = "completed"
SAGA_FAILED = "failed"
SAGA_COMPENSATED = "compensated"
SAGA_MANUALLY_RESOLVED = "manually_resolved"

SAGA_TRANSITIONS: dict[str, frozenset[str]] = {
    SAGA_PENDING: frozenset({SAGA_IN_PROGRESS, SAGA_FAILED, SAGA_MANUALLY_RESOLVED}),
    SAGA_IN_PROGRESS: frozenset({SAGA_COMPLETED, SAGA_FAILED, SAGA_MANUALLY_RESOLVED}),
    SAGA_COMPLETED: frozenset({SAGA_MANUALLY_RESOLVED}),
    SAGA_FAILED: frozenset({SAGA_COMPENSATED, SAGA_MANUALLY_RESOLVED}),
    SAGA_COMPENSATED: frozenset({SAGA_MANUALLY_RESOLVED}),
    SAGA_MANUALLY_RESOLVED: frozenset(),
}

SAGA_ACTIVE_STATUSES = frozenset({SAGA_PENDING, SAGA_IN_PROGRESS})

SAGA_PROGRESS_FIELDS = frozenset(
    {
        "status",
        "steps_completed",
        "steps_total",
        "started_at",
        "completed_at",
        "failed_at",
        "failure_reason",
        "failure_step",
    }
)
SAGA_COMPENSATION_FIELDS = frozenset({"status", "compensated_at"})
SAGA_RESOLUTION_FIELDS = frozenset({"status", "resolved_at", "resolved_by", "resolution_notes"})
SAGA_STEP_MUTABLE_FIELDS = frozenset({"compensation_status", "compensation_error", "compensated_at"})


@dataclass(frozen=True)
class GuardResult:
    """Outcome of a guard check: success, or the specific error to report."""

    error: Optional[DomainError] = None

    @property
    def ok(self) -> bool:
        return self.error is None

    def raise_if_failed(self) -> None:
        """Raise the carried error, if any."""
        if self.error is not None:
            raise self.error

    @classmethod
    def success(cls) -> "GuardResult":
        return cls()

    @classmethod
    def failure(cls, error: DomainError) -> "GuardResult":
        return cls(error=error)


def changed_fields(current: Mapping[str, Any], changes: Mapping[str, Any]) -> dict[str, Any]:
    """Return only the entries of ``changes`` that differ from ``current``."""
    return {key: value for key, value in changes.items() if current.get(key) != value}


def _allowed_saga_fields(status: str, new_status: str) -> frozenset[str]:
    if status in SAGA_ACTIVE_STATUSES:
        allowed = SAGA_PROGRESS_FIELDS
    elif status == SAGA_FAILED and new_status == SAGA_COMPENSATED:
        allowed = SAGA_COMPENSATION_FIELDS
    else:
        allowed = frozenset()

    if new_status == SAGA_MANUALLY_RESOLVED and status != SAGA_MANUALLY_RESOLVED:
        allowed = allowed | SAGA_RESOLUTION_FIELDS
    return allowed


def check_saga_transition(saga_id: str, from_status: str, to_status: str) -> GuardResult:
    """Check a saga status change against the state machine."""
    if from_status == to_status:
        return GuardResult.success()
    if to_status not in SAGA_TRANSITIONS:
        return GuardResult.failure(ValidationError(f"Unknown saga status '{to_status}'"))
    if to_status in SAGA_TRANSITIONS.get(from_status, frozenset()):
        return GuardResult.success()

    message = errors.invalid_saga_transition(saga_id, from_status, to_status)
    if from_status in SAGA_ACTIVE_STATUSES:
        return GuardResult.failure(ValidationError(message))
    return GuardResult.failure(ImmutableRecordError(message))


def check_audit_update(
    kind: str, record_id: object, current: Mapping[str, Any], changes: Mapping[str, Any]
) -> GuardResult:
    """Check an update of a write-once record.

    Args:
        kind: One of AUDIT_KINDS
        record_id: Identifier used in the error message
        current: Persisted field values
        changes: Proposed new field values

    Returns:
        GuardResult carrying ImmutableRecordError (or ValidationError for an
        unknown saga status) when the change is not permitted
    """
    delta = changed_fields(current, changes)
    if not delta:
        return GuardResult.success()

    if kind == SAGA_EXECUTION:
        status = current.get("status") or SAGA_PENDING
        new_status = delta.get("status", status)
        transition = check_saga_transition(str(record_id), status, new_status)
        if not transition.ok:
            return transition
        allowed = _allowed_saga_fields(status, new_status)
    elif kind == SAGA_STEP:
        allowed = SAGA_STEP_MUTABLE_FIELDS
    else:
        allowed = frozenset()

    rejected = [field for field in delta if field not in allowed]
    if rejected:
        return GuardResult.failure(
            ImmutableRecordError(errors.immutable_update(kind, record_id, rejected))
        )
    return GuardResult.success()


def check_audit_delete(kind: str, record_id: object) -> GuardResult:
    """Write-once records can never be deleted."""
    return GuardResult.failure(ImmutableRecordError(errors.immutable_delete(kind, record_id)))


def check_non_negative(field: str, amount: Optional[Decimal]) -> GuardResult:
    """Reject negative monetary amounts."""
    if amount is not None and amount < 0:
        return GuardResult.failure(ValidationError(f"{field} cannot be negative (got {amount})"))
    return GuardResult.success()


def check_date_range(start: Optional[date], end: Optional[date]) -> GuardResult:
    """Reject an end date that falls before the start date."""
    if start is not None and end is not None and end < start:
        return GuardResult.failure(
            ValidationError(f"end_date {end.isoformat()} is before start_date {start.isoformat()}")
        )
    return GuardResult.success()


def validate_referral_campaign(
    name: str,
    start_date: date,
    end_date: date,
    multiplier: Decimal,
    bonus_amount: Decimal,
    max_multiplier: Decimal,
) -> GuardResult:
    """Pre-save validation for a referral campaign."""
    if not name or not name.strip():
        return GuardResult.failure(ValidationError("Campaign name is required"))

    for result in (
        check_date_range(start_date, end_date),
        check_non_negative("bonus_amount", bonus_amount),
    ):
        if not result.ok:
            return result

    if multiplier <= 0:
        return GuardResult.failure(ValidationError(f"multiplier must be positive (got {multiplier})"))
    if multiplier > max_multiplier:
        return GuardResult.failure(
            ValidationError(f"multiplier {multiplier} exceeds the maximum of {max_multiplier}")
        )
    return GuardResult.success()


def check_self_referral(referrer_id: int, referred_id: int) -> GuardResult:
    """A user cannot refer themselves."""
    if referrer_id == referred_id:
        return GuardResult.failure(ValidationError(f"User {referrer_id} cannot refer themselves"))
    return GuardResult.success()


def check_bonus_reversal(
    bonus_id: int, reversal_of_id: Optional[int], reversed_at: Optional[object]
) -> GuardResult:
    """A bonus can be reversed once, and reversal rows cannot be reversed."""
    if reversal_of_id is not None:
        return GuardResult.failure(
            ValidationError(f"Bonus {bonus_id} is itself a reversal of bonus {reversal_of_id}")
        )
    if reversed_at is not None:
        return GuardResult.failure(ValidationError(f"Bonus {bonus_id} has already been reversed"))
    return GuardResult.success()


def check_sector_delete(name: str, company_count: int, deal_count: int) -> GuardResult:
    """Block deleting a sector that companies or deals still reference."""
    if company_count > 0 or deal_count > 0:
        return GuardResult.failure(
            IntegrityGuardError(errors.sector_delete_blocked(name, company_count, deal_count))
        )
    return GuardResult.success()


def check_rollout_percentage(percentage: Optional[int]) -> GuardResult:
    """Rollout percentage must be unset or within 0..100."""
    if percentage is not None and not 0 <= percentage <= 100:
        return GuardResult.failure(
            ValidationError(f"rollout_percentage must be between 0 and 100 (got {percentage})")
        )
    return GuardResult.success()
