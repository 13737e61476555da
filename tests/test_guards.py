"""Tests for the pure guard functions."""

from datetime import date
from decimal import Decimal

import pytest

from crowdvest.domain.errors import (
    DomainError,
    ImmutableRecordError,
    IntegrityGuardError,
    ValidationError,
)
from crowdvest.domain.guards import (
    ACTIVITY_LOG,
    SAGA_EXECUTION,
    SAGA_STEP,
    GuardResult,
    changed_fields,
    check_audit_delete,
    check_audit_update,
    check_saga_transition,
    check_sector_delete,
    validate_referral_campaign,
)


def test_error_taxonomy_is_value_error():
    for cls in (ValidationError, ImmutableRecordError, IntegrityGuardError):
        assert issubclass(cls, DomainError)
        assert issubclass(cls, ValueError)


def test_guard_result():
    assert GuardResult.success().ok
    failure = GuardResult.failure(ValidationError("nope"))
    assert not failure.ok
    with pytest.raises(ValidationError, match="nope"):
        failure.raise_if_failed()


def test_changed_fields_ignores_equal_values():
    assert changed_fields({"a": 1, "b": 2}, {"a": 1, "b": 3}) == {"b": 3}


@pytest.mark.parametrize(
    "from_status,to_status",
    [
        ("pending", "in_progress"),
        ("in_progress", "completed"),
        ("in_progress", "failed"),
        ("failed", "compensated"),
        ("completed", "manually_resolved"),
        ("compensated", "manually_resolved"),
        ("failed", "manually_resolved"),
    ],
)
def test_allowed_saga_transitions(from_status, to_status):
    assert check_saga_transition("s1", from_status, to_status).ok


@pytest.mark.parametrize(
    "from_status,to_status,error",
    [
        ("pending", "completed", ValidationError),
        ("in_progress", "compensated", ValidationError),
        ("completed", "failed", ImmutableRecordError),
        ("compensated", "failed", ImmutableRecordError),
        ("manually_resolved", "pending", ImmutableRecordError),
        ("pending", "exploded", ValidationError),
    ],
)
def test_rejected_saga_transitions(from_status, to_status, error):
    result = check_saga_transition("s1", from_status, to_status)
    assert isinstance(result.error, error)


def test_activity_log_accepts_no_changes():
    current = {"id": 1, "action": "login", "description": None}
    assert check_audit_update(ACTIVITY_LOG, 1, current, {"action": "login"}).ok

    result = check_audit_update(ACTIVITY_LOG, 1, current, {"description": "x"})
    assert isinstance(result.error, ImmutableRecordError)
    assert "description" in str(result.error)


def test_saga_step_allows_only_compensation_fields():
    current = {"id": 3, "result_data": {"a": 1}, "compensation_status": None}
    assert check_audit_update(SAGA_STEP, 3, current, {"compensation_status": "compensated"}).ok
    assert not check_audit_update(SAGA_STEP, 3, current, {"result_data": {}}).ok


def test_in_progress_saga_may_progress():
    current = {"status": "in_progress", "steps_completed": 1}
    assert check_audit_update(SAGA_EXECUTION, "s1", current, {"steps_completed": 2}).ok
    assert not check_audit_update(SAGA_EXECUTION, "s1", current, {"saga_type": "other"}).ok


def test_failed_saga_may_only_be_compensated_or_resolved():
    current = {"status": "failed", "failure_reason": "boom"}
    assert check_audit_update(
        SAGA_EXECUTION, "s1", current, {"status": "compensated", "compensated_at": "now"}
    ).ok
    assert not check_audit_update(
        SAGA_EXECUTION, "s1", current, {"status": "compensated", "failure_reason": "other"}
    ).ok


def test_audit_delete_always_fails():
    assert isinstance(check_audit_delete(ACTIVITY_LOG, 1).error, ImmutableRecordError)


def test_sector_delete_guard():
    assert check_sector_delete("Fintech", 0, 0).ok
    result = check_sector_delete("Fintech", 2, 1)
    assert isinstance(result.error, IntegrityGuardError)
    assert "2 companies, 1 deal" in str(result.error)


def test_referral_campaign_requires_name():
    result = validate_referral_campaign(
        " ", date(2024, 1, 1), date(2024, 1, 2), Decimal("1"), Decimal("0"), Decimal("5")
    )
    assert isinstance(result.error, ValidationError)
