"""Tests for saga state tracking."""

from datetime import datetime, timedelta, UTC

import pytest

from crowdvest.domain.errors import ImmutableRecordError, NotFoundError, ValidationError


@pytest.fixture
def running_saga(saga_service, users):
    saga = saga_service.start_saga(
        "investment_allocation",
        metadata={"deal_id": 7, "amount": "5000.00"},
        user_id=users["alice"],
        steps_total=3,
    )
    saga_service.begin(saga.saga_id)
    return saga_service.get_saga(saga.saga_id)


def test_start_saga_is_pending(saga_service, users):
    saga = saga_service.start_saga("investment_allocation", metadata={"deal_id": 7}, user_id=users["alice"], steps_total=2)

    assert saga.status == "pending"
    assert len(saga.saga_id) == 36
    assert saga.metadata == {"deal_id": 7}
    assert saga.steps_total == 2
    assert saga.steps_completed == 0
    assert saga.started_at is None


def test_start_saga_requires_type(saga_service):
    with pytest.raises(ValidationError):
        saga_service.start_saga("")


def test_start_saga_rejects_negative_steps_total(saga_service):
    with pytest.raises(ValidationError):
        saga_service.start_saga("payout", steps_total=-1)


def test_begin_sets_in_progress(running_saga):
    assert running_saga.status == "in_progress"
    assert running_saga.started_at is not None


def test_record_steps_in_order(saga_service, running_saga):
    saga_id = running_saga.saga_id
    saga_service.record_step(saga_id, 1, "DebitWallet", {"wallet_tx": 11})
    saga_service.record_step(saga_id, 2, "ReserveShares", {"shares": 50})

    saga = saga_service.get_saga(saga_id)
    assert saga.steps_completed == 2
    assert saga.progress_percentage == 66

    steps = saga_service.list_steps(saga_id)
    assert [step.step_number for step in steps] == [1, 2]
    assert steps[0].operation == "DebitWallet"
    assert steps[0].result_data == {"wallet_tx": 11}
    assert steps[0].compensation_status is None


def test_step_numbers_must_increase(saga_service, running_saga):
    saga_id = running_saga.saga_id
    saga_service.record_step(saga_id, 2, "ReserveShares")

    with pytest.raises(ValidationError):
        saga_service.record_step(saga_id, 2, "ReserveShares")
    with pytest.raises(ValidationError):
        saga_service.record_step(saga_id, 1, "DebitWallet")

    saga_service.record_step(saga_id, 3, "CreateInvestment")
    assert saga_service.get_saga(saga_id).steps_completed == 2


def test_step_number_starts_at_one(saga_service, running_saga):
    with pytest.raises(ValidationError):
        saga_service.record_step(running_saga.saga_id, 0, "DebitWallet")


def test_complete(saga_service, running_saga):
    saga_service.complete(running_saga.saga_id)
    saga = saga_service.get_saga(running_saga.saga_id)

    assert saga.status == "completed"
    assert saga.completed_at is not None


def test_completed_saga_rejects_new_steps(saga_service, running_saga):
    saga_service.complete(running_saga.saga_id)
    with pytest.raises(ImmutableRecordError):
        saga_service.record_step(running_saga.saga_id, 1, "DebitWallet")


def test_completed_saga_cannot_fail(saga_service, running_saga):
    saga_service.complete(running_saga.saga_id)
    with pytest.raises(ImmutableRecordError):
        saga_service.fail(running_saga.saga_id, "too late")


def test_fail_records_reason_and_step(saga_service, running_saga):
    saga_service.record_step(running_saga.saga_id, 1, "DebitWallet")
    saga_service.fail(running_saga.saga_id, "Insufficient shares", step=2)
    saga = saga_service.get_saga(running_saga.saga_id)

    assert saga.status == "failed"
    assert saga.failure_reason == "Insufficient shares"
    assert saga.failure_step == 2
    assert saga.failed_at is not None


def test_pending_cannot_jump_to_completed(saga_service):
    saga = saga_service.start_saga("payout")
    with pytest.raises(ValidationError):
        saga_service.complete(saga.saga_id)


def test_compensation_flow(saga_service, running_saga):
    saga_id = running_saga.saga_id
    step_id = saga_service.record_step(saga_id, 1, "DebitWallet", {"wallet_tx": 11})
    saga_service.fail(saga_id, "Reserve failed", step=2)
    saga_service.record_compensation(step_id, success=True)
    saga_service.mark_compensated(saga_id)

    saga = saga_service.get_saga(saga_id)
    assert saga.status == "compensated"
    assert saga.compensated_at is not None
    assert saga.failure_reason == "Reserve failed"

    step = saga_service.list_steps(saga_id)[0]
    assert step.compensation_status == "compensated"
    assert step.compensated_at is not None
    assert step.result_data == {"wallet_tx": 11}


def test_failed_compensation_is_recorded(saga_service, running_saga):
    step_id = saga_service.record_step(running_saga.saga_id, 1, "DebitWallet")
    saga_service.fail(running_saga.saga_id, "boom", step=2)
    saga_service.record_compensation(step_id, success=False, error="Wallet locked")

    step = saga_service.list_steps(running_saga.saga_id)[0]
    assert step.compensation_status == "failed"
    assert step.compensation_error == "Wallet locked"


def test_failure_reason_is_permanent(saga_service, running_saga):
    saga_service.fail(running_saga.saga_id, "first reason", step=1)
    with pytest.raises(ImmutableRecordError):
        saga_service.fail(running_saga.saga_id, "second reason", step=1)


def test_compensated_cannot_go_back_to_failed(saga_service, running_saga):
    saga_service.fail(running_saga.saga_id, "boom")
    saga_service.mark_compensated(running_saga.saga_id)
    with pytest.raises(ImmutableRecordError):
        saga_service.fail(running_saga.saga_id, "boom")


def test_resolve_manually(saga_service, running_saga, users):
    saga_service.complete(running_saga.saga_id)
    saga_service.resolve_manually(running_saga.saga_id, users["admin"], "Refunded offline")
    saga = saga_service.get_saga(running_saga.saga_id)

    assert saga.status == "manually_resolved"
    assert saga.resolved_by == users["admin"]
    assert saga.resolution_notes == "Refunded offline"
    assert saga.resolved_at is not None


def test_manually_resolved_is_final(saga_service, running_saga, users):
    saga_service.resolve_manually(running_saga.saga_id, users["admin"])
    with pytest.raises(ImmutableRecordError):
        saga_service.complete(running_saga.saga_id)
    with pytest.raises(ImmutableRecordError):
        saga_service.resolve_manually(running_saga.saga_id, users["bob"], "again")


def test_unknown_saga(saga_service):
    with pytest.raises(NotFoundError):
        saga_service.begin("00000000-0000-0000-0000-000000000000")
    assert saga_service.get_saga("nope") is None


def test_list_sagas_filters(saga_service, running_saga):
    other = saga_service.start_saga("payout")

    assert {s.saga_id for s in saga_service.list_sagas()} == {running_saga.saga_id, other.saga_id}
    assert [s.saga_id for s in saga_service.list_sagas(status="pending")] == [other.saga_id]
    assert [s.saga_id for s in saga_service.list_sagas(saga_type="investment_allocation")] == [
        running_saga.saga_id
    ]


def test_needs_attention(saga_service, running_saga):
    failed = saga_service.start_saga("payout")
    saga_service.fail(failed.saga_id, "gateway down")
    saga_service.start_saga("refund")

    fresh = {s.saga_id for s in saga_service.needs_attention()}
    assert fresh == {failed.saga_id}

    everything = {s.saga_id for s in saga_service.needs_attention(stale_after=timedelta(seconds=-60))}
    assert running_saga.saga_id in everything
    assert failed.saga_id in everything
    assert len(everything) == 3
