"""Tests for running operations as a tracked saga."""

import pytest

from crowdvest.domain.saga import SagaCoordinator, SagaOperation


class RecordingOperation(SagaOperation):
    """Appends to a shared journal so tests can see execution order."""

    def __init__(self, label, journal, fail=False, fail_compensation=False):
        self.label = label
        self.journal = journal
        self.fail = fail
        self.fail_compensation = fail_compensation

    @property
    def name(self):
        return self.label

    def execute(self, context):
        if self.fail:
            raise RuntimeError(f"{self.label} exploded")
        self.journal.append(f"do:{self.label}")
        return {"label": self.label, "saga_id": context["saga_id"]}

    def compensate(self, context, result):
        if self.fail_compensation:
            raise RuntimeError(f"cannot undo {self.label}")
        self.journal.append(f"undo:{result['label']}")


class DebitWallet(SagaOperation):
    def execute(self, context):
        return {"debited": context["amount"]}

    def compensate(self, context, result):
        pass


@pytest.fixture
def coordinator(saga_service):
    return SagaCoordinator(saga_service)


def test_successful_run_completes(coordinator, saga_service):
    journal = []
    operations = [RecordingOperation(label, journal) for label in ("debit", "reserve", "allocate")]

    saga = coordinator.execute("investment_allocation", operations, metadata={"amount": "100.00"})

    assert journal == ["do:debit", "do:reserve", "do:allocate"]
    assert saga.status == "completed"
    assert saga.steps_total == 3
    assert saga.steps_completed == 3
    assert saga.metadata == {"amount": "100.00"}

    steps = saga_service.list_steps(saga.saga_id)
    assert [step.operation for step in steps] == ["debit", "reserve", "allocate"]
    assert steps[0].result_data["saga_id"] == saga.saga_id


def test_default_operation_name_is_class_name(coordinator, saga_service):
    saga = coordinator.execute("payout", [DebitWallet()], metadata={"amount": "10.00"})
    assert saga_service.list_steps(saga.saga_id)[0].operation == "DebitWallet"


def test_failure_compensates_in_reverse(coordinator, saga_service):
    journal = []
    operations = [
        RecordingOperation("debit", journal),
        RecordingOperation("reserve", journal),
        RecordingOperation("allocate", journal, fail=True),
    ]

    with pytest.raises(RuntimeError, match="allocate exploded"):
        coordinator.execute("investment_allocation", operations)

    assert journal == ["do:debit", "do:reserve", "undo:reserve", "undo:debit"]

    saga = saga_service.list_sagas()[0]
    assert saga.status == "compensated"
    assert saga.failure_step == 3
    assert saga.failure_reason == "allocate exploded"
    assert all(step.compensation_status == "compensated" for step in saga_service.list_steps(saga.saga_id))


def test_failed_compensation_leaves_saga_failed(coordinator, saga_service):
    journal = []
    operations = [
        RecordingOperation("debit", journal),
        RecordingOperation("reserve", journal, fail_compensation=True),
        RecordingOperation("allocate", journal, fail=True),
    ]

    with pytest.raises(RuntimeError):
        coordinator.execute("investment_allocation", operations)

    # The failed compensation does not stop earlier steps from being undone
    assert journal == ["do:debit", "do:reserve", "undo:debit"]

    saga = saga_service.list_sagas()[0]
    assert saga.status == "failed"
    steps = {step.operation: step for step in saga_service.list_steps(saga.saga_id)}
    assert steps["reserve"].compensation_status == "failed"
    assert steps["reserve"].compensation_error == "cannot undo reserve"
    assert steps["debit"].compensation_status == "compensated"

    assert saga.saga_id in {s.saga_id for s in saga_service.needs_attention()}


def test_failure_on_first_step_has_nothing_to_undo(coordinator, saga_service):
    journal = []
    with pytest.raises(RuntimeError):
        coordinator.execute("payout", [RecordingOperation("debit", journal, fail=True)])

    saga = saga_service.list_sagas()[0]
    assert journal == []
    assert saga.status == "compensated"
    assert saga_service.list_steps(saga.saga_id) == []
