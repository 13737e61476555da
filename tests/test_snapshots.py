"""Tests for company snapshots."""

import pytest

from crowdvest.domain.errors import NotFoundError, ValidationError
from crowdvest.domain.snapshots import SnapshotService


@pytest.fixture
def snapshots(temp_db):
    return SnapshotService(temp_db)


def test_capture_copies_company_fields(snapshots, company_service, users):
    company_id = company_service.create_company("Acme Robotics", description="Warehouse robots")
    snapshot_id = snapshots.capture(company_id, "deal_launch", captured_by=users["admin"])

    snapshot = snapshots.latest(company_id)
    assert snapshot.id == snapshot_id
    assert snapshot.snapshot_reason == "deal_launch"
    assert snapshot.captured_by_id == users["admin"]
    assert snapshot.snapshot_data["name"] == "Acme Robotics"
    assert snapshot.snapshot_data["slug"] == "acme-robotics"
    assert isinstance(snapshot.snapshot_data["created_at"], str)


def test_snapshot_survives_later_changes(snapshots, company_service):
    company_id = company_service.create_company("Acme Robotics")
    snapshots.capture(company_id, "deal_launch")
    company_service.rename_company(company_id, "Acme AI")
    snapshots.capture(company_id, "rebrand")

    history = snapshots.list_snapshots(company_id)
    assert [s.snapshot_reason for s in history] == ["rebrand", "deal_launch"]
    assert history[1].snapshot_data["name"] == "Acme Robotics"
    assert history[0].snapshot_data["name"] == "Acme AI"


def test_capture_requires_reason(snapshots, company_service):
    company_id = company_service.create_company("Acme Robotics")
    with pytest.raises(ValidationError):
        snapshots.capture(company_id, " ")


def test_capture_unknown_company(snapshots):
    with pytest.raises(NotFoundError):
        snapshots.capture(404, "deal_launch")


def test_latest_without_snapshots(snapshots):
    assert snapshots.latest(1) is None
