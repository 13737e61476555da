"""Shared pytest fixtures for crowdvest tests."""

import tempfile
import os
from datetime import date, timedelta
from decimal import Decimal
import pytest
from click.testing import CliRunner

from crowdvest.database.factories import create_sqlite_database
from crowdvest.domain.audit import ActivityLogService
from crowdvest.domain.feature_flags import FeatureFlagService
from crowdvest.domain.referral import ReferralService
from crowdvest.domain.saga import SagaService
from crowdvest.domain.sector import CompanyService, SectorService


@pytest.fixture
def temp_db():
    """Create a temporary database for testing."""
    fd, db_path = tempfile.mkstemp(suffix=".db")
    os.close(fd)

    db = create_sqlite_database(database_path=db_path)
    # Store the path for CLI tests
    db.database_path = db_path
    db.connect()
    db.initialize_schema()

    yield db

    db.disconnect()
    if os.path.exists(db_path):
        os.unlink(db_path)


@pytest.fixture
def users(temp_db):
    """Create a few users and return their IDs keyed by username."""
    return {
        name: temp_db.create_user(username=name, email=f"{name}@example.com", role=role)
        for name, role in (("alice", "user"), ("bob", "user"), ("carol", "user"), ("admin", "admin"))
    }


@pytest.fixture
def flag_service(temp_db):
    """Create a FeatureFlagService with a temporary database."""
    return FeatureFlagService(temp_db)


@pytest.fixture
def activity_service(temp_db):
    """Create an ActivityLogService with a temporary database."""
    return ActivityLogService(temp_db)


@pytest.fixture
def saga_service(temp_db):
    """Create a SagaService with a temporary database."""
    return SagaService(temp_db)


@pytest.fixture
def referral_service(temp_db):
    """Create a ReferralService with a temporary database."""
    return ReferralService(temp_db)


@pytest.fixture
def sector_service(temp_db):
    """Create a SectorService with a temporary database."""
    return SectorService(temp_db)


@pytest.fixture
def company_service(temp_db):
    """Create a CompanyService with a temporary database."""
    return CompanyService(temp_db)


@pytest.fixture
def running_campaign(referral_service):
    """A referral campaign running today."""
    today = date.today()
    campaign_id = referral_service.create_campaign(
        name="Festive Double",
        start_date=today - timedelta(days=1),
        end_date=today + timedelta(days=10),
        multiplier=Decimal("2.00"),
        bonus_amount=Decimal("250.00"),
    )
    return referral_service.get_campaign(campaign_id)


@pytest.fixture
def cli_runner():
    """Create a CLI runner for testing."""
    return CliRunner()
