"""Tests for settings and database factories."""

from decimal import Decimal, InvalidOperation

import pytest

from crowdvest.config import DEFAULT_MAX_REFERRAL_MULTIPLIER, Settings, load_settings
from crowdvest.database.factories import create_database


def test_defaults(monkeypatch):
    for name in ("CROWDVEST_DATABASE_URL", "CROWDVEST_DB_PATH", "CROWDVEST_MAX_REFERRAL_MULTIPLIER", "CROWDVEST_LOG_LEVEL"):
        monkeypatch.delenv(name, raising=False)

    settings = load_settings()

    assert settings.database_url is None
    assert settings.max_referral_multiplier == DEFAULT_MAX_REFERRAL_MULTIPLIER
    assert settings.log_level == "WARNING"


def test_environment_overrides(monkeypatch):
    monkeypatch.setenv("CROWDVEST_DB_PATH", "/tmp/cv.db")
    monkeypatch.setenv("CROWDVEST_MAX_REFERRAL_MULTIPLIER", "7.5")
    monkeypatch.setenv("CROWDVEST_LOG_LEVEL", "debug")

    settings = load_settings()

    assert settings.database_path == "/tmp/cv.db"
    assert settings.max_referral_multiplier == Decimal("7.5")
    assert settings.log_level == "DEBUG"
    assert settings.resolve_database_url() == "sqlite:////tmp/cv.db"


def test_invalid_multiplier(monkeypatch):
    monkeypatch.setenv("CROWDVEST_MAX_REFERRAL_MULTIPLIER", "lots")
    with pytest.raises(ValueError, match="CROWDVEST_MAX_REFERRAL_MULTIPLIER") as excinfo:
        load_settings()
    assert isinstance(excinfo.value.__cause__, InvalidOperation)


def test_url_takes_precedence():
    settings = Settings(database_url="postgresql://db/crowdvest", database_path="/tmp/ignored.db")
    assert settings.resolve_database_url() == "postgresql://db/crowdvest"


def test_create_database_from_settings(tmp_path):
    db_file = tmp_path / "crowdvest.db"
    db = create_database(Settings(database_url=f"sqlite:///{db_file}"))
    db.connect()

    user_id = db.create_user("alice", "alice@example.com")

    assert db.user_exists(user_id)
    assert db_file.exists()
    db.disconnect()
