"""Runtime settings read from the environment."""

import os
from dataclasses import dataclass
from decimal import Decimal
from pathlib import Path
from typing import Optional

DEFAULT_MAX_REFERRAL_MULTIPLIER = Decimal("5.0")


@dataclass(frozen=True)
class Settings:
    """Process-wide settings.

    Attributes:
        database_url: Full SQLAlchemy URL. Takes precedence over database_path.
        database_path: SQLite file path used when no URL is configured.
        max_referral_multiplier: Upper bound for referral campaign multipliers.
        log_level: Logging level name for the CLI.
    """

    database_url: Optional[str] = None
    database_path: Optional[str] = None
    max_referral_multiplier: Decimal = DEFAULT_MAX_REFERRAL_MULTIPLIER
    log_level: str = "WARNING"

    def resolve_database_url(self) -> str:
        """Return the SQLAlchemy URL to connect to.

        Falls back to ~/.crowdvest/crowdvest.db when neither a URL nor a path
        is configured.
        """
        if self.database_url:
            return self.database_url

        database_path = self.database_path
        if database_path is None:
            db_dir = Path.home() / ".crowdvest"
            db_dir.mkdir(exist_ok=True)
            database_path = str(db_dir / "crowdvest.db")

        return f"sqlite:///{database_path}"


def load_settings() -> Settings:
    """Build Settings from CROWDVEST_* environment variables."""
    raw_multiplier = os.environ.get("CROWDVEST_MAX_REFERRAL_MULTIPLIER")
    max_multiplier = DEFAULT_MAX_REFERRAL_MULTIPLIER
    if raw_multiplier:
        try:
            max_multiplier = Decimal(raw_multiplier)
        except ArithmeticError as e:
            raise ValueError(
                f"Invalid CROWDVEST_MAX_REFERRAL_MULTIPLIER '{raw_multiplier}': {e}"
            ) from e

    return Settings(
        database_url=os.environ.get("CROWDVEST_DATABASE_URL") or None,
        database_path=os.environ.get("CROWDVEST_DB_PATH") or None,
        max_referral_multiplier=max_multiplier,
        log_level=os.environ.get("CROWDVEST_LOG_LEVEL", "WARNING").upper(),
    )
