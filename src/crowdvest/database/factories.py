"""Database factory functions for creating database instances."""

from typing import Optional

from crowdvest.config import Settings, load_settings
from crowdvest.database.sqlalchemy_db import SQLAlchemyDatabase


def create_database(settings: Optional[Settings] = None) -> SQLAlchemyDatabase:
    """Create a database instance from settings.

    Args:
        settings: Settings to use. If None, they are read from CROWDVEST_*
            environment variables.

    Returns:
        SQLAlchemyDatabase instance for the configured URL
    """
    if settings is None:
        settings = load_settings()
    return SQLAlchemyDatabase(settings.resolve_database_url())


def create_sqlite_database(database_path: Optional[str] = None) -> SQLAlchemyDatabase:
    """Create a SQLite database instance.

    Args:
        database_path: Path to SQLite database file. If None, checks CROWDVEST_DB_PATH
            environment variable, then defaults to ~/.crowdvest/crowdvest.db

    Returns:
        SQLAlchemyDatabase instance configured for SQLite
    """
    settings = load_settings()
    if database_path is None:
        database_path = settings.database_path
    return SQLAlchemyDatabase(Settings(database_path=database_path).resolve_database_url())
