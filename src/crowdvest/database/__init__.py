"""Database layer for crowdvest."""

from crowdvest.database.base import Database
from crowdvest.database.factories import create_database, create_sqlite_database

__all__ = ["Database", "create_database", "create_sqlite_database"]
