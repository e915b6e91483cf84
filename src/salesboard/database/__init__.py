"""Database layer for salesboard application."""

from salesboard.database.base import Database
from salesboard.database.factories import create_sqlite_database

__all__ = ["Database", "create_sqlite_database"]
