"""Database factory functions for creating database instances."""

import os
from pathlib import Path
from typing import Optional

from salesboard.database.sqlalchemy_db import SQLAlchemyDatabase

DEFAULT_DB_DIR = Path.home() / ".salesboard"


def default_database_path() -> str:
    """``SALESBOARD_DB_PATH`` if set, else ``~/.salesboard/salesboard.db``."""
    configured = os.environ.get("SALESBOARD_DB_PATH")
    if configured:
        return configured
    DEFAULT_DB_DIR.mkdir(parents=True, exist_ok=True)
    return str(DEFAULT_DB_DIR / "salesboard.db")


def create_sqlite_database(database_path: Optional[str] = None) -> SQLAlchemyDatabase:
    """Create a SQLite-backed database.

    Args:
        database_path: Path to the SQLite file; see ``default_database_path``
            for the fallback

    Returns:
        SQLAlchemyDatabase instance configured for SQLite
    """
    path = database_path or default_database_path()
    return SQLAlchemyDatabase(f"sqlite:///{path}")
