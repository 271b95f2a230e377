"""Database factory functions for creating database instances."""

import os
from pathlib import Path
from typing import Optional

from ledgerflow.database.sqlalchemy_db import SQLAlchemyDatabase


def default_database_path() -> str:
    """Return LEDGERFLOW_DB_PATH, else ~/.ledgerflow/ledgerflow.db."""
    database_path = os.environ.get("LEDGERFLOW_DB_PATH")
    if database_path is None:
        db_dir = Path.home() / ".ledgerflow"
        db_dir.mkdir(exist_ok=True)
        database_path = str(db_dir / "ledgerflow.db")
    return database_path


def create_sqlite_database(database_path: Optional[str] = None) -> SQLAlchemyDatabase:
    """Create a SQLite database instance.

    Args:
        database_path: Path to SQLite database file. If None, checks LEDGERFLOW_DB_PATH
            environment variable, then defaults to ~/.ledgerflow/ledgerflow.db

    Returns:
        SQLAlchemyDatabase instance configured for SQLite
    """
    if database_path is None:
        database_path = default_database_path()
    return SQLAlchemyDatabase(f"sqlite:///{database_path}")


def create_database(database_url: Optional[str] = None) -> SQLAlchemyDatabase:
    """Create a database instance from a SQLAlchemy URL.

    Args:
        database_url: SQLAlchemy URL. If None, checks LEDGERFLOW_DATABASE_URL,
            then falls back to the SQLite file chosen by create_sqlite_database

    Returns:
        SQLAlchemyDatabase instance
    """
    if database_url is None:
        database_url = os.environ.get("LEDGERFLOW_DATABASE_URL")
    if database_url is None:
        return create_sqlite_database()
    return SQLAlchemyDatabase(database_url)
