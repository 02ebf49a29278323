"""Database factory functions for creating database instances."""

import os
from pathlib import Path
from typing import Optional

from presupuestos.database.sqlalchemy_db import SQLAlchemyDatabase

DB_PATH_ENV = "PRESUPUESTOS_DB_PATH"


def create_sqlite_database(database_path: Optional[str] = None) -> SQLAlchemyDatabase:
    """Create a SQLite database instance.

    Args:
        database_path: Path to SQLite database file. If None, checks PRESUPUESTOS_DB_PATH
            environment variable, then defaults to ~/.presupuestos/presupuestos.db

    Returns:
        SQLAlchemyDatabase instance configured for SQLite
    """
    if database_path is None:
        # Check environment variable
        database_path = os.environ.get(DB_PATH_ENV)

    if database_path is None:
        # Default to ~/.presupuestos/presupuestos.db
        home = Path.home()
        db_dir = home / ".presupuestos"
        db_dir.mkdir(exist_ok=True)
        database_path = str(db_dir / "presupuestos.db")

    database_url = f"sqlite:///{database_path}"
    return SQLAlchemyDatabase(database_url)
