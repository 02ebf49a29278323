"""Database layer for presupuestos application."""

from presupuestos.database.base import Database
from presupuestos.database.factories import create_sqlite_database

__all__ = ["Database", "create_sqlite_database"]
