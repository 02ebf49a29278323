"""Abstract database interface."""

from abc import ABC, abstractmethod
from typing import Any, Optional

# Import entities directly to avoid circular import through domain/__init__.py
from presupuestos.domain.entities import (
    ContactInfo,
    ImportLog,
    Quote,
    QuoteItem,
)


class Database(ABC):
    """Abstract database interface for presupuestos."""

    @abstractmethod
    def connect(self) -> None:
        """Connect to the database."""
        pass

    @abstractmethod
    def disconnect(self) -> None:
        """Disconnect from the database."""
        pass

    @abstractmethod
    def initialize_schema(self) -> None:
        """Initialize database schema (create tables)."""
        pass

    # Budget operations
    @abstractmethod
    def get_all_budgets(self) -> list[Quote]:
        """List all budgets ordered by ID."""
        pass

    @abstractmethod
    def get_budget(self, budget_id: str) -> Optional[Quote]:
        """Get budget by ID."""
        pass

    @abstractmethod
    def upsert_budget(self, quote: Quote) -> None:
        """Insert or fully overwrite a budget, replacing its line items.

        The stored contact is left untouched.
        """
        pass

    @abstractmethod
    def mark_finalized(self, budget_id: str, fecha: str) -> None:
        """Mark a budget finalized with estado 'Vencido' as of fecha."""
        pass

    @abstractmethod
    def update_budget_fields(self, budget_id: str, fields: dict[str, Any]) -> None:
        """Update selected budget fields given as domain values."""
        pass

    @abstractmethod
    def get_budget_items(self, budget_id: str) -> list[QuoteItem]:
        """Get line items of a budget in CSV order."""
        pass

    # Contact operations
    @abstractmethod
    def get_all_contacts(self) -> list[tuple[str, ContactInfo]]:
        """List (budget_id, contact) pairs."""
        pass

    @abstractmethod
    def get_contact(self, budget_id: str) -> Optional[ContactInfo]:
        """Get contact for a budget."""
        pass

    @abstractmethod
    def upsert_contact(self, budget_id: str, contact: ContactInfo) -> None:
        """Create or replace the contact of a budget."""
        pass

    # Import log operations
    @abstractmethod
    def create_import_log(
        self,
        file_name: str,
        records_imported: int,
        records_updated: int = 0,
        records_deleted: int = 0,
    ) -> int:
        """Append an import log entry. Returns log ID."""
        pass

    @abstractmethod
    def list_import_logs(self) -> list[ImportLog]:
        """List import logs, newest first."""
        pass
