"""Contact domain service."""

from typing import Optional

import pydantic
from pydantic import EmailStr, TypeAdapter

from presupuestos.database.base import Database
from presupuestos.domain.entities import ContactInfo
from presupuestos.domain.errors import NotFoundError, ValidationError, budget_not_found

_EMAIL = TypeAdapter(EmailStr)


class ContactService:
    """Service for managing budget contacts."""

    def __init__(self, db: Database):
        """Initialize contact service.

        Args:
            db: Database instance
        """
        self.db = db

    def get_contact(self, budget_id: str) -> Optional[ContactInfo]:
        """Get contact for a budget, or None."""
        return self.db.get_contact(budget_id)

    def list_contacts(self) -> list[tuple[str, ContactInfo]]:
        """List (budget_id, contact) pairs."""
        return self.db.get_all_contacts()

    def save_contact(
        self,
        budget_id: str,
        nombre: str,
        email: Optional[str] = None,
        telefono: Optional[str] = None,
    ) -> ContactInfo:
        """Create or replace the contact of a budget.

        Args:
            budget_id: Budget ID
            nombre: Contact name
            email: Optional email address
            telefono: Optional phone number

        Returns:
            Saved contact

        Raises:
            NotFoundError: If budget doesn't exist
            ValidationError: If name is blank or email is malformed
        """
        if self.db.get_budget(budget_id) is None:
            raise NotFoundError(budget_not_found(budget_id))

        if not nombre or not nombre.strip():
            raise ValidationError("Contact name cannot be empty")

        email = email.strip() if email else None
        if email:
            try:
                email = _EMAIL.validate_python(email)
            except pydantic.ValidationError as e:
                raise ValidationError(f"Invalid email address '{email}'") from e

        contact = ContactInfo(
            nombre=nombre.strip(),
            email=email,
            telefono=telefono.strip() if telefono else None,
        )
        self.db.upsert_contact(budget_id, contact)
        return contact
