"""Shared domain error messages and error types."""


class DomainError(ValueError):
    """Base class for domain-level errors.

    Subclasses provide semantic categories while preserving ValueError
    compatibility for existing error handling.
    """


class ValidationError(DomainError):
    """Invalid input or failed validation in domain logic."""


class ParseError(ValidationError):
    """CSV text could not be tokenized into quote rows.

    Aborts the whole import; nothing is reconciled or persisted.
    """


class NotFoundError(DomainError):
    """Requested domain entity does not exist."""


def budget_not_found(budget_id: str) -> str:
    """Return message for missing budget."""
    return f"Budget {budget_id} not found"


def contact_not_found(budget_id: str) -> str:
    """Return message for missing contact."""
    return f"Contact for budget {budget_id} not found"


def missing_csv_columns(columns: list[str]) -> str:
    """Return message when the CSV header lacks required columns."""
    return f"CSV file missing required columns: {', '.join(columns)}"


def invalid_choice(field: str, value: str, choices: list[str]) -> str:
    """Return message for a value outside an allowed set."""
    return f"Invalid {field} '{value}'. Must be one of: {', '.join(choices)}"


def unknown_budget_fields(fields: list[str]) -> str:
    """Return message for partial updates naming unknown fields."""
    plural = "s" if len(fields) != 1 else ""
    return f"Unknown budget field{plural}: {', '.join(sorted(fields))}"
