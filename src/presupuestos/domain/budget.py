"""Budget follow-up domain service."""

from datetime import date
from typing import Any, Optional

from presupuestos.database.base import Database
from presupuestos.domain.entities import (
    ActionHistoryEntry,
    FollowUpStage,
    Priority,
    Quote,
    QuoteItem,
    QuoteStatus,
    StageHistoryEntry,
    UPDATABLE_FIELDS,
)
from presupuestos.domain.errors import (
    NotFoundError,
    ValidationError,
    budget_not_found,
    invalid_choice,
    unknown_budget_fields,
)

FINAL_STATUSES = (QuoteStatus.APROBADO, QuoteStatus.RECHAZADO)

_ENUM_FIELDS = {
    "tipo_seguimiento": FollowUpStage,
    "prioridad": Priority,
    "estado": QuoteStatus,
}


def _coerce_enum(field_name: str, value: Any) -> Any:
    enum_type = _ENUM_FIELDS.get(field_name)
    if enum_type is None or value is None:
        return value
    try:
        return enum_type(value)
    except ValueError:
        raise ValidationError(
            invalid_choice(field_name, str(value), [member.value for member in enum_type])
        )


class BudgetService:
    """Service for the follow-up actions users take on budgets."""

    def __init__(self, db: Database):
        """Initialize budget service.

        Args:
            db: Database instance
        """
        self.db = db

    def _require(self, budget_id: str) -> Quote:
        quote = self.db.get_budget(budget_id)
        if quote is None:
            raise NotFoundError(budget_not_found(budget_id))
        return quote

    def get_budget(self, budget_id: str) -> Optional[Quote]:
        """Get budget by ID.

        Args:
            budget_id: Budget ID

        Returns:
            Quote entity or None if not found
        """
        return self.db.get_budget(budget_id)

    def list_budgets(self) -> list[Quote]:
        """List all budgets."""
        return self.db.get_all_budgets()

    def get_items(self, budget_id: str) -> list[QuoteItem]:
        """Get line items of a budget.

        Raises:
            NotFoundError: If budget doesn't exist
        """
        self._require(budget_id)
        return self.db.get_budget_items(budget_id)

    def update_budget(self, budget_id: str, **fields: Any) -> Quote:
        """Partially update a budget.

        Clients send user-owned fields by convention; derived fields are
        accepted too but are recomputed on the next import.

        Args:
            budget_id: Budget ID
            **fields: Domain field names and values

        Returns:
            Updated Quote

        Raises:
            NotFoundError: If budget doesn't exist
            ValidationError: If a field is unknown or has an invalid value
        """
        unknown = [name for name in fields if name not in UPDATABLE_FIELDS]
        if unknown:
            raise ValidationError(unknown_budget_fields(unknown))

        self._require(budget_id)
        coerced = {name: _coerce_enum(name, value) for name, value in fields.items()}
        if coerced:
            self.db.update_budget_fields(budget_id, coerced)
        return self._require(budget_id)

    def save_notes(self, budget_id: str, notas: str) -> Quote:
        """Replace the notes of a budget."""
        return self.update_budget(budget_id, notas=notas or "")

    def toggle_completed(self, budget_id: str, today: Optional[date] = None) -> Quote:
        """Flip the completion flag of the current follow-up action.

        Records the change in the action history.
        """
        quote = self._require(budget_id)
        stamp = (today or date.today()).isoformat()
        completed = not quote.completado

        if completed:
            entry = ActionHistoryEntry(
                accion="Acción completada",
                fecha=stamp,
                comentario=f'Se completó la acción "{quote.accion}"',
            )
        else:
            entry = ActionHistoryEntry(
                accion="Acción reabierta",
                fecha=stamp,
                comentario=f'Se reabrió la acción "{quote.accion}"',
            )

        return self.update_budget(
            budget_id,
            completado=completed,
            fecha_completado=stamp if completed else None,
            historial_acciones=quote.historial_acciones + (entry,),
        )

    def finalize_budget(
        self, budget_id: str, status: str, today: Optional[date] = None
    ) -> Quote:
        """Close a budget as approved or rejected.

        Args:
            budget_id: Budget ID
            status: 'Aprobado' or 'Rechazado'
            today: Date stamped on the budget (defaults to today)

        Raises:
            NotFoundError: If budget doesn't exist
            ValidationError: If status is not a final status
        """
        try:
            final_status = QuoteStatus(status)
        except ValueError:
            final_status = None
        if final_status not in FINAL_STATUSES:
            raise ValidationError(
                invalid_choice("status", str(status), [s.value for s in FINAL_STATUSES])
            )

        quote = self._require(budget_id)
        stamp = (today or date.today()).isoformat()
        verb = "aprobado" if final_status == QuoteStatus.APROBADO else "rechazado"
        entry = ActionHistoryEntry(
            accion=f"Presupuesto {final_status.value}",
            fecha=stamp,
            comentario=f"El presupuesto ha sido {verb}",
        )

        return self.update_budget(
            budget_id,
            estado=final_status,
            fecha_estado=stamp,
            finalizado=True,
            fecha_finalizado=stamp,
            historial_acciones=quote.historial_acciones + (entry,),
        )

    def advance_stage(
        self,
        budget_id: str,
        stage: str,
        comentario: Optional[str] = None,
        today: Optional[date] = None,
    ) -> Quote:
        """Move a budget to another follow-up stage and record it in the stage history.

        Raises:
            NotFoundError: If budget doesn't exist
            ValidationError: If stage is not a known follow-up stage
        """
        new_stage = _coerce_enum("tipo_seguimiento", stage)
        quote = self._require(budget_id)
        entry = StageHistoryEntry(
            etapa=new_stage.value,
            fecha=(today or date.today()).isoformat(),
            comentario=comentario,
        )
        return self.update_budget(
            budget_id,
            tipo_seguimiento=new_stage,
            historial_etapas=quote.historial_etapas + (entry,),
        )

    def change_budget_type(self, budget_id: str, es_licitacion: bool) -> Quote:
        """Mark a budget as tender (licitación) or standard quote."""
        return self.update_budget(budget_id, es_licitacion=bool(es_licitacion))
