"""Tests for BudgetService follow-up actions."""

import pytest
from datetime import date

from presupuestos.domain.entities import (
    ActionHistoryEntry,
    FollowUpStage,
    Priority,
    QuoteStatus,
    StageHistoryEntry,
)
from presupuestos.domain.errors import NotFoundError, ValidationError

TODAY = date(2026, 10, 19)


def test_get_budget(imported_budgets, budget_service):
    """Test getting a stored budget."""
    quote = budget_service.get_budget("P-1")

    assert quote is not None
    assert quote.empresa == "Comercial Norte SA"
    assert quote.tipo_seguimiento == FollowUpStage.CONFIRMACION
    assert quote.contacto.nombre == "Ana Pérez"


def test_get_nonexistent_budget(budget_service):
    """Test getting a budget that doesn't exist."""
    assert budget_service.get_budget("NOPE") is None


def test_list_budgets(imported_budgets, budget_service):
    """Test listing budgets ordered by ID."""
    assert [quote.id for quote in budget_service.list_budgets()] == ["P-1", "P-2", "P-3", "P-4"]


def test_get_items_requires_budget(budget_service):
    """Test that items of a missing budget raise NotFoundError."""
    with pytest.raises(NotFoundError):
        budget_service.get_items("NOPE")


def test_save_notes(imported_budgets, budget_service):
    """Test replacing notes."""
    quote = budget_service.save_notes("P-1", "Cliente pidió descuento")

    assert quote.notas == "Cliente pidió descuento"
    assert budget_service.get_budget("P-1").notas == "Cliente pidió descuento"


def test_update_budget_partial(imported_budgets, budget_service):
    """Test that only given fields change."""
    quote = budget_service.update_budget("P-2", prioridad="Baja", es_licitacion=True)

    assert quote.prioridad == Priority.BAJA
    assert quote.es_licitacion
    assert quote.empresa == "Logística Sur SRL"
    assert quote.notas == ""


def test_update_budget_unknown_field(imported_budgets, budget_service):
    """Test that unknown fields are rejected."""
    with pytest.raises(ValidationError) as excinfo:
        budget_service.update_budget("P-1", color="rojo")

    assert "color" in str(excinfo.value)


def test_update_budget_invalid_enum(imported_budgets, budget_service):
    """Test that invalid enum values are rejected."""
    with pytest.raises(ValidationError) as excinfo:
        budget_service.update_budget("P-1", estado="Perdido")

    assert "Pendiente" in str(excinfo.value)


def test_update_nonexistent_budget(budget_service):
    """Test updating a missing budget."""
    with pytest.raises(NotFoundError):
        budget_service.update_budget("NOPE", notas="x")


def test_toggle_completed_records_history(imported_budgets, budget_service):
    """Test completing and reopening the current action."""
    completed = budget_service.toggle_completed("P-1", today=TODAY)

    assert completed.completado
    assert completed.fecha_completado == "2026-10-19"
    assert completed.historial_acciones[-1].accion == "Acción completada"
    assert completed.accion in completed.historial_acciones[-1].comentario

    reopened = budget_service.toggle_completed("P-1", today=TODAY)

    assert not reopened.completado
    assert reopened.fecha_completado is None
    assert [e.accion for e in reopened.historial_acciones] == ["Acción completada", "Acción reabierta"]


def test_finalize_budget_approved(imported_budgets, budget_service):
    """Test closing a budget as approved."""
    quote = budget_service.finalize_budget("P-1", "Aprobado", today=TODAY)

    assert quote.estado == QuoteStatus.APROBADO
    assert quote.finalizado
    assert quote.fecha_estado == "2026-10-19"
    assert quote.fecha_finalizado == "2026-10-19"
    assert quote.historial_acciones == (
        ActionHistoryEntry(
            accion="Presupuesto Aprobado",
            fecha="2026-10-19",
            comentario="El presupuesto ha sido aprobado",
        ),
    )


def test_finalize_budget_rejected(imported_budgets, budget_service):
    """Test closing a budget as rejected."""
    quote = budget_service.finalize_budget("P-1", "Rechazado", today=TODAY)

    assert quote.estado == QuoteStatus.RECHAZADO
    assert quote.historial_acciones[-1].comentario == "El presupuesto ha sido rechazado"


@pytest.mark.parametrize("status", ["Vencido", "Pendiente", "aprobado", "Ganado"])
def test_finalize_budget_invalid_status(imported_budgets, budget_service, status):
    """Test that only approved or rejected can be set by users."""
    with pytest.raises(ValidationError):
        budget_service.finalize_budget("P-1", status)


def test_advance_stage(imported_budgets, budget_service):
    """Test moving to another stage records stage history."""
    quote = budget_service.advance_stage(
        "P-1", "Primer Seguimiento", comentario="Cliente respondió", today=TODAY
    )

    assert quote.tipo_seguimiento == FollowUpStage.PRIMER_SEGUIMIENTO
    assert quote.historial_etapas == (
        StageHistoryEntry(etapa="Primer Seguimiento", fecha="2026-10-19", comentario="Cliente respondió"),
    )


def test_advance_stage_invalid(imported_budgets, budget_service):
    """Test that unknown stages are rejected."""
    with pytest.raises(ValidationError):
        budget_service.advance_stage("P-1", "Negociación")


def test_change_budget_type(imported_budgets, budget_service):
    """Test toggling the tender flag."""
    assert budget_service.change_budget_type("P-4", False).es_licitacion is False
    assert budget_service.change_budget_type("P-1", True).es_licitacion is True
