"""Mapper functions to convert between domain models and SQLAlchemy models.

This layer isolates the conversion logic: enums are stored by value, history
entries and alerts as JSON lists, and line items as child rows.
"""

from dataclasses import asdict
from decimal import Decimal
from enum import Enum
from typing import Any

from presupuestos.domain import entities as domain
from presupuestos.database.models import (
    Budget as ORMBudget,
    BudgetItem as ORMBudgetItem,
    ContactInfo as ORMContactInfo,
    ImportLog as ORMImportLog,
)

BUDGET_COLUMNS = domain.UPDATABLE_FIELDS


def _history_to_json(entries) -> list[dict[str, Any]]:
    return [asdict(entry) for entry in entries]


def column_value(field_name: str, value: Any) -> Any:
    """Convert a domain field value into its column representation."""
    if isinstance(value, Enum):
        return value.value
    if field_name == "alertas":
        return list(value)
    if field_name in ("historial_etapas", "historial_acciones"):
        return _history_to_json(value)
    return value


def quote_to_columns(quote: domain.Quote) -> dict[str, Any]:
    """Return column values for a quote, excluding items and contact."""
    return {name: column_value(name, getattr(quote, name)) for name in BUDGET_COLUMNS}


def budget_item_to_domain(orm_item: ORMBudgetItem) -> domain.QuoteItem:
    """Convert SQLAlchemy BudgetItem model to domain QuoteItem entity."""
    return domain.QuoteItem(
        codigo=orm_item.codigo or "",
        descripcion=orm_item.descripcion,
        cantidad=orm_item.cantidad,
        precio=Decimal(orm_item.precio),
    )


def contact_to_domain(orm_contact: ORMContactInfo) -> domain.ContactInfo:
    """Convert SQLAlchemy ContactInfo model to domain ContactInfo entity."""
    return domain.ContactInfo(
        nombre=orm_contact.nombre,
        email=orm_contact.email,
        telefono=orm_contact.telefono,
    )


def budget_to_domain(orm_budget: ORMBudget) -> domain.Quote:
    """Convert SQLAlchemy Budget model to domain Quote entity."""
    return domain.Quote(
        id=orm_budget.id,
        empresa=orm_budget.empresa,
        fabricante=orm_budget.fabricante,
        fecha_creacion=orm_budget.fecha_creacion,
        moneda=orm_budget.moneda,
        descuento=orm_budget.descuento,
        validez=orm_budget.validez,
        items=tuple(budget_item_to_domain(item) for item in orm_budget.items),
        monto_total=Decimal(orm_budget.monto_total),
        dias_transcurridos=orm_budget.dias_transcurridos,
        dias_restantes=orm_budget.dias_restantes,
        tipo_seguimiento=domain.FollowUpStage(orm_budget.tipo_seguimiento),
        accion=orm_budget.accion,
        prioridad=domain.Priority(orm_budget.prioridad),
        alertas=tuple(orm_budget.alertas or ()),
        es_licitacion=orm_budget.es_licitacion,
        contacto=contact_to_domain(orm_budget.contact) if orm_budget.contact else None,
        notas=orm_budget.notas or "",
        completado=orm_budget.completado,
        fecha_completado=orm_budget.fecha_completado,
        estado=domain.QuoteStatus(orm_budget.estado or domain.QuoteStatus.PENDIENTE.value),
        fecha_estado=orm_budget.fecha_estado,
        finalizado=orm_budget.finalizado,
        fecha_finalizado=orm_budget.fecha_finalizado,
        historial_etapas=tuple(
            domain.StageHistoryEntry(**entry) for entry in orm_budget.historial_etapas or ()
        ),
        historial_acciones=tuple(
            domain.ActionHistoryEntry(**entry) for entry in orm_budget.historial_acciones or ()
        ),
    )


def import_log_to_domain(orm_log: ORMImportLog) -> domain.ImportLog:
    """Convert SQLAlchemy ImportLog model to domain ImportLog entity."""
    return domain.ImportLog(
        id=orm_log.id,
        timestamp=orm_log.timestamp,
        file_name=orm_log.file_name,
        records_imported=orm_log.records_imported,
        records_updated=orm_log.records_updated,
        records_deleted=orm_log.records_deleted,
    )
