"""Request and response models for the HTTP API.

JSON keys are camelCase; Python attributes keep the domain's snake_case names.
"""

from datetime import datetime
from typing import Optional

from pydantic import BaseModel, ConfigDict, EmailStr, Field
from pydantic.alias_generators import to_camel

from presupuestos.domain.entities import (
    ActionHistoryEntry,
    ContactInfo,
    ImportLog,
    ImportOptions,
    ImportResult,
    Quote,
    QuoteItem,
    QuoteStats,
    StageHistoryEntry,
)


class ApiModel(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)


class QuoteItemOut(ApiModel):
    codigo: str
    descripcion: str
    cantidad: int
    precio: float

    @classmethod
    def from_domain(cls, item: QuoteItem) -> "QuoteItemOut":
        return cls(
            codigo=item.codigo,
            descripcion=item.descripcion,
            cantidad=item.cantidad,
            precio=float(item.precio),
        )


class ContactOut(ApiModel):
    nombre: str
    email: Optional[str] = None
    telefono: Optional[str] = None

    @classmethod
    def from_domain(cls, contact: ContactInfo) -> "ContactOut":
        return cls(nombre=contact.nombre, email=contact.email, telefono=contact.telefono)


class BudgetContactOut(ContactOut):
    budget_id: str


class StageHistoryModel(ApiModel):
    etapa: str
    fecha: str
    comentario: Optional[str] = None


class ActionHistoryModel(ApiModel):
    accion: str
    fecha: str
    comentario: Optional[str] = None


class BudgetOut(ApiModel):
    """A budget as served to clients."""

    id: str
    empresa: str
    fabricante: str
    fecha_creacion: str
    moneda: str
    descuento: int
    validez: int
    items: list[QuoteItemOut]
    monto_total: float
    dias_transcurridos: int
    dias_restantes: int
    tipo_seguimiento: str
    accion: str
    prioridad: str
    alertas: list[str]
    es_licitacion: bool
    contacto: Optional[ContactOut] = None
    notas: str
    completado: bool
    fecha_completado: Optional[str] = None
    estado: str
    fecha_estado: Optional[str] = None
    finalizado: bool
    fecha_finalizado: Optional[str] = None
    historial_etapas: list[StageHistoryModel]
    historial_acciones: list[ActionHistoryModel]

    @classmethod
    def from_domain(cls, quote: Quote) -> "BudgetOut":
        return cls(
            id=quote.id,
            empresa=quote.empresa,
            fabricante=quote.fabricante,
            fecha_creacion=quote.fecha_creacion,
            moneda=quote.moneda,
            descuento=quote.descuento,
            validez=quote.validez,
            items=[QuoteItemOut.from_domain(item) for item in quote.items],
            monto_total=float(quote.monto_total),
            dias_transcurridos=quote.dias_transcurridos,
            dias_restantes=quote.dias_restantes,
            tipo_seguimiento=quote.tipo_seguimiento.value,
            accion=quote.accion,
            prioridad=quote.prioridad.value,
            alertas=list(quote.alertas),
            es_licitacion=quote.es_licitacion,
            contacto=ContactOut.from_domain(quote.contacto) if quote.contacto else None,
            notas=quote.notas,
            completado=quote.completado,
            fecha_completado=quote.fecha_completado,
            estado=quote.estado.value,
            fecha_estado=quote.fecha_estado,
            finalizado=quote.finalizado,
            fecha_finalizado=quote.fecha_finalizado,
            historial_etapas=[
                StageHistoryModel(etapa=e.etapa, fecha=e.fecha, comentario=e.comentario)
                for e in quote.historial_etapas
            ],
            historial_acciones=[
                ActionHistoryModel(accion=e.accion, fecha=e.fecha, comentario=e.comentario)
                for e in quote.historial_acciones
            ],
        )


_NULLABLE_FIELDS = ("fecha_completado", "fecha_estado", "fecha_finalizado")


class BudgetPatch(ApiModel):
    """Partial budget update. Only fields present in the body are applied."""

    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, extra="forbid")

    notas: Optional[str] = None
    completado: Optional[bool] = None
    fecha_completado: Optional[str] = None
    estado: Optional[str] = None
    fecha_estado: Optional[str] = None
    finalizado: Optional[bool] = None
    fecha_finalizado: Optional[str] = None
    tipo_seguimiento: Optional[str] = None
    accion: Optional[str] = None
    prioridad: Optional[str] = None
    es_licitacion: Optional[bool] = None
    historial_etapas: Optional[list[StageHistoryModel]] = None
    historial_acciones: Optional[list[ActionHistoryModel]] = None

    def to_fields(self) -> dict:
        """Return the set fields as domain values.

        Explicit nulls only clear the date fields; elsewhere they are ignored.
        """
        fields = {
            name: value
            for name, value in self.model_dump(exclude_unset=True).items()
            if value is not None or name in _NULLABLE_FIELDS
        }
        if self.historial_etapas is not None:
            fields["historial_etapas"] = tuple(
                StageHistoryEntry(**e.model_dump()) for e in self.historial_etapas
            )
        if self.historial_acciones is not None:
            fields["historial_acciones"] = tuple(
                ActionHistoryEntry(**e.model_dump()) for e in self.historial_acciones
            )
        return fields


class ContactIn(ApiModel):
    budget_id: str = Field(min_length=1)
    nombre: str
    email: Optional[EmailStr] = None
    telefono: Optional[str] = None


class ImportOptionsIn(ApiModel):
    compare_with_previous: bool
    auto_finalize_missing: bool

    def to_domain(self) -> ImportOptions:
        return ImportOptions(
            compare_with_previous=self.compare_with_previous,
            auto_finalize_missing=self.auto_finalize_missing,
        )


class ImportRequest(ApiModel):
    csv_data: str
    options: ImportOptionsIn


class DemoImportRequest(ApiModel):
    options: ImportOptionsIn


class ImportResultOut(ApiModel):
    added: int
    updated: int
    deleted: int
    total: int

    @classmethod
    def from_domain(cls, result: ImportResult) -> "ImportResultOut":
        return cls(
            added=result.added,
            updated=result.updated,
            deleted=result.deleted,
            total=result.total,
        )


class ImportLogOut(ApiModel):
    id: int
    timestamp: datetime
    file_name: str
    records_imported: int
    records_updated: int
    records_deleted: int

    @classmethod
    def from_domain(cls, log: ImportLog) -> "ImportLogOut":
        return cls(
            id=log.id,
            timestamp=log.timestamp,
            file_name=log.file_name,
            records_imported=log.records_imported,
            records_updated=log.records_updated,
            records_deleted=log.records_deleted,
        )


class StatsOut(ApiModel):
    total: int
    pending: int
    expiring_soon: int
    approved: int
    rejected: int
    by_manufacturer: dict[str, int]
    by_stage: dict[str, int]

    @classmethod
    def from_domain(cls, stats: QuoteStats) -> "StatsOut":
        return cls(
            total=stats.total,
            pending=stats.pending,
            expiring_soon=stats.expiring_soon,
            approved=stats.approved,
            rejected=stats.rejected,
            by_manufacturer=dict(stats.by_manufacturer),
            by_stage=dict(stats.by_stage),
        )
