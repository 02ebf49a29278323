"""Domain model entities for presupuestos.

These are pure data classes representing business concepts, independent of
database schema. Quotes are immutable; updates produce new instances via
``dataclasses.replace``.
"""

from dataclasses import dataclass, fields
from datetime import datetime
from decimal import Decimal
from enum import Enum
from typing import Optional

DEFAULT_CURRENCY = "Dólar EEUU"


class FollowUpStage(str, Enum):
    """Follow-up phase of a quote (tipoSeguimiento)."""

    CONFIRMACION = "Confirmación"
    PRIMER_SEGUIMIENTO = "Primer Seguimiento"
    SEGUIMIENTO_FINAL = "Seguimiento Final"
    VENCIDO = "Vencido"


class Priority(str, Enum):
    """Follow-up priority."""

    ALTA = "Alta"
    MEDIA = "Media"
    BAJA = "Baja"


class QuoteStatus(str, Enum):
    """User-owned outcome of a quote (estado)."""

    PENDIENTE = "Pendiente"
    APROBADO = "Aprobado"
    RECHAZADO = "Rechazado"
    VENCIDO = "Vencido"


@dataclass(frozen=True)
class QuoteLineRow:
    """One validated CSV record (a single line item of a quote)."""

    id: str
    empresa: str
    fecha_creacion: str
    fabricante: str
    neto_items: Decimal
    nro_item: Optional[str] = None
    cantidad: int = 1
    codigo_producto: str = ""
    descripcion: str = ""
    descuento: int = 0
    validez: int = 0
    nombre_contacto: Optional[str] = None
    direccion: Optional[str] = None


@dataclass(frozen=True)
class RowOk:
    """Row that passed validation."""

    row_num: int
    row: QuoteLineRow


@dataclass(frozen=True)
class RowSkipped:
    """Row excluded from the import, with the reason."""

    row_num: int
    reason: str


@dataclass(frozen=True)
class QuoteItem:
    """Line item of a quote."""

    codigo: str
    descripcion: str
    cantidad: int
    precio: Decimal


@dataclass(frozen=True)
class ContactInfo:
    """Contact person for a quote."""

    nombre: str
    email: Optional[str] = None
    telefono: Optional[str] = None


@dataclass(frozen=True)
class StageHistoryEntry:
    """Manual stage change recorded by a user."""

    etapa: str
    fecha: str
    comentario: Optional[str] = None


@dataclass(frozen=True)
class ActionHistoryEntry:
    """Follow-up action recorded by a user."""

    accion: str
    fecha: str
    comentario: Optional[str] = None


@dataclass(frozen=True)
class QuoteClassification:
    """Derived follow-up data computed from one quote's rows."""

    validez: int
    dias_transcurridos: int
    dias_restantes: int
    tipo_seguimiento: FollowUpStage
    accion: str
    prioridad: Priority
    alertas: tuple[str, ...]
    es_licitacion: bool
    items: tuple[QuoteItem, ...]
    monto_total: Decimal
    contacto: Optional[ContactInfo] = None


# Fields set by people, never by reclassification
USER_OWNED_FIELDS = (
    "notas",
    "completado",
    "fecha_completado",
    "estado",
    "fecha_estado",
    "finalizado",
    "fecha_finalizado",
    "historial_etapas",
    "historial_acciones",
)


@dataclass(frozen=True)
class Quote:
    """Quote (presupuesto) domain entity, one per distinct CSV ID."""

    id: str
    empresa: str
    fabricante: str
    fecha_creacion: str
    tipo_seguimiento: FollowUpStage
    accion: str
    prioridad: Priority
    moneda: str = DEFAULT_CURRENCY
    descuento: int = 0
    validez: int = 0
    items: tuple[QuoteItem, ...] = ()
    monto_total: Decimal = Decimal("0.00")
    dias_transcurridos: int = 0
    dias_restantes: int = 0
    alertas: tuple[str, ...] = ()
    es_licitacion: bool = False
    contacto: Optional[ContactInfo] = None
    notas: str = ""
    completado: bool = False
    fecha_completado: Optional[str] = None
    estado: QuoteStatus = QuoteStatus.PENDIENTE
    fecha_estado: Optional[str] = None
    finalizado: bool = False
    fecha_finalizado: Optional[str] = None
    historial_etapas: tuple[StageHistoryEntry, ...] = ()
    historial_acciones: tuple[ActionHistoryEntry, ...] = ()


@dataclass(frozen=True)
class ImportOptions:
    """Options controlling how missing quotes are handled on import."""

    compare_with_previous: bool = True
    auto_finalize_missing: bool = True


@dataclass(frozen=True)
class ImportResult:
    """Summary counts of one import."""

    added: int = 0
    updated: int = 0
    deleted: int = 0
    total: int = 0


@dataclass(frozen=True)
class ImportLog:
    """Append-only audit record of an import."""

    id: int
    timestamp: datetime
    file_name: str
    records_imported: int
    records_updated: int
    records_deleted: int


@dataclass(frozen=True)
class QuoteStats:
    """Dashboard counters over a quote set."""

    total: int
    pending: int
    expiring_soon: int
    approved: int
    rejected: int
    by_manufacturer: dict[str, int]
    by_stage: dict[str, int]


# Quote fields that map onto plain budget columns (items and contact live apart)
UPDATABLE_FIELDS = tuple(
    f.name for f in fields(Quote) if f.name not in ("id", "items", "contacto")
)
