"""Follow-up classification of quotes.

One shared classification is used by every import path (manual upload and the
bundled demo file). It is a pure function of the quote's rows and the current
wall-clock time.
"""

import logging
import re
from datetime import datetime
from decimal import Decimal, ROUND_HALF_UP
from typing import Optional

from presupuestos.domain.csv_parser import group_by_quote_id, parse_rows
from presupuestos.domain.entities import (
    ContactInfo,
    FollowUpStage,
    Priority,
    Quote,
    QuoteClassification,
    QuoteItem,
    QuoteLineRow,
    QuoteStatus,
    RowOk,
    RowSkipped,
)
from presupuestos.utils.date_parser import days_elapsed, parse_creation_date

logger = logging.getLogger(__name__)

ACTION_VENCIDO = (
    "Registrar estado final del presupuesto (aprobado, rechazado, o vencido sin respuesta)"
)
ACTION_CONFIRMACION = "Confirmar recepción del presupuesto y aclarar dudas iniciales"
ACTION_PRIMER_SEGUIMIENTO = (
    "Proporcionar información adicional sobre productos y verificar interés inicial"
)
ACTION_SEGUIMIENTO_FINAL = "Última comunicación antes de expiración y motivar decisión final"

SHORT_VALIDITY_DAYS = 14
TENDER_VALIDITY_DAYS = 60
TENDER_KEYWORDS = (
    "municipalidad",
    "gobierno",
    "ministerio",
    "secretaria",
    "universidad",
    "obras",
    "ente",
    "instituto",
)
_TENDER_PATTERN = re.compile("|".join(TENDER_KEYWORDS), re.IGNORECASE)

_CENTS = Decimal("0.01")


def determine_follow_up(
    dias_transcurridos: int, dias_restantes: int, validez: int
) -> tuple[FollowUpStage, Priority, str]:
    """Decide stage, priority and action. First matching rule wins."""
    if dias_restantes <= 0:
        return FollowUpStage.VENCIDO, Priority.ALTA, ACTION_VENCIDO
    if dias_transcurridos <= 3:
        priority = Priority.ALTA if validez < SHORT_VALIDITY_DAYS else Priority.MEDIA
        return FollowUpStage.CONFIRMACION, priority, ACTION_CONFIRMACION
    if dias_transcurridos <= 15:
        priority = Priority.ALTA if dias_restantes <= 7 else Priority.MEDIA
        return FollowUpStage.PRIMER_SEGUIMIENTO, priority, ACTION_PRIMER_SEGUIMIENTO
    return FollowUpStage.SEGUIMIENTO_FINAL, Priority.ALTA, ACTION_SEGUIMIENTO_FINAL


def generate_alerts(validez: int, dias_restantes: int) -> tuple[str, ...]:
    """Return every alert that applies, in a fixed order."""
    alertas = []
    if validez == 0:
        alertas.append("Sin fecha de validez definida")
    if 0 < validez < SHORT_VALIDITY_DAYS:
        alertas.append(f"Validez corta ({validez} días)")
    if dias_restantes < 0:
        alertas.append(f"Presupuesto vencido hace {abs(dias_restantes)} días")
    return tuple(alertas)


def is_tender(empresa: str, validez: int) -> bool:
    """Heuristic for public-sector procurement quotes (licitaciones)."""
    return validez > TENDER_VALIDITY_DAYS or bool(_TENDER_PATTERN.search(empresa or ""))


def build_items(rows: list[QuoteLineRow]) -> tuple[QuoteItem, ...]:
    """Build line items, one per row."""
    return tuple(
        QuoteItem(
            codigo=row.codigo_producto,
            descripcion=row.descripcion,
            cantidad=row.cantidad,
            precio=row.neto_items,
        )
        for row in rows
    )


def total_amount(items: tuple[QuoteItem, ...]) -> Decimal:
    """Sum of price times quantity, rounded to cents."""
    total = sum((item.precio * item.cantidad for item in items), Decimal("0"))
    return total.quantize(_CENTS, rounding=ROUND_HALF_UP)


def classify(rows: list[QuoteLineRow], now: datetime) -> QuoteClassification:
    """Classify one quote from its row group.

    Quote-level fields come from the first row; items are aggregated over all
    rows.

    Args:
        rows: Non-empty row group for a single quote ID
        now: Current local time

    Returns:
        QuoteClassification with derived follow-up data

    Raises:
        ValueError: If rows is empty or the first row has an invalid date
    """
    if not rows:
        raise ValueError("Cannot classify an empty row group")

    first = rows[0]
    validez = first.validez
    creation_date = parse_creation_date(first.fecha_creacion)

    dias_transcurridos = days_elapsed(creation_date, now)
    dias_restantes = validez - dias_transcurridos

    stage, priority, action = determine_follow_up(dias_transcurridos, dias_restantes, validez)
    items = build_items(rows)

    contacto = None
    if first.nombre_contacto:
        contacto = ContactInfo(nombre=first.nombre_contacto, email=first.direccion)

    return QuoteClassification(
        validez=validez,
        dias_transcurridos=dias_transcurridos,
        dias_restantes=dias_restantes,
        tipo_seguimiento=stage,
        accion=action,
        prioridad=priority,
        alertas=generate_alerts(validez, dias_restantes),
        es_licitacion=is_tender(first.empresa, validez),
        items=items,
        monto_total=total_amount(items),
        contacto=contacto,
    )


def build_quote(quote_id: str, rows: list[QuoteLineRow], now: datetime) -> Quote:
    """Build a freshly imported Quote with default user-owned fields."""
    first = rows[0]
    result = classify(rows, now)
    estado = (
        QuoteStatus.VENCIDO
        if result.tipo_seguimiento == FollowUpStage.VENCIDO
        else QuoteStatus.PENDIENTE
    )
    return Quote(
        id=quote_id,
        empresa=first.empresa,
        fabricante=first.fabricante,
        fecha_creacion=first.fecha_creacion,
        descuento=first.descuento,
        validez=result.validez,
        items=result.items,
        monto_total=result.monto_total,
        dias_transcurridos=result.dias_transcurridos,
        dias_restantes=result.dias_restantes,
        tipo_seguimiento=result.tipo_seguimiento,
        accion=result.accion,
        prioridad=result.prioridad,
        alertas=result.alertas,
        es_licitacion=result.es_licitacion,
        contacto=result.contacto,
        estado=estado,
    )


def classify_csv(csv_text: str, now: Optional[datetime] = None) -> list[Quote]:
    """Parse, group and classify CSV text into quotes.

    Raises:
        ParseError: If the CSV text cannot be parsed
    """
    if now is None:
        now = datetime.now()

    results = parse_rows(csv_text)
    skipped = [r for r in results if isinstance(r, RowSkipped)]
    if skipped:
        logger.warning("Skipped %d invalid CSV row(s)", len(skipped))

    groups = group_by_quote_id([r.row for r in results if isinstance(r, RowOk)])
    return [build_quote(quote_id, rows, now) for quote_id, rows in groups.items()]
