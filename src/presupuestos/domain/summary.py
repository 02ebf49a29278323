"""Dashboard statistics and list filters for budgets."""

from datetime import date
from typing import Optional

from presupuestos.database.base import Database
from presupuestos.domain.entities import (
    FollowUpStage,
    Priority,
    Quote,
    QuoteStats,
    QuoteStatus,
)
from presupuestos.domain.errors import ValidationError, invalid_choice
from presupuestos.utils.date_parser import parse_creation_date

STATUS_FILTERS = ("all", "pending", "approved", "rejected", "expired")
PRIORITY_FILTERS = ("all", "alta", "media", "baja")
DATE_TYPES = ("creation", "action", "status", "all")

_PRIORITY_ORDER = {Priority.ALTA: 0, Priority.MEDIA: 1, Priority.BAJA: 2}
_PENDING_STAGES = (
    FollowUpStage.CONFIRMACION,
    FollowUpStage.PRIMER_SEGUIMIENTO,
    FollowUpStage.SEGUIMIENTO_FINAL,
)


def calculate_stats(quotes: list[Quote]) -> QuoteStats:
    """Compute dashboard counters.

    ``by_stage`` always lists every follow-up stage plus the approved and
    rejected outcomes, even when their count is zero.
    """
    by_stage = {stage.value: 0 for stage in FollowUpStage}
    by_stage[QuoteStatus.APROBADO.value] = 0
    by_stage[QuoteStatus.RECHAZADO.value] = 0
    by_manufacturer: dict[str, int] = {}
    pending = expiring_soon = approved = rejected = 0

    for quote in quotes:
        stage = FollowUpStage(quote.tipo_seguimiento).value
        by_stage[stage] = by_stage.get(stage, 0) + 1
        by_manufacturer[quote.fabricante] = by_manufacturer.get(quote.fabricante, 0) + 1

        if quote.tipo_seguimiento != FollowUpStage.VENCIDO:
            pending += 1
        if quote.estado == QuoteStatus.APROBADO:
            approved += 1
        if quote.estado == QuoteStatus.RECHAZADO:
            rejected += 1
        if 0 <= quote.dias_restantes <= 7:
            expiring_soon += 1

    return QuoteStats(
        total=len(quotes),
        pending=pending,
        expiring_soon=expiring_soon,
        approved=approved,
        rejected=rejected,
        by_manufacturer=by_manufacturer,
        by_stage=by_stage,
    )


def _iso(value: Optional[str]) -> Optional[date]:
    if not value:
        return None
    try:
        return date.fromisoformat(value)
    except ValueError:
        return None


def _creation(quote: Quote) -> Optional[date]:
    try:
        return parse_creation_date(quote.fecha_creacion)
    except ValueError:
        return None


def _dates_for(quote: Quote, date_type: str) -> list[date]:
    if date_type == "creation":
        candidates = [_creation(quote)]
    elif date_type == "action":
        candidates = [_iso(quote.fecha_completado)]
    elif date_type == "status":
        candidates = [_iso(quote.fecha_estado)]
    else:
        candidates = [
            _creation(quote),
            _iso(quote.fecha_completado),
            _iso(quote.fecha_estado),
            _iso(quote.fecha_finalizado),
        ]
    return [d for d in candidates if d is not None]


def _matches_status(quote: Quote, status: str) -> bool:
    if status == "pending":
        return quote.tipo_seguimiento in _PENDING_STAGES
    if status == "approved":
        return quote.estado == QuoteStatus.APROBADO
    if status == "rejected":
        return quote.estado == QuoteStatus.RECHAZADO
    if status == "expired":
        return quote.tipo_seguimiento == FollowUpStage.VENCIDO
    return True


def filter_budgets(
    quotes: list[Quote],
    search: str = "",
    status: str = "all",
    date_from: Optional[date] = None,
    date_to: Optional[date] = None,
    date_type: str = "creation",
) -> list[Quote]:
    """Filter budgets for list views.

    Args:
        quotes: Budgets to filter
        search: Case-insensitive substring of ID, company or manufacturer
        status: One of all, pending, approved, rejected, expired
        date_from: Optional inclusive lower bound
        date_to: Optional inclusive upper bound
        date_type: Which date the range applies to: creation, action
            (completion), status, or all (any of them)

    Returns:
        Matching budgets in input order

    Raises:
        ValidationError: If status or date_type is unknown
    """
    if status not in STATUS_FILTERS:
        raise ValidationError(invalid_choice("status", status, list(STATUS_FILTERS)))
    if date_type not in DATE_TYPES:
        raise ValidationError(invalid_choice("date type", date_type, list(DATE_TYPES)))

    needle = (search or "").lower()
    use_dates = date_from is not None or date_to is not None
    low = date_from or date.min
    high = date_to or date.max

    result = []
    for quote in quotes:
        if needle and not (
            needle in quote.id.lower()
            or needle in quote.empresa.lower()
            or needle in quote.fabricante.lower()
        ):
            continue
        if not _matches_status(quote, status):
            continue
        if use_dates and not any(low <= d <= high for d in _dates_for(quote, date_type)):
            continue
        result.append(quote)
    return result


def filter_tasks(quotes: list[Quote], priority: str = "all") -> list[Quote]:
    """Build the follow-up task list.

    With a priority filter, completed budgets are hidden. Results are ordered
    Alta, Media, Baja; ties keep input order.

    Raises:
        ValidationError: If priority is unknown
    """
    priority = (priority or "all").lower()
    if priority not in PRIORITY_FILTERS:
        raise ValidationError(invalid_choice("priority", priority, list(PRIORITY_FILTERS)))

    tasks = []
    for quote in quotes:
        if priority != "all":
            if quote.completado:
                continue
            if Priority(quote.prioridad).value.lower() != priority:
                continue
        tasks.append(quote)

    return sorted(tasks, key=lambda q: _PRIORITY_ORDER[Priority(q.prioridad)])


class SummaryService:
    """Service for dashboard statistics over stored budgets."""

    def __init__(self, db: Database):
        """Initialize summary service.

        Args:
            db: Database instance
        """
        self.db = db

    def get_stats(self) -> QuoteStats:
        """Compute statistics over all stored budgets."""
        return calculate_stats(self.db.get_all_budgets())

    def list_budgets(
        self,
        search: str = "",
        status: str = "all",
        date_from: Optional[date] = None,
        date_to: Optional[date] = None,
        date_type: str = "creation",
    ) -> list[Quote]:
        """List stored budgets matching the filters."""
        return filter_budgets(
            self.db.get_all_budgets(),
            search=search,
            status=status,
            date_from=date_from,
            date_to=date_to,
            date_type=date_type,
        )

    def list_tasks(self, priority: str = "all") -> list[Quote]:
        """List stored budgets as a prioritized task list."""
        return filter_tasks(self.db.get_all_budgets(), priority=priority)
