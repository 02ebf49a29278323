"""Reconciliation of a freshly imported quote set against stored quotes."""

import logging
from dataclasses import dataclass, replace
from datetime import date
from typing import Optional

from presupuestos.domain.entities import (
    USER_OWNED_FIELDS,
    ImportOptions,
    ImportResult,
    Quote,
    QuoteStatus,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class Reconciliation:
    """Outcome of reconciling two quote sets."""

    merged: list[Quote]
    result: ImportResult
    finalized_ids: tuple[str, ...] = ()


def _finalizes_missing(options: ImportOptions) -> bool:
    # With compare_with_previous off, quotes absent from the file are left alone
    return options.auto_finalize_missing and options.compare_with_previous


def compare_budgets(
    existing: list[Quote], incoming: list[Quote], options: ImportOptions
) -> ImportResult:
    """Count added, updated and deleted quotes without merging.

    An ID present in both sets always counts as updated, even when nothing
    changed.
    """
    existing_ids = {quote.id for quote in existing}
    incoming_ids = {quote.id for quote in incoming}

    added = 0
    updated = 0
    for quote in incoming:
        if quote.id in existing_ids:
            updated += 1
        else:
            added += 1

    deleted = 0
    if _finalizes_missing(options):
        deleted = sum(
            1 for quote in existing if quote.id not in incoming_ids and not quote.finalizado
        )

    return ImportResult(added=added, updated=updated, deleted=deleted, total=len(incoming))


def merge_user_fields(incoming: Quote, existing: Quote) -> Quote:
    """Keep incoming derived fields and existing user-owned fields."""
    preserved = {name: getattr(existing, name) for name in USER_OWNED_FIELDS}
    preserved["notas"] = existing.notas or ""
    preserved["completado"] = existing.completado or False
    preserved["estado"] = existing.estado or QuoteStatus.PENDIENTE
    return replace(incoming, **preserved)


def reconcile(
    existing: list[Quote],
    incoming: list[Quote],
    options: ImportOptions,
    today: Optional[date] = None,
) -> Reconciliation:
    """Diff incoming quotes against existing ones and merge them.

    Args:
        existing: Previously stored quotes
        incoming: Freshly classified quotes from the latest CSV
        options: Import options
        today: Date stamped on auto-finalized quotes (defaults to today)

    Returns:
        Reconciliation with the merged quote set, counts and the IDs that were
        auto-finalized
    """
    if today is None:
        today = date.today()
    stamp = today.isoformat()

    existing_by_id = {quote.id: quote for quote in existing}
    incoming_by_id = {quote.id: quote for quote in incoming}

    merged: list[Quote] = []
    for quote in incoming:
        previous = existing_by_id.get(quote.id)
        merged.append(quote if previous is None else merge_user_fields(quote, previous))

    finalized_ids: list[str] = []
    for quote in existing:
        if quote.id in incoming_by_id:
            continue
        if not _finalizes_missing(options) or quote.finalizado:
            # Missing quotes are carried over, never dropped
            merged.append(quote)
        else:
            logger.debug("Auto-finalizing quote %s missing from import", quote.id)
            merged.append(
                replace(
                    quote,
                    finalizado=True,
                    fecha_finalizado=stamp,
                    estado=QuoteStatus.VENCIDO,
                    fecha_estado=stamp,
                )
            )
            finalized_ids.append(quote.id)

    result = compare_budgets(existing, incoming, options)
    return Reconciliation(merged=merged, result=result, finalized_ids=tuple(finalized_ids))
