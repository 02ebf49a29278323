"""CSV import domain service."""

import logging
import os
from datetime import datetime
from importlib import resources
from pathlib import Path
from typing import Optional

from presupuestos.database.base import Database
from presupuestos.domain.classifier import classify_csv
from presupuestos.domain.entities import ImportOptions, ImportResult, Quote
from presupuestos.domain.reconciler import compare_budgets, reconcile

logger = logging.getLogger(__name__)

DEMO_CSV_ENV = "PRESUPUESTOS_DEMO_CSV"
DEMO_CSV_NAME = "presupuestos_demo.csv"
MANUAL_IMPORT_NAME = "manual_import.csv"


def demo_csv_path() -> Path:
    """Return the demo CSV path, honoring PRESUPUESTOS_DEMO_CSV."""
    override = os.environ.get(DEMO_CSV_ENV)
    if override:
        return Path(override)
    return Path(str(resources.files("presupuestos") / "data" / DEMO_CSV_NAME))


class QuoteImportService:
    """Service for importing quote CSV exports."""

    def __init__(self, db: Database):
        """Initialize quote import service.

        Args:
            db: Database instance
        """
        self.db = db

    def preview_csv_text(
        self,
        csv_text: str,
        options: ImportOptions,
        now: Optional[datetime] = None,
    ) -> ImportResult:
        """Compute import counts without writing anything."""
        incoming = classify_csv(csv_text, now=now)
        return compare_budgets(self.db.get_all_budgets(), incoming, options)

    def import_csv_text(
        self,
        csv_text: str,
        options: ImportOptions,
        file_name: str = MANUAL_IMPORT_NAME,
        now: Optional[datetime] = None,
    ) -> ImportResult:
        """Import quotes from CSV text.

        Parsing happens before any write, so a ParseError leaves storage
        untouched. Concurrent imports are not serialized; the last write per
        budget wins.

        Args:
            csv_text: Raw CSV text
            options: Import options
            file_name: Name recorded in the import log
            now: Classification time (defaults to now)

        Returns:
            ImportResult with added/updated/deleted/total counts

        Raises:
            ParseError: If the CSV cannot be parsed
        """
        if now is None:
            now = datetime.now()
        today = now.date()

        incoming = classify_csv(csv_text, now=now)
        existing = self.db.get_all_budgets()
        outcome = reconcile(existing, incoming, options, today=today)

        incoming_ids = {quote.id for quote in incoming}
        for quote in outcome.merged:
            if quote.id in incoming_ids:
                self.db.upsert_budget(quote)
                self._store_csv_contact(quote)

        for budget_id in outcome.finalized_ids:
            self.db.mark_finalized(budget_id, today.isoformat())

        result = outcome.result
        self.db.create_import_log(
            file_name=file_name,
            records_imported=result.added,
            records_updated=result.updated,
            records_deleted=result.deleted,
        )
        logger.info(
            "Imported %s: %d added, %d updated, %d finalized (%d in file)",
            file_name,
            result.added,
            result.updated,
            result.deleted,
            result.total,
        )
        return result

    def import_csv_file(
        self,
        csv_file_path: str,
        options: ImportOptions,
        now: Optional[datetime] = None,
    ) -> ImportResult:
        """Import quotes from a CSV file.

        Raises:
            FileNotFoundError: If CSV file doesn't exist
            ParseError: If the CSV cannot be parsed
        """
        csv_path = Path(csv_file_path)
        if not csv_path.exists():
            raise FileNotFoundError(f"CSV file not found: {csv_file_path}")

        csv_text = csv_path.read_text(encoding="utf-8-sig")
        return self.import_csv_text(csv_text, options, file_name=csv_path.name, now=now)

    def import_demo(
        self, options: ImportOptions, now: Optional[datetime] = None
    ) -> ImportResult:
        """Import the bundled demo CSV (or the file named by PRESUPUESTOS_DEMO_CSV)."""
        return self.import_csv_file(str(demo_csv_path()), options, now=now)

    def _store_csv_contact(self, quote: Quote) -> None:
        # Contacts edited by users take precedence over the CSV
        if quote.contacto is None:
            return
        if self.db.get_contact(quote.id) is None:
            self.db.upsert_contact(quote.id, quote.contacto)

