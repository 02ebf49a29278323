"""CSV parsing and grouping of quote line items."""

import csv
import io
import logging
from decimal import Decimal
from typing import Optional, Union

from presupuestos.domain.entities import QuoteLineRow, RowOk, RowSkipped
from presupuestos.domain.errors import ParseError, missing_csv_columns
from presupuestos.utils.amount_parser import parse_amount, parse_int
from presupuestos.utils.date_parser import parse_creation_date

logger = logging.getLogger(__name__)

REQUIRED_COLUMNS = ("ID", "Empresa", "FechaCreacion", "Fabricante", "NetoItems_USD")
OPTIONAL_COLUMNS = (
    "NroItem",
    "Cantidad",
    "Codigo_Producto",
    "Descripcion",
    "Descuento",
    "Validez",
    "Nombre_Contacto",
    "Direccion",
)
_DELIMITERS = (",", ";", "\t")

RowResult = Union[RowOk, RowSkipped]


def _detect_delimiter(header_line: str) -> str:
    """Pick the delimiter from the header line, defaulting to comma."""
    counts = {d: header_line.count(d) for d in _DELIMITERS}
    best = max(_DELIMITERS, key=lambda d: counts[d])
    return best if counts[best] > 0 else ","


def _clean(value: Optional[str]) -> Optional[str]:
    return value.strip() if value is not None else None


def validate_row(row_num: int, raw: dict) -> RowResult:
    """Turn a raw CSV dict into a QuoteLineRow or a skip reason."""
    values = {key: _clean(raw.get(key)) for key in REQUIRED_COLUMNS + OPTIONAL_COLUMNS}

    if all(not v for v in values.values()):
        return RowSkipped(row_num, "Blank row")

    # An empty ID is not a skip reason here; empty IDs are dropped when grouping
    missing = [col for col in REQUIRED_COLUMNS if values[col] is None]
    if missing:
        return RowSkipped(row_num, f"Missing {', '.join(missing)}")

    try:
        parse_creation_date(values["FechaCreacion"])
    except ValueError as e:
        return RowSkipped(row_num, str(e))

    try:
        neto = parse_amount(values["NetoItems_USD"])
    except ValueError:
        neto = Decimal("0")

    cantidad = parse_int(values["Cantidad"], default=1)
    if cantidad < 1:
        cantidad = 1

    return RowOk(
        row_num,
        QuoteLineRow(
            id=values["ID"],
            empresa=values["Empresa"],
            fecha_creacion=values["FechaCreacion"],
            fabricante=values["Fabricante"],
            neto_items=neto,
            nro_item=values["NroItem"] or None,
            cantidad=cantidad,
            codigo_producto=values["Codigo_Producto"] or "",
            descripcion=values["Descripcion"] or "",
            descuento=parse_int(values["Descuento"], default=0),
            validez=parse_int(values["Validez"], default=0),
            nombre_contacto=values["Nombre_Contacto"] or None,
            direccion=values["Direccion"] or None,
        ),
    )


def parse_rows(csv_text: str) -> list[RowResult]:
    """Tokenize CSV text and validate every data row.

    Args:
        csv_text: Raw CSV text with a header row

    Returns:
        One tagged result per data row, in file order

    Raises:
        ParseError: If the text is empty, cannot be tokenized, or the header
            lacks a required column
    """
    if csv_text is None or not csv_text.strip():
        raise ParseError("CSV data is empty")

    lines = csv_text.lstrip("\ufeff").splitlines(keepends=True)
    # The header is the first non-blank line
    skipped_lines = next(i for i, line in enumerate(lines) if line.strip())
    text = "".join(lines[skipped_lines:])
    delimiter = _detect_delimiter(lines[skipped_lines])

    reader = csv.DictReader(io.StringIO(text, newline=""), delimiter=delimiter, strict=True)

    try:
        fieldnames = reader.fieldnames
        if not fieldnames:
            raise ParseError("CSV file has no columns")

        header = {name.strip() for name in fieldnames if name}
        missing_columns = [col for col in REQUIRED_COLUMNS if col not in header]
        if missing_columns:
            raise ParseError(missing_csv_columns(missing_columns))

        # Header cells may carry stray whitespace
        reader.fieldnames = [name.strip() if name else name for name in fieldnames]

        results: list[RowResult] = []
        # The header is row skipped_lines + 1
        for row_num, raw in enumerate(reader, start=skipped_lines + 2):
            result = validate_row(row_num, raw)
            if isinstance(result, RowSkipped):
                logger.debug("Skipping CSV row %d: %s", result.row_num, result.reason)
            results.append(result)
    except csv.Error as e:
        raise ParseError(f"Could not parse CSV data: {e}") from e

    return results


def parse(csv_text: str) -> list[QuoteLineRow]:
    """Parse CSV text into validated line rows, dropping skipped rows."""
    return [result.row for result in parse_rows(csv_text) if isinstance(result, RowOk)]


def group_by_quote_id(rows: list[QuoteLineRow]) -> dict[str, list[QuoteLineRow]]:
    """Group line rows by quote ID.

    Rows with an empty ID are dropped. Row order is preserved within a group
    and groups are ordered by first appearance.
    """
    groups: dict[str, list[QuoteLineRow]] = {}
    for row in rows:
        if not row.id:
            continue
        groups.setdefault(row.id, []).append(row)
    return groups
