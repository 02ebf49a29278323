"""Locale-aware number parsing for CSV exports.

The quote exports use a comma as decimal separator and, occasionally, a dot as
thousands separator ("1.234,56").
"""

from decimal import Decimal, InvalidOperation
import re
from typing import Optional

_LEADING_INT = re.compile(r"^\s*([+-]?\d+)")


def parse_amount(amount_str: str) -> Decimal:
    """Parse a comma-decimal amount string into a Decimal.

    Handles:
    - "10,50"
    - "1.234,56"
    - "10.50" (dot decimal, no comma)
    - "$ 10,50" / "USD 10,50"

    Args:
        amount_str: Amount string

    Returns:
        Decimal amount

    Raises:
        ValueError: If amount string cannot be parsed
    """
    if amount_str is None or not amount_str.strip():
        raise ValueError("Empty amount string")

    cleaned = re.sub(r"[^\d,.\-+]", "", amount_str.strip())

    if "," in cleaned:
        # Comma is the decimal separator, dots are thousands separators
        cleaned = cleaned.replace(".", "").replace(",", ".", 1)

    try:
        return Decimal(cleaned)
    except InvalidOperation as e:
        raise ValueError(f"Could not parse amount '{amount_str}': {e}")


def parse_int(value: Optional[str], default: int = 0) -> int:
    """Parse the leading integer of a string.

    "30", "30 días" and "2.5" all parse to their leading integer. Missing or
    non-numeric values return the default.
    """
    if value is None:
        return default
    match = _LEADING_INT.match(value)
    if match is None:
        return default
    return int(match.group(1))
