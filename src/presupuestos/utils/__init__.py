"""Utility functions for presupuestos."""

from presupuestos.utils.date_parser import parse_creation_date, days_elapsed, parse_date
from presupuestos.utils.amount_parser import parse_amount, parse_int

__all__ = ["parse_creation_date", "days_elapsed", "parse_date", "parse_amount", "parse_int"]
