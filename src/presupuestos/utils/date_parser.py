"""Date parsing utilities."""

import math
from datetime import date, datetime, time, timedelta
from dateutil import parser as date_parser
from dateutil.relativedelta import relativedelta

CREATION_DATE_FORMAT = "%d/%m/%Y"


def parse_creation_date(value: str) -> date:
    """Parse a quote creation timestamp into a date.

    The CSV export writes creation timestamps as ``DD/MM/YYYY HH:MM``. Only the
    date part is used; the time of day is ignored for day arithmetic.

    Args:
        value: Creation timestamp string

    Returns:
        Date object

    Raises:
        ValueError: If the date part is not ``DD/MM/YYYY``
    """
    if value is None or not value.strip():
        raise ValueError("Empty creation date")

    date_part = value.strip().split(" ")[0]
    try:
        return datetime.strptime(date_part, CREATION_DATE_FORMAT).date()
    except ValueError as e:
        raise ValueError(f"Could not parse creation date '{value}': {e}")


def days_elapsed(creation_date: date, now: datetime) -> int:
    """Return whole days between local midnight of creation_date and now.

    Partial days round up, so any time after midnight of the following day
    already counts as a full day.
    """
    start = datetime.combine(creation_date, time())
    delta = abs(now - start)
    return math.ceil(delta / timedelta(days=1))


def parse_date(date_str: str) -> date:
    """Parse a date string used in filters into a date object.

    Supports:
    - Absolute dates: "2024-01-15", "15/01/2024" (day first), "January 15, 2024"
    - Relative dates: "today", "yesterday", "last month", "this year", "last week"

    Args:
        date_str: Date string in various formats

    Returns:
        Date object

    Raises:
        ValueError: If date string cannot be parsed
    """
    date_str = date_str.strip().lower()
    today = date.today()

    relative_dates = {
        "today": today,
        "yesterday": today - timedelta(days=1),
    }

    if date_str in relative_dates:
        return relative_dates[date_str]

    if date_str.startswith("last "):
        period = date_str[5:]
        if period == "month":
            return (today - relativedelta(months=1)).replace(day=1)
        elif period == "year":
            return today.replace(month=1, day=1) - relativedelta(years=1)
        elif period == "week":
            return today - timedelta(days=today.weekday() + 7)

    elif date_str.startswith("this "):
        period = date_str[5:]
        if period == "month":
            return today.replace(day=1)
        elif period == "year":
            return today.replace(month=1, day=1)
        elif period == "week":
            return today - timedelta(days=today.weekday())

    # ISO dates are unambiguous; everything else follows the CSV's day-first convention
    try:
        dt = date_parser.parse(date_str, dayfirst="/" in date_str)
        return dt.date()
    except (ValueError, TypeError, OverflowError) as e:
        raise ValueError(f"Could not parse date '{date_str}': {e}")
