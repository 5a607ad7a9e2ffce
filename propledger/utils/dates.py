"""
PropLedger - Date Helpers

Calendar arithmetic shared by the statement builder and the report
aggregators. Unparseable dates become None and fall outside every range.
"""

import calendar
import re
from datetime import date, datetime
from typing import Any, Optional, Tuple

from dateutil.relativedelta import relativedelta

from propledger.utils.error_handling import DateOutOfRangeException

# DD-MM-YYYY or DD/MM/YYYY as exported by some bank feeds
_DAY_FIRST = re.compile(r"^(\d{2})[-/](\d{2})[-/](\d{4})$")


def parse_date(value: Any) -> Optional[date]:
    """Parse an ISO (or day-first) date; returns None when malformed."""
    if value is None:
        return None
    if isinstance(value, datetime):
        return value.date()
    if isinstance(value, date):
        return value
    text = str(value).strip()
    if not text:
        return None
    match = _DAY_FIRST.match(text)
    if match:
        day, month, year = match.groups()
        text = f"{year}-{month}-{day}"
    try:
        return date.fromisoformat(text[:10])
    except ValueError:
        return None


def within_range(value: Optional[date], start: Optional[date], end: Optional[date]) -> bool:
    """Inclusive range check; a missing date is never in range."""
    if value is None:
        return False
    if start is not None and value < start:
        return False
    if end is not None and value > end:
        return False
    return True


def days_in_month(value: date) -> int:
    return calendar.monthrange(value.year, value.month)[1]


def month_start(value: date) -> date:
    return value.replace(day=1)


def month_end(value: date) -> date:
    return value.replace(day=days_in_month(value))


def add_months(value: date, months: int) -> date:
    """
    Shift by whole months, clamping the day to the target month's length.
    
    Raises:
        DateOutOfRangeException: if the result falls outside year 1..9999.
    """
    try:
        return value + relativedelta(months=months)
    except (ValueError, OverflowError) as exc:
        raise DateOutOfRangeException(value, months) from exc


def days_between(later: date, earlier: date) -> int:
    return (later - earlier).days


def parse_month(month: Optional[str], reference_date: date) -> Tuple[date, date]:
    """
    Resolve a ``YYYY-MM`` reporting month to its first and last day.
    
    Missing or malformed values fall back to the month containing
    ``reference_date``.
    """
    if month:
        parts = month.split("-")
        if len(parts) >= 2 and parts[0].isdigit() and parts[1].isdigit():
            year, month_index = int(parts[0]), int(parts[1])
            if year > 0 and 1 <= month_index <= 12:
                start = date(year, month_index, 1)
                return start, month_end(start)
    start = month_start(reference_date)
    return start, month_end(start)
