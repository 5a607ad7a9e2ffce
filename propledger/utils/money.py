"""
PropLedger - Money Helpers

Collaborator records carry amounts as numbers or loosely formatted strings
("1,250.00", "$900"). Everything is converted to Decimal on the way in and
rounded half-up to cents on the way out.
"""

import re
from decimal import Decimal, InvalidOperation, ROUND_HALF_UP
from typing import Any, Iterable

CENT = Decimal("0.01")
ZERO = Decimal("0.00")

_NON_NUMERIC = re.compile(r"[^\d.\-]")


def to_decimal(value: Any, fallback: Decimal = ZERO) -> Decimal:
    """Lenient numeric parse. Anything unparseable yields ``fallback``."""
    if value is None or value == "" or isinstance(value, bool):
        return fallback
    if isinstance(value, Decimal):
        return value if value.is_finite() else fallback
    if isinstance(value, (int, float)):
        result = Decimal(str(value))
        return result if result.is_finite() else fallback
    cleaned = _NON_NUMERIC.sub("", str(value))
    if not cleaned:
        return fallback
    try:
        result = Decimal(cleaned)
    except InvalidOperation:
        return fallback
    return result if result.is_finite() else fallback


def round_money(value: Decimal) -> Decimal:
    """Round to two decimal places, half-up. Negative zero comes back as 0.00."""
    result = Decimal(value).quantize(CENT, rounding=ROUND_HALF_UP)
    return result if result else ZERO


def sum_money(values: Iterable[Decimal]) -> Decimal:
    return round_money(sum(values, ZERO))
