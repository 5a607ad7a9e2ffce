"""
PropLedger - Arrears Classifier

Ages a statement by its oldest unpaid charge: the first charge row whose
running balance is still positive.
"""

from datetime import date
from decimal import Decimal
from typing import Iterable, Optional

from propledger.schemas.ledger import AgingBucket, ArrearsClassification, EntryType, StatementRow


def find_oldest_outstanding(rows: Iterable[StatementRow]) -> Optional[date]:
    for row in rows:
        if row.entry_type == EntryType.CHARGE and row.balance > 0:
            return row.date
    return None


def days_since(oldest: Optional[date], reference_date: date) -> int:
    """Whole days from ``oldest`` to ``reference_date``, never negative."""
    if oldest is None:
        return 0
    return max(0, (reference_date - oldest).days)


def days_overdue(rows: Iterable[StatementRow], reference_date: date) -> int:
    return days_since(find_oldest_outstanding(rows), reference_date)


def classify_arrears(
    balance: Decimal,
    rows: Iterable[StatementRow],
    reference_date: date,
) -> ArrearsClassification:
    """Aging bucket and label for a statement balance at ``reference_date``."""
    if balance < 0:
        return ArrearsClassification(label="In Credit", bucket=AgingBucket.IN_CREDIT)
    if balance == 0:
        return ArrearsClassification(label="Current", bucket=AgingBucket.CURRENT)
    
    oldest = find_oldest_outstanding(rows)
    if oldest is None:
        return ArrearsClassification(label="Pending", bucket=AgingBucket.PENDING)
    
    days = days_since(oldest, reference_date)
    if days >= 90:
        bucket, label = AgingBucket.DAYS_90_PLUS, "90+ days"
    elif days >= 60:
        bucket, label = AgingBucket.DAYS_61_90, "61-90 days"
    elif days >= 30:
        bucket, label = AgingBucket.DAYS_31_60, "31-60 days"
    else:
        bucket, label = AgingBucket.DAYS_0_30, "0-30 days"
    
    return ArrearsClassification(
        label=f"{label} ({days}d)",
        bucket=bucket,
        days_overdue=days,
        oldest_unpaid_date=oldest,
    )


def describe_arrears(balance: Decimal, rows: Iterable[StatementRow], reference_date: date) -> str:
    return classify_arrears(balance, rows, reference_date).label
