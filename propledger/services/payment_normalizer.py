"""
PropLedger - Payment Normalizer

Unions the bank feed and manually recorded payments into one tagged
sequence and builds the per-tenant lookup indices used by every report.

Bank and manual receipts share no key, so they are never de-duplicated
against each other. Each normalized payment keeps its ``source`` so callers
can filter explicitly.
"""

import re
from collections import defaultdict
from dataclasses import dataclass
from datetime import date
from decimal import Decimal
from typing import Any, Dict, Iterable, List, Mapping, Optional

from propledger.schemas.ledger import ChargeEntry, DepositInfo, PaymentEntry, PaymentSource
from propledger.utils.dates import parse_date
from propledger.utils.money import to_decimal

# Float-formatted ids from spreadsheet imports ("12.0")
_FLOAT_SUFFIX = re.compile(r"\.0$")


@dataclass(frozen=True)
class NormalizedPayment:
    """A receipt attributed to a tenant, tagged with its feed."""
    tenant_id: str
    date: Optional[date]
    amount: Decimal
    source: PaymentSource
    description: Optional[str] = None
    property_id: Optional[str] = None


def normalize_id(value: Any) -> str:
    """Trim an id and strip a trailing ``.0`` artifact. Case is preserved."""
    text = "" if value is None else str(value)
    return _FLOAT_SUFFIX.sub("", text.strip())


def normalize_bank(record: Mapping[str, Any]) -> Optional[NormalizedPayment]:
    """Normalize a bank feed record; returns None when no tenant id resolves."""
    tenant_id = normalize_id(record.get("tenant_id"))
    if not tenant_id:
        return None
    return NormalizedPayment(
        tenant_id=tenant_id,
        date=parse_date(record.get("date")),
        amount=to_decimal(record.get("amount")),
        source=PaymentSource.BANK,
        description=record.get("description"),
        property_id=record.get("property_id"),
    )


def normalize_manual(record: Mapping[str, Any]) -> NormalizedPayment:
    return NormalizedPayment(
        tenant_id=normalize_id(record.get("tenant_id")),
        date=parse_date(record.get("date")),
        amount=to_decimal(record.get("amount")),
        source=PaymentSource.MANUAL,
        description=record.get("description") or "Manual payment",
    )


def normalize_payments(
    bank_records: Iterable[Mapping[str, Any]],
    manual_records: Iterable[Mapping[str, Any]],
) -> List[NormalizedPayment]:
    """Bank payments first, then manual ones. Unattributable bank lines are dropped."""
    payments = [p for p in (normalize_bank(r) for r in bank_records) if p is not None]
    payments.extend(normalize_manual(r) for r in manual_records)
    return payments


def _sort_key(value: Optional[date]) -> date:
    # Unparseable dates sort first; they never fall inside a window anyway
    return value or date.min


def build_payment_index(payments: Iterable[NormalizedPayment]) -> Dict[str, List[NormalizedPayment]]:
    """Group payments by tenant id, each list sorted ascending by date (stable)."""
    index: Dict[str, List[NormalizedPayment]] = defaultdict(list)
    for payment in payments:
        if not payment.tenant_id:
            continue
        index[payment.tenant_id].append(payment)
    for entries in index.values():
        entries.sort(key=lambda p: _sort_key(p.date))
    return dict(index)


def build_deposit_index(records: Iterable[Mapping[str, Any]]) -> Dict[str, DepositInfo]:
    index: Dict[str, DepositInfo] = {}
    for record in records:
        tenant_id = normalize_id(record.get("tenant_id"))
        if not tenant_id:
            continue
        index[tenant_id] = DepositInfo(
            charged=to_decimal(record.get("deposit_charged")),
            received=to_decimal(record.get("deposit_received")),
            released=to_decimal(record.get("deposit_released")),
            notes=record.get("deposit_notes"),
        )
    return index


def build_charge_index(records: Iterable[Mapping[str, Any]]) -> Dict[str, List[ChargeEntry]]:
    """
    Group ad-hoc charges by tenant id, sorted by date.
    
    Records with a malformed date are dropped; they could never fall inside
    a statement window.
    """
    index: Dict[str, List[ChargeEntry]] = defaultdict(list)
    for record in records:
        tenant_id = normalize_id(record.get("tenant_id"))
        charge_date = parse_date(record.get("date"))
        if not tenant_id or charge_date is None:
            continue
        index[tenant_id].append(ChargeEntry(
            date=charge_date,
            amount=to_decimal(record.get("amount")),
            description=record.get("description") or "Charge",
            category=record.get("category"),
        ))
    for entries in index.values():
        entries.sort(key=lambda c: c.date)
    return dict(index)


def build_payment_entries(payments: Iterable[NormalizedPayment]) -> List[PaymentEntry]:
    """Statement inputs from normalized payments; dateless or zero-amount ones are skipped."""
    return [
        PaymentEntry(
            date=payment.date,
            amount=payment.amount,
            description=payment.description,
            source=payment.source,
        )
        for payment in payments
        if payment.date is not None and payment.amount
    ]
