"""
PropLedger - Statement Service

Builds a tenant's running-balance statement for an arbitrary window by
merging synthesized monthly rent, ad-hoc charges and payments.

Ordering rule: rows are sorted by date, and on the same date every charge
is applied before any payment. Arrears aging depends on this.
"""

import logging
from datetime import date
from decimal import Decimal
from typing import Iterable, List, Optional, Tuple

from propledger.schemas.ledger import (
    ChargeEntry,
    EntryType,
    PaymentEntry,
    Statement,
    StatementPeriod,
    StatementRow,
    StatementTotals,
    TenantRecord,
)
from propledger.services.data_sources import ReportDataSource
from propledger.services.payment_normalizer import build_payment_entries, normalize_id
from propledger.services.report_loader import ReportDataLoader
from propledger.utils.dates import add_months, days_in_month, month_start, within_range
from propledger.utils.error_handling import InvalidDateRangeException, TenantNotFoundException
from propledger.utils.money import ZERO, round_money, sum_money

logger = logging.getLogger(__name__)

RENT_CATEGORY = "rent"


# ===========================================
# CHARGE BUILDER
# ===========================================

def build_charges(tenant: TenantRecord, start: date, end: date) -> List[ChargeEntry]:
    """
    Synthesize recurring rent charges payable in ``[start, end]``.
    
    One charge per calendar month, dated on the tenant's due day clamped to
    the month length. Tenants without a positive rent get no charges.
    """
    rent = round_money(tenant.monthly_rent)
    if rent <= 0:
        return []
    due_day = tenant.due_day if tenant.due_day > 0 else 1
    
    charges = []
    cursor = month_start(start)
    limit = month_start(end)
    while cursor <= limit:
        charge_date = cursor.replace(day=min(due_day, days_in_month(cursor)))
        if start <= charge_date <= end:
            charges.append(ChargeEntry(
                date=charge_date,
                amount=rent,
                description=f"Rent for {charge_date:%B %Y}",
                category=RENT_CATEGORY,
            ))
        cursor = add_months(cursor, 1)
    return charges


# ===========================================
# STATEMENT BUILDER
# ===========================================

def create_statement(
    tenant: TenantRecord,
    start: date,
    end: date,
    payments: Iterable[PaymentEntry],
    additional_charges: Optional[Iterable[ChargeEntry]] = None,
    prior_balance: Decimal = ZERO,
    include_rent_charges: bool = True,
) -> Statement:
    """
    Merge charges and payments into a chronological running-balance ledger.
    
    Args:
        tenant: Tenant snapshot; drives rent synthesis.
        start: First day of the window (inclusive).
        end: Last day of the window (inclusive).
        payments: Candidate payments; anything outside the window is ignored.
        additional_charges: Ad-hoc charges; outside-window and non-positive
            amounts are ignored.
        prior_balance: Balance carried into the window. The running balance
            is seeded with it.
        include_rent_charges: Set False to build from ad-hoc charges only.
    
    Raises:
        InvalidDateRangeException: if ``start`` is after ``end``.
    """
    if start > end:
        raise InvalidDateRangeException(start, end)
    
    # (date, order, row) with order 0 for charges so they post first on a tie
    entries: List[Tuple[date, int, StatementRow]] = []
    
    charges: List[ChargeEntry] = build_charges(tenant, start, end) if include_rent_charges else []
    charges.extend(
        charge for charge in (additional_charges or [])
        if round_money(charge.amount) > 0 and within_range(charge.date, start, end)
    )
    # Amounts enter the ledger in whole cents
    for charge in charges:
        entries.append((charge.date, 0, StatementRow(
            date=charge.date,
            description=charge.description or "Charge",
            entry_type=EntryType.CHARGE,
            charge=round_money(charge.amount),
            balance=ZERO,
            category=charge.category,
        )))
    
    for payment in payments:
        if not within_range(payment.date, start, end):
            continue
        entries.append((payment.date, 1, StatementRow(
            date=payment.date,
            description=payment.description or "Payment received",
            entry_type=EntryType.PAYMENT,
            payment=round_money(payment.amount),
            balance=ZERO,
            source=payment.source,
        )))
    
    entries.sort(key=lambda item: (item[0], item[1]))
    
    opening = round_money(prior_balance)
    running = opening
    rows = []
    for _, _, row in entries:
        running += row.charge - row.payment
        row.balance = round_money(running)
        rows.append(row)
    
    totals = StatementTotals(
        charges=sum_money(row.charge for row in rows),
        payments=sum_money(row.payment for row in rows),
        balance=rows[-1].balance if rows else opening,
    )
    
    return Statement(
        tenant=tenant,
        period=StatementPeriod(start=start, end=end),
        opening_balance=opening,
        totals=totals,
        rows=rows,
    )


# ===========================================
# TENANT STATEMENT SERVICE
# ===========================================

class TenantStatementService:
    """Statement for a single tenant, loaded from the collaborator data."""
    
    def __init__(self, source: ReportDataSource):
        self.source = source
    
    async def get_tenant_statement(
        self,
        tenant_id: str,
        start: date,
        end: date,
        prior_balance: Decimal = ZERO,
    ) -> Statement:
        if start > end:
            raise InvalidDateRangeException(start, end)
        
        ctx = await ReportDataLoader(self.source).load_context()
        key = normalize_id(tenant_id)
        tenant = ctx.find_tenant(key)
        if tenant is None:
            raise TenantNotFoundException(tenant_id)
        
        statement = create_statement(
            tenant,
            start,
            end,
            payments=build_payment_entries(ctx.payments_for(key)),
            additional_charges=ctx.charges_for(key),
            prior_balance=prior_balance,
        )
        logger.debug(
            f"Statement for tenant {key} ({start} to {end}): "
            f"{len(statement.rows)} rows, balance {statement.totals.balance}"
        )
        return statement
