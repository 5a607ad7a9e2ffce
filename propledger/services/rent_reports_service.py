"""
PropLedger - Rent Reports Service

Portfolio reports reduced from per-tenant statements:
- Rent roll (one row per unit for a month, vacant units synthesized)
- Overdue rent (positive balances past a days threshold)
- Lease expiry (inferred anniversaries inside a look-ahead range)
- Rent charge schedule (next anniversary uplift)

Every builder takes an explicit ``reference_date``. Lease dates are
inferred from the first recorded payment and flagged as such; nothing here
reconciles them against a lease agreement.
"""

import logging
from datetime import date, timedelta
from decimal import Decimal, ROUND_HALF_UP
from typing import List, Optional, Set

from propledger.config import Settings, get_settings
from propledger.schemas.ledger import EntryType, InferredLease, PaymentSource
from propledger.schemas.rent_reports import (
    LeaseExpiryFilters,
    LeaseExpiryReport,
    LeaseExpiryRow,
    LeaseExpiryTotals,
    OccupancyFilter,
    OverdueRentFilters,
    OverdueRentReport,
    OverdueRentRow,
    OverdueRentTotals,
    PaymentMethod,
    RenewalStatus,
    RentChangeType,
    RentChargeFilters,
    RentChargeReport,
    RentChargeRow,
    RentChargeSummary,
    RentRollFilters,
    RentRollReport,
    RentRollRow,
    RentRollTotals,
    TenantStatus,
    TenantStatusFilter,
    UnitStatus,
)
from propledger.services.arrears import classify_arrears
from propledger.services.data_sources import ReportDataSource
from propledger.services.payment_normalizer import NormalizedPayment, build_payment_entries, normalize_id
from propledger.services.report_loader import ReportDataLoader, ReportingContext
from propledger.services.statement_service import create_statement
from propledger.utils.dates import (
    add_months,
    days_between,
    days_in_month,
    month_start,
    parse_month,
    within_range,
)
from propledger.utils.money import ZERO, round_money, sum_money

logger = logging.getLogger(__name__)

NO_VALUE = "—"
UNKNOWN_UNIT_TYPE = "Unknown"


# ===========================================
# LEASE INFERENCE
# ===========================================

def derive_lease_start(payments: List[NormalizedPayment]) -> Optional[date]:
    """First dated payment stands in for the lease start."""
    for payment in payments:
        if payment.date is not None:
            return payment.date
    return None


def infer_lease(start: date, pivot: date, term_months: int = 12) -> InferredLease:
    """
    Lease end is ``start + term_months``, rolled forward a year at a time
    while it falls before ``pivot``.
    """
    years = 0
    end = add_months(start, term_months)
    while end < pivot:
        years += 1
        end = add_months(start, term_months + 12 * years)
    return InferredLease(start=start, end=end)


def next_anniversary(start: date, pivot: date) -> date:
    """First yearly anniversary of ``start`` strictly after ``pivot``."""
    years = 0
    candidate = start
    while candidate <= pivot:
        years += 1
        candidate = add_months(start, 12 * years)
    return candidate


def _matches_property(value: Optional[str], property_filter: str) -> bool:
    return not property_filter or (value or "").lower() == property_filter


def _unit_type_for(ctx: ReportingContext, tenant) -> str:
    unit = ctx.find_unit(tenant)
    return (unit.unit_type if unit and unit.unit_type else None) or UNKNOWN_UNIT_TYPE


# ===========================================
# RENT ROLL
# ===========================================

def build_rent_roll_report(
    ctx: ReportingContext,
    filters: RentRollFilters,
    reference_date: date,
    history_months: int = 2,
    lease_term_months: int = 12,
) -> RentRollReport:
    """
    Rent roll for the filtered month.
    
    Statements run from ``history_months`` before the month for arrears
    context. Rent due and received cover the month only; balance and arrears
    cover the whole window. Units with no tenant are added as vacant rows.
    Occupancy and unit type filters apply after rows are built.
    """
    start, end = parse_month(filters.month, reference_date)
    history_start = add_months(start, -history_months)
    property_filter = (filters.property_id or "").strip().lower()
    unit_type_filter = (filters.unit_type or "").strip().lower()
    month_days = days_in_month(start)
    
    rows: List[RentRollRow] = []
    unit_types: Set[str] = set()
    
    for tenant in ctx.tenants:
        if not _matches_property(tenant.property_id, property_filter):
            continue
        tenant_id = normalize_id(tenant.id)
        monthly_rent = round_money(tenant.monthly_rent)
        payments = ctx.payments_for(tenant_id)
        
        lease_start = derive_lease_start(payments)
        lease = infer_lease(lease_start, start, lease_term_months) if lease_start else None
        unit_type = _unit_type_for(ctx, tenant)
        unit_types.add(unit_type)
        
        statement = create_statement(
            tenant,
            history_start,
            end,
            payments=build_payment_entries(payments),
            additional_charges=ctx.charges_for(tenant_id),
        )
        month_rows = [row for row in statement.rows if within_range(row.date, start, end)]
        rent_due = sum_money(row.charge for row in month_rows if row.entry_type == EntryType.CHARGE)
        rent_received = sum_money(row.payment for row in month_rows if row.entry_type == EntryType.PAYMENT)
        balance = statement.totals.balance
        arrears = classify_arrears(balance, statement.rows, end)
        
        deposit = ctx.deposits.get(tenant_id)
        last_payment = payments[-1] if payments else None
        if last_payment is None:
            payment_method = PaymentMethod.NONE
        elif last_payment.source == PaymentSource.MANUAL:
            payment_method = PaymentMethod.MANUAL
        else:
            payment_method = PaymentMethod.BANK
        
        prorated = ZERO
        if lease_start and start <= lease_start <= end:
            occupied_days = month_days - lease_start.day + 1
            prorated = round_money(monthly_rent * occupied_days / month_days)
        
        rows.append(RentRollRow(
            property_id=tenant.property_id or "",
            property_name=ctx.property_name(tenant.property_id),
            unit=tenant.unit or NO_VALUE,
            tenant_id=tenant_id,
            tenant=tenant.name,
            lease_start=lease.start if lease else None,
            lease_end=lease.end if lease else None,
            lease_inferred=lease is not None,
            monthly_rent=monthly_rent,
            prorated_rent=prorated,
            expected_rent=prorated or monthly_rent,
            status=UnitStatus.OCCUPIED,
            unit_type=unit_type,
            rent_due=rent_due,
            rent_received=rent_received,
            balance=balance,
            deposit_held=deposit.held if deposit else ZERO,
            arrears_status=arrears.label,
            payment_method=payment_method,
        ))
    
    occupied = [(row.property_id.lower(), row.unit.strip().lower()) for row in rows]
    synthesized = set()
    for unit in ctx.units:
        unit_property = unit.property_id or ""
        if not _matches_property(unit_property, property_filter):
            continue
        label = unit.unit.strip()
        prop_key, label_key = unit_property.lower(), label.lower()
        if (prop_key, label_key) in synthesized:
            continue
        # A blank property on either side matches on the unit label alone
        if any(
            occupied_label == label_key and (not occupied_prop or not prop_key or occupied_prop == prop_key)
            for occupied_prop, occupied_label in occupied
        ):
            continue
        synthesized.add((prop_key, label_key))
        unit_type = unit.unit_type or UNKNOWN_UNIT_TYPE
        unit_types.add(unit_type)
        rent = round_money(unit.rent)
        rows.append(RentRollRow(
            property_id=unit_property,
            property_name=ctx.property_name(unit_property),
            unit=label,
            tenant=NO_VALUE,
            monthly_rent=rent,
            expected_rent=rent,
            status=UnitStatus.VACANT,
            unit_type=unit_type,
            arrears_status="Vacant",
        ))
    
    filtered = []
    for row in rows:
        if filters.occupancy == OccupancyFilter.OCCUPIED and row.status != UnitStatus.OCCUPIED:
            continue
        if filters.occupancy == OccupancyFilter.VACANT and row.status != UnitStatus.VACANT:
            continue
        if unit_type_filter and row.unit_type.lower() != unit_type_filter:
            continue
        filtered.append(row)
    filtered.sort(key=lambda row: row.unit.casefold())
    
    occupied_count = sum(1 for row in filtered if row.status == UnitStatus.OCCUPIED)
    totals = RentRollTotals(
        total_units=len(filtered),
        occupied_units=occupied_count,
        vacant_units=len(filtered) - occupied_count,
        expected_rent=sum_money(row.expected_rent for row in filtered),
        rent_due=sum_money(row.rent_due for row in filtered),
        rent_received=sum_money(row.rent_received for row in filtered),
        balance=sum_money(row.balance for row in filtered),
    )
    
    return RentRollReport(
        period_start=start,
        period_end=end,
        rows=filtered,
        totals=totals,
        unit_types=sorted(t for t in unit_types if t),
    )


# ===========================================
# OVERDUE RENT
# ===========================================

def build_overdue_rent_report(
    ctx: ReportingContext,
    filters: OverdueRentFilters,
    reference_date: date,
    lookback_months: int = 6,
    active_payment_days: int = 120,
    worst_count: int = 10,
) -> OverdueRentReport:
    """
    Tenants owing money for at least ``filters.days`` days.
    
    A tenant is active when their latest payment in the window is less than
    ``active_payment_days`` old, otherwise moved out.
    """
    start = month_start(add_months(reference_date, -lookback_months))
    property_filter = (filters.property_id or "").strip().lower()
    rows: List[OverdueRentRow] = []
    
    for tenant in ctx.tenants:
        if not _matches_property(tenant.property_id, property_filter):
            continue
        tenant_id = normalize_id(tenant.id)
        period_payments = [
            p for p in ctx.payments_for(tenant_id) if within_range(p.date, start, reference_date)
        ]
        statement = create_statement(
            tenant,
            start,
            reference_date,
            payments=build_payment_entries(period_payments),
            additional_charges=ctx.charges_for(tenant_id),
        )
        outstanding = statement.totals.balance
        if outstanding <= 0:
            continue
        
        arrears = classify_arrears(outstanding, statement.rows, reference_date)
        if arrears.days_overdue < filters.days:
            continue
        
        last_payment = period_payments[-1] if period_payments else None
        if last_payment and days_between(reference_date, last_payment.date) < active_payment_days:
            tenant_status = TenantStatus.ACTIVE
        else:
            tenant_status = TenantStatus.MOVED_OUT
        if filters.tenant_status != TenantStatusFilter.ALL and tenant_status.value != filters.tenant_status.value:
            continue
        
        monthly_rent = round_money(tenant.monthly_rent)
        months = (outstanding / max(Decimal(1), monthly_rent)).quantize(Decimal(1), rounding=ROUND_HALF_UP)
        months = max(1, int(months))
        
        rows.append(OverdueRentRow(
            tenant_id=tenant_id,
            tenant=tenant.name,
            property_id=tenant.property_id or "",
            property_name=ctx.property_name(tenant.property_id),
            unit=tenant.unit or NO_VALUE,
            monthly_rent=monthly_rent,
            last_payment_date=last_payment.date if last_payment else None,
            last_payment_amount=round_money(last_payment.amount) if last_payment else None,
            outstanding_balance=outstanding,
            days_overdue=arrears.days_overdue,
            arrears_status=arrears.label,
            tenant_status=tenant_status,
            contact_email=tenant.email,
            contact_phone=tenant.phone,
            notes=f"Balance equals ~{months} months of rent",
        ))
    
    rows.sort(key=lambda row: row.outstanding_balance, reverse=True)
    totals = OverdueRentTotals(
        tenant_count=len(rows),
        total_balance=sum_money(row.outstanding_balance for row in rows),
    )
    return OverdueRentReport(
        period_start=start,
        period_end=reference_date,
        rows=rows,
        totals=totals,
        worst_ten=rows[:worst_count],
    )


# ===========================================
# LEASE EXPIRY
# ===========================================

def renewal_status_for(days_until_expiry: int) -> RenewalStatus:
    if days_until_expiry <= 15:
        return RenewalStatus.PENDING
    if days_until_expiry <= 45:
        return RenewalStatus.SENT
    return RenewalStatus.CONFIRMED


RENEWAL_NOTES = {
    RenewalStatus.PENDING: "Awaiting tenant response",
    RenewalStatus.SENT: "Reminder sent to tenant",
    RenewalStatus.CONFIRMED: "Tenant confirmed renewal",
}


def build_lease_expiry_report(
    ctx: ReportingContext,
    filters: LeaseExpiryFilters,
    reference_date: date,
    lease_term_months: int = 12,
    notice_days: int = 30,
) -> LeaseExpiryReport:
    """Inferred lease anniversaries within ``[reference_date, reference_date + range_days]``."""
    property_filter = (filters.property_id or "").strip().lower()
    unit_type_filter = (filters.unit_type or "").strip().lower()
    rows: List[LeaseExpiryRow] = []
    unit_types: Set[str] = set()
    
    for tenant in ctx.tenants:
        if not _matches_property(tenant.property_id, property_filter):
            continue
        tenant_id = normalize_id(tenant.id)
        lease_start = derive_lease_start(ctx.payments_for(tenant_id))
        if lease_start is None:
            continue
        lease = infer_lease(lease_start, reference_date, lease_term_months)
        days_until = days_between(lease.end, reference_date)
        if days_until < 0 or days_until > filters.range_days:
            continue
        
        unit_type = _unit_type_for(ctx, tenant)
        unit_types.add(unit_type)
        if unit_type_filter and unit_type.lower() != unit_type_filter:
            continue
        
        status = renewal_status_for(days_until)
        rows.append(LeaseExpiryRow(
            tenant_id=tenant_id,
            tenant=tenant.name,
            property_id=tenant.property_id or "",
            property_name=ctx.property_name(tenant.property_id),
            unit=tenant.unit or NO_VALUE,
            unit_type=unit_type,
            lease_start=lease.start,
            lease_end=lease.end,
            lease_inferred=lease.inferred,
            notice_days=notice_days,
            notice_deadline=lease.end - timedelta(days=notice_days),
            days_until_expiry=days_until,
            renewal_status=status,
            notes=RENEWAL_NOTES[status],
        ))
    
    rows.sort(key=lambda row: row.days_until_expiry)
    confirmed = sum(1 for row in rows if row.renewal_status == RenewalStatus.CONFIRMED)
    return LeaseExpiryReport(
        reference_date=reference_date,
        rows=rows,
        totals=LeaseExpiryTotals(
            expiring=len(rows),
            confirmed=confirmed,
            vacancies=len(rows) - confirmed,
        ),
        unit_types=sorted(t for t in unit_types if t),
    )


# ===========================================
# RENT CHARGE SCHEDULE
# ===========================================

def build_rent_charge_report(
    ctx: ReportingContext,
    filters: RentChargeFilters,
    reference_date: date,
    uplift_pct: Decimal = Decimal("3.0"),
) -> RentChargeReport:
    """
    Next rent change per tenant at the first lease anniversary after the pivot.
    
    The pivot is ``filters.effective_date`` or the first of the month after
    ``reference_date``.
    """
    pivot = filters.effective_date or month_start(add_months(reference_date, 1))
    property_filter = (filters.property_id or "").strip().lower()
    text_filter = (filters.query or "").strip().lower()
    factor = Decimal(1) + Decimal(uplift_pct) / Decimal(100)
    rows: List[RentChargeRow] = []
    
    for tenant in ctx.tenants:
        if not _matches_property(tenant.property_id, property_filter):
            continue
        if text_filter and text_filter not in f"{tenant.name} {tenant.unit or ''}".lower():
            continue
        tenant_id = normalize_id(tenant.id)
        lease_start = derive_lease_start(ctx.payments_for(tenant_id))
        if lease_start is None:
            continue
        
        current_rent = round_money(tenant.monthly_rent)
        next_rent = round_money(current_rent * factor)
        if next_rent > current_rent:
            change_type = RentChangeType.INCREASE
        elif next_rent < current_rent:
            change_type = RentChangeType.DECREASE
        else:
            change_type = RentChangeType.RENEWAL
        
        rows.append(RentChargeRow(
            tenant_id=tenant_id,
            tenant=tenant.name,
            property_id=tenant.property_id or "",
            property_name=ctx.property_name(tenant.property_id),
            unit=tenant.unit or NO_VALUE,
            current_rent=current_rent,
            next_rent=next_rent,
            effective_date=next_anniversary(lease_start, pivot),
            change_type=change_type,
            notes=f"Annual uplift {Decimal(uplift_pct):.1f}%",
        ))
    
    rows.sort(key=lambda row: row.effective_date)
    average = ZERO
    if rows:
        average = round_money(sum((row.next_rent - row.current_rent for row in rows), ZERO) / len(rows))
    return RentChargeReport(
        pivot_date=pivot,
        rows=rows,
        summary=RentChargeSummary(upcoming_changes=len(rows), average_change=average),
    )


# ===========================================
# SERVICE
# ===========================================

class RentReportsService:
    """Loads collaborator data and runs the rent report builders with configured windows."""
    
    def __init__(self, source: ReportDataSource, settings: Optional[Settings] = None):
        self.source = source
        self.settings = settings or get_settings()
    
    async def _load(self) -> ReportingContext:
        return await ReportDataLoader(self.source).load_context()
    
    async def rent_roll(self, filters: RentRollFilters, reference_date: date) -> RentRollReport:
        ctx = await self._load()
        report = build_rent_roll_report(
            ctx,
            filters,
            reference_date,
            history_months=self.settings.rent_roll_history_months,
            lease_term_months=self.settings.lease_term_months,
        )
        logger.info(
            f"Rent roll {report.period_start:%Y-%m}: {report.totals.total_units} units, "
            f"{report.totals.occupied_units} occupied"
        )
        return report
    
    async def overdue_rent(self, filters: OverdueRentFilters, reference_date: date) -> OverdueRentReport:
        ctx = await self._load()
        report = build_overdue_rent_report(
            ctx,
            filters,
            reference_date,
            lookback_months=self.settings.overdue_lookback_months,
            active_payment_days=self.settings.active_tenant_payment_days,
            worst_count=self.settings.worst_offenders_count,
        )
        logger.info(
            f"Overdue rent as of {reference_date}: {report.totals.tenant_count} tenants, "
            f"{report.totals.total_balance} outstanding"
        )
        return report
    
    async def lease_expiry(self, filters: LeaseExpiryFilters, reference_date: date) -> LeaseExpiryReport:
        ctx = await self._load()
        report = build_lease_expiry_report(
            ctx,
            filters,
            reference_date,
            lease_term_months=self.settings.lease_term_months,
            notice_days=self.settings.lease_notice_days,
        )
        logger.info(f"Lease expiry within {filters.range_days} days: {report.totals.expiring} leases")
        return report
    
    async def rent_charges(self, filters: RentChargeFilters, reference_date: date) -> RentChargeReport:
        ctx = await self._load()
        report = build_rent_charge_report(
            ctx,
            filters,
            reference_date,
            uplift_pct=self.settings.annual_rent_uplift_pct,
        )
        logger.info(f"Rent charge schedule from {report.pivot_date}: {report.summary.upcoming_changes} changes")
        return report
