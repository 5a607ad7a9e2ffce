"""
PropLedger - Accounting Reports Service

Reduces journal-entry lines by account into category-signed balances and
projects them into:
- Trial balance
- Balance sheet
- Income statement
- Cash flow by activity
- General ledger and journal entry listings

Every projection goes through the same filter and reduction step, so for
one filter set they reconcile:
    assets - (liabilities + equity) == net_income + (total_debits - total_credits)
"""

import logging
from collections import OrderedDict
from typing import Any, Dict, Iterable, List, Mapping

from propledger.schemas.accounting import (
    Account,
    AccountBalance,
    AccountCategory,
    AccountingFilters,
    BalanceSheetReport,
    CashFlowCategory,
    CashFlowSection,
    CashFlowStatementReport,
    GeneralLedgerRow,
    IncomeStatementReport,
    JournalEntryLineView,
    JournalEntryView,
    JournalLine,
    ReportSection,
    StatementLineItem,
    TrialBalanceItem,
    TrialBalanceReport,
)
from propledger.services.chart_of_accounts import find_account
from propledger.services.data_sources import ReportDataSource
from propledger.services.report_loader import ReportDataLoader
from propledger.utils.dates import parse_date, within_range
from propledger.utils.money import ZERO, round_money, sum_money, to_decimal

logger = logging.getLogger(__name__)

CASHFLOW_LABELS = {
    CashFlowCategory.OPERATING: "Operating activities",
    CashFlowCategory.INVESTING: "Investing activities",
    CashFlowCategory.FINANCING: "Financing activities",
}

# Lines posted to this property apply to every property filter
ALL_PROPERTIES = "all"


# =========================================================================
# FILTER & REDUCE
# =========================================================================

def normalize_journal_lines(
    records: Iterable[Mapping[str, Any]],
    filters: AccountingFilters,
) -> List[JournalLine]:
    """
    Resolve raw lines against the chart and apply the filters.
    
    Unknown accounts and malformed or out-of-range dates are dropped.
    """
    property_filter = (filters.property_id or "").strip().lower()
    account_filter = (filters.account_id or "").strip()
    lines = []
    
    for record in records:
        account = find_account(record.get("account_id"))
        if account is None:
            continue
        if account_filter and account.id != account_filter:
            continue
        line_date = parse_date(record.get("date"))
        if line_date is None or not within_range(line_date, filters.start, filters.end):
            continue
        line_property = str(record.get("property_id") or "")
        if property_filter and line_property.lower() not in (property_filter, ALL_PROPERTIES):
            continue
        lines.append(JournalLine(
            entry_id=str(record.get("entry_id") or ""),
            property_id=line_property or None,
            date=line_date,
            account_id=account.id,
            account_name=account.name,
            category=account.category,
            debit=to_decimal(record.get("debit")),
            credit=to_decimal(record.get("credit")),
            description=record.get("description"),
        ))
    return lines


def accumulate_account_balances(lines: Iterable[JournalLine]) -> Dict[str, AccountBalance]:
    """Per-account debit and credit totals, in first-seen order."""
    balances: Dict[str, AccountBalance] = OrderedDict()
    for line in lines:
        bucket = balances.get(line.account_id)
        if bucket is None:
            bucket = AccountBalance(
                account_id=line.account_id,
                account_name=line.account_name,
                category=line.category,
            )
            balances[line.account_id] = bucket
        bucket.debit += line.debit
        bucket.credit += line.credit
    return balances


def _section(label: str, balances: Iterable[AccountBalance]) -> ReportSection:
    rows = []
    for entry in balances:
        balance = round_money(entry.balance)
        if not balance:
            continue
        rows.append(StatementLineItem(
            account_id=entry.account_id,
            account_name=entry.account_name,
            balance=balance,
        ))
    rows.sort(key=lambda row: row.account_name.casefold())
    return ReportSection(label=label, rows=rows, total=sum_money(row.balance for row in rows))


def _of_category(balances: Dict[str, AccountBalance], category: AccountCategory) -> List[AccountBalance]:
    return [entry for entry in balances.values() if entry.category == category]


# =========================================================================
# PROJECTIONS
# =========================================================================

def build_trial_balance(lines: Iterable[JournalLine]) -> TrialBalanceReport:
    """Raw debit and credit totals per account."""
    balances = accumulate_account_balances(lines)
    items = [
        TrialBalanceItem(
            account_id=entry.account_id,
            account_name=entry.account_name,
            category=entry.category,
            debit=round_money(entry.debit),
            credit=round_money(entry.credit),
        )
        for entry in balances.values()
    ]
    items.sort(key=lambda item: item.account_name.casefold())
    
    total_debits = sum_money(item.debit for item in items)
    total_credits = sum_money(item.credit for item in items)
    return TrialBalanceReport(
        items=items,
        total_debits=total_debits,
        total_credits=total_credits,
        is_balanced=total_debits == total_credits,
    )


def build_balance_sheet(lines: Iterable[JournalLine]) -> BalanceSheetReport:
    balances = accumulate_account_balances(lines)
    return BalanceSheetReport(
        assets=_section("Assets", _of_category(balances, AccountCategory.ASSET)),
        liabilities=_section("Liabilities", _of_category(balances, AccountCategory.LIABILITY)),
        equity=_section("Equity", _of_category(balances, AccountCategory.EQUITY)),
    )


def build_income_statement(lines: Iterable[JournalLine]) -> IncomeStatementReport:
    balances = accumulate_account_balances(lines)
    income = _section("Income", _of_category(balances, AccountCategory.INCOME))
    expenses = _section("Expenses", _of_category(balances, AccountCategory.EXPENSE))
    return IncomeStatementReport(
        income=income,
        expenses=expenses,
        net_income=round_money(income.total - expenses.total),
    )


def build_cash_flow_statement(lines: Iterable[JournalLine]) -> CashFlowStatementReport:
    """
    Net balance change per activity, summed into the net change.
    
    Ending cash is summed separately over accounts flagged as cash.
    """
    balances = accumulate_account_balances(lines)
    changes = {category: ZERO for category in CashFlowCategory}
    ending_cash = ZERO
    
    for account_id, entry in balances.items():
        account: Account = find_account(account_id)
        if account.is_cash:
            ending_cash += entry.balance
        changes[account.cashflow_section] += entry.balance
    
    sections = [
        CashFlowSection(category=category, label=CASHFLOW_LABELS[category], change=round_money(changes[category]))
        for category in CashFlowCategory
    ]
    return CashFlowStatementReport(
        sections=sections,
        net_change=sum_money(section.change for section in sections),
        ending_cash=round_money(ending_cash),
    )


def build_general_ledger(lines: Iterable[JournalLine]) -> List[GeneralLedgerRow]:
    """All matching lines in date order."""
    rows = [
        GeneralLedgerRow(
            date=line.date,
            entry_id=line.entry_id,
            account_id=line.account_id,
            account_name=line.account_name,
            description=line.description,
            debit=round_money(line.debit),
            credit=round_money(line.credit),
        )
        for line in lines
    ]
    rows.sort(key=lambda row: row.date)
    return rows


def group_journal_entries(lines: Iterable[JournalLine]) -> List[JournalEntryView]:
    """Lines grouped by entry id, newest entry first."""
    grouped: Dict[str, JournalEntryView] = OrderedDict()
    for line in lines:
        entry = grouped.get(line.entry_id)
        if entry is None:
            entry = JournalEntryView(entry_id=line.entry_id, property_id=line.property_id, date=line.date)
            grouped[line.entry_id] = entry
        entry.lines.append(JournalEntryLineView(
            account_id=line.account_id,
            account_name=line.account_name,
            category=line.category,
            debit=round_money(line.debit),
            credit=round_money(line.credit),
            description=line.description,
        ))
    return sorted(grouped.values(), key=lambda entry: entry.date, reverse=True)


# =========================================================================
# SERVICE
# =========================================================================

class AccountingReportsService:
    """Accounting reports over the journal-line feed."""
    
    def __init__(self, source: ReportDataSource):
        self.source = source
    
    async def _lines(self, filters: AccountingFilters) -> List[JournalLine]:
        records = await ReportDataLoader(self.source).load_journal_lines()
        lines = normalize_journal_lines(records, filters)
        logger.debug(f"Journal lines: {len(records)} loaded, {len(lines)} after filters")
        return lines
    
    async def get_trial_balance(self, filters: AccountingFilters) -> TrialBalanceReport:
        report = build_trial_balance(await self._lines(filters))
        if not report.is_balanced:
            logger.warning(
                f"Trial balance out of balance: debits {report.total_debits}, "
                f"credits {report.total_credits}"
            )
        return report
    
    async def get_balance_sheet(self, filters: AccountingFilters) -> BalanceSheetReport:
        return build_balance_sheet(await self._lines(filters))
    
    async def get_income_statement(self, filters: AccountingFilters) -> IncomeStatementReport:
        return build_income_statement(await self._lines(filters))
    
    async def get_cash_flow_statement(self, filters: AccountingFilters) -> CashFlowStatementReport:
        return build_cash_flow_statement(await self._lines(filters))
    
    async def get_general_ledger(self, filters: AccountingFilters) -> List[GeneralLedgerRow]:
        return build_general_ledger(await self._lines(filters))
    
    async def get_journal_entries(self, filters: AccountingFilters) -> List[JournalEntryView]:
        return group_journal_entries(await self._lines(filters))