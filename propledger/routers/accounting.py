"""
PropLedger - Accounting Router

API endpoints for the journal-line accounting reports.
"""

from datetime import date
from typing import List, Optional

from fastapi import APIRouter, Depends, HTTPException, Query, status

from propledger.dependencies import get_report_data_source
from propledger.schemas.accounting import (
    Account,
    AccountingFilters,
    BalanceSheetReport,
    CashFlowStatementReport,
    GeneralLedgerRow,
    IncomeStatementReport,
    JournalEntryView,
    TrialBalanceReport,
)
from propledger.services.accounting_reports_service import AccountingReportsService
from propledger.services.chart_of_accounts import list_chart_of_accounts
from propledger.services.data_sources import ReportDataSource

router = APIRouter()


def get_accounting_filters(
    property_id: Optional[str] = Query(None, description="Property code filter"),
    start: Optional[date] = Query(None, description="Period start date"),
    end: Optional[date] = Query(None, description="Period end date"),
    account_id: Optional[str] = Query(None, description="Restrict to one account"),
) -> AccountingFilters:
    if start and end and start > end:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Start date must be before end date",
        )
    return AccountingFilters(property_id=property_id, start=start, end=end, account_id=account_id)


# ===========================================
# FINANCIAL STATEMENTS
# ===========================================

@router.get("/trial-balance", response_model=TrialBalanceReport)
async def get_trial_balance(
    filters: AccountingFilters = Depends(get_accounting_filters),
    source: ReportDataSource = Depends(get_report_data_source),
):
    """Debit and credit totals per account."""
    return await AccountingReportsService(source).get_trial_balance(filters)


@router.get("/balance-sheet", response_model=BalanceSheetReport)
async def get_balance_sheet(
    filters: AccountingFilters = Depends(get_accounting_filters),
    source: ReportDataSource = Depends(get_report_data_source),
):
    return await AccountingReportsService(source).get_balance_sheet(filters)


@router.get("/income-statement", response_model=IncomeStatementReport)
async def get_income_statement(
    filters: AccountingFilters = Depends(get_accounting_filters),
    source: ReportDataSource = Depends(get_report_data_source),
):
    return await AccountingReportsService(source).get_income_statement(filters)


@router.get("/cashflow", response_model=CashFlowStatementReport)
async def get_cash_flow_statement(
    filters: AccountingFilters = Depends(get_accounting_filters),
    source: ReportDataSource = Depends(get_report_data_source),
):
    """
    Net change per activity (operating, investing, financing).
    
    Ending cash sums the cash-flagged accounts.
    """
    return await AccountingReportsService(source).get_cash_flow_statement(filters)


# ===========================================
# LEDGERS
# ===========================================

@router.get("/general-ledger", response_model=List[GeneralLedgerRow])
async def get_general_ledger(
    filters: AccountingFilters = Depends(get_accounting_filters),
    source: ReportDataSource = Depends(get_report_data_source),
):
    return await AccountingReportsService(source).get_general_ledger(filters)


@router.get("/journal-entries", response_model=List[JournalEntryView])
async def get_journal_entries(
    filters: AccountingFilters = Depends(get_accounting_filters),
    source: ReportDataSource = Depends(get_report_data_source),
):
    """Journal entries with their lines, newest first."""
    return await AccountingReportsService(source).get_journal_entries(filters)


@router.get("/chart-of-accounts", response_model=List[Account])
async def get_chart_of_accounts():
    """Static chart, sorted by account id."""
    return list_chart_of_accounts()
