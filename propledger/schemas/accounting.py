"""
PropLedger - Accounting Report Schemas

Pydantic schemas for the journal-line aggregations: trial balance,
balance sheet, income statement, cash flow and general ledger.
"""

from datetime import date
from decimal import Decimal
from enum import Enum
from typing import List, Optional

from pydantic import BaseModel, Field

from propledger.utils.money import ZERO


# =============================================================================
# CHART OF ACCOUNTS
# =============================================================================

class AccountCategory(str, Enum):
    """Account categories. Asset and expense balances are debit-normal."""
    ASSET = "asset"
    LIABILITY = "liability"
    EQUITY = "equity"
    INCOME = "income"
    EXPENSE = "expense"
    
    @property
    def is_debit_normal(self) -> bool:
        return self in (AccountCategory.ASSET, AccountCategory.EXPENSE)


class CashFlowCategory(str, Enum):
    """Cash flow statement categories."""
    OPERATING = "operating"
    INVESTING = "investing"
    FINANCING = "financing"


class Account(BaseModel):
    """Static chart-of-accounts entry."""
    id: str
    name: str
    category: AccountCategory
    is_cash: bool = False
    cashflow_section: CashFlowCategory = CashFlowCategory.OPERATING


# =============================================================================
# FILTERS & NORMALIZED LINES
# =============================================================================

class AccountingFilters(BaseModel):
    property_id: Optional[str] = None
    start: Optional[date] = None
    end: Optional[date] = None
    account_id: Optional[str] = None


class JournalLine(BaseModel):
    """Journal line resolved against the chart and converted to Decimal."""
    entry_id: str
    property_id: Optional[str] = None
    date: date
    account_id: str
    account_name: str
    category: AccountCategory
    debit: Decimal = ZERO
    credit: Decimal = ZERO
    description: Optional[str] = None


class AccountBalance(BaseModel):
    """Per-account debit/credit accumulation."""
    account_id: str
    account_name: str
    category: AccountCategory
    debit: Decimal = ZERO
    credit: Decimal = ZERO
    
    @property
    def balance(self) -> Decimal:
        """Category-signed balance."""
        if self.category.is_debit_normal:
            return self.debit - self.credit
        return self.credit - self.debit


# =============================================================================
# TRIAL BALANCE
# =============================================================================

class TrialBalanceItem(BaseModel):
    """Item in trial balance report."""
    account_id: str
    account_name: str
    category: AccountCategory
    debit: Decimal
    credit: Decimal


class TrialBalanceReport(BaseModel):
    """Trial balance report."""
    items: List[TrialBalanceItem] = Field(default_factory=list)
    total_debits: Decimal = ZERO
    total_credits: Decimal = ZERO
    is_balanced: bool = True


# =============================================================================
# BALANCE SHEET & INCOME STATEMENT
# =============================================================================

class StatementLineItem(BaseModel):
    """Per-account line in a balance sheet or income statement section."""
    account_id: str
    account_name: str
    balance: Decimal


class ReportSection(BaseModel):
    label: str
    rows: List[StatementLineItem] = Field(default_factory=list)
    total: Decimal = ZERO


class BalanceSheetReport(BaseModel):
    """Balance sheet report."""
    assets: ReportSection
    liabilities: ReportSection
    equity: ReportSection


class IncomeStatementReport(BaseModel):
    """Income statement (P&L) report."""
    income: ReportSection
    expenses: ReportSection
    net_income: Decimal = ZERO


# =============================================================================
# CASH FLOW
# =============================================================================

class CashFlowSection(BaseModel):
    """Net balance change for one activity."""
    category: CashFlowCategory
    label: str
    change: Decimal = ZERO


class CashFlowStatementReport(BaseModel):
    """Cash flow by activity, with ending cash over cash accounts."""
    sections: List[CashFlowSection] = Field(default_factory=list)
    net_change: Decimal = ZERO
    ending_cash: Decimal = ZERO


# =============================================================================
# LEDGER VIEWS
# =============================================================================

class GeneralLedgerRow(BaseModel):
    """Flat general ledger line."""
    date: date
    entry_id: str
    account_id: str
    account_name: str
    description: Optional[str] = None
    debit: Decimal
    credit: Decimal


class JournalEntryLineView(BaseModel):
    account_id: str
    account_name: str
    category: AccountCategory
    debit: Decimal
    credit: Decimal
    description: Optional[str] = None


class JournalEntryView(BaseModel):
    """Journal lines grouped under their entry id."""
    entry_id: str
    property_id: Optional[str] = None
    date: date
    lines: List[JournalEntryLineView] = Field(default_factory=list)
