"""
PropLedger - Chart of Accounts

Static chart the journal lines post against. Lines referring to an
account outside this chart are ignored by every accounting report.
"""

from typing import Dict, List, Optional

from propledger.schemas.accounting import Account, AccountCategory, CashFlowCategory

ACCOUNTING_CHART: List[Account] = [
    Account(id="1010", name="Operating Cash", category=AccountCategory.ASSET,
            is_cash=True, cashflow_section=CashFlowCategory.OPERATING),
    Account(id="1015", name="Security Deposit Cash", category=AccountCategory.ASSET,
            is_cash=True, cashflow_section=CashFlowCategory.OPERATING),
    Account(id="1200", name="Accounts Receivable", category=AccountCategory.ASSET,
            cashflow_section=CashFlowCategory.OPERATING),
    Account(id="1500", name="Furniture & Equipment", category=AccountCategory.ASSET,
            cashflow_section=CashFlowCategory.INVESTING),
    Account(id="2000", name="Accounts Payable", category=AccountCategory.LIABILITY,
            cashflow_section=CashFlowCategory.OPERATING),
    Account(id="2100", name="Security Deposits Liability", category=AccountCategory.LIABILITY,
            cashflow_section=CashFlowCategory.FINANCING),
    Account(id="3100", name="Owner Equity", category=AccountCategory.EQUITY,
            cashflow_section=CashFlowCategory.FINANCING),
    Account(id="4000", name="Rental Income", category=AccountCategory.INCOME,
            cashflow_section=CashFlowCategory.OPERATING),
    Account(id="5000", name="Maintenance Expense", category=AccountCategory.EXPENSE,
            cashflow_section=CashFlowCategory.OPERATING),
    Account(id="5050", name="Cleaning Expense", category=AccountCategory.EXPENSE,
            cashflow_section=CashFlowCategory.OPERATING),
    Account(id="5060", name="Boiler Maintenance", category=AccountCategory.EXPENSE,
            cashflow_section=CashFlowCategory.OPERATING),
    Account(id="6000", name="Utilities Expense", category=AccountCategory.EXPENSE,
            cashflow_section=CashFlowCategory.OPERATING),
]

_BY_ID: Dict[str, Account] = {account.id: account for account in ACCOUNTING_CHART}


def find_account(account_id: Optional[str]) -> Optional[Account]:
    if account_id is None:
        return None
    return _BY_ID.get(str(account_id).strip())


def list_chart_of_accounts() -> List[Account]:
    return sorted(ACCOUNTING_CHART, key=lambda account: account.id)
