"""
PropLedger - Accounting Reports Tests

Trial balance, balance sheet, income statement, cash flow and ledger
projections over the sample journal.
"""

from datetime import date
from decimal import Decimal

import pytest

from propledger.schemas.accounting import AccountCategory, AccountingFilters, CashFlowCategory
from propledger.services.accounting_reports_service import (
    build_balance_sheet,
    build_cash_flow_statement,
    build_general_ledger,
    build_income_statement,
    build_trial_balance,
    group_journal_entries,
    normalize_journal_lines,
)
from propledger.services.chart_of_accounts import find_account, list_chart_of_accounts

from conftest import sample_journal_lines


def lines_for(**filters):
    return normalize_journal_lines(sample_journal_lines(), AccountingFilters(**filters))


class TestNormalizeJournalLines:
    """Tests for filtering raw journal lines."""
    
    def test_drops_unknown_accounts_and_bad_dates(self):
        lines = lines_for()
        
        assert len(lines) == 14
        assert {line.entry_id for line in lines} == {"E1", "E2", "E3", "E4", "E5", "E6", "E7"}
    
    def test_resolves_account_from_chart(self):
        line = lines_for(account_id="4000")[0]
        
        assert line.account_name == "Rental Income"
        assert line.category == AccountCategory.INCOME
        assert line.credit == Decimal("1000")
    
    def test_property_filter_keeps_shared_lines(self):
        entries = {line.entry_id for line in lines_for(property_id="t1")}
        
        assert "E6" not in entries
        assert "E7" in entries
    
    def test_date_window_is_inclusive(self):
        entries = {line.entry_id for line in lines_for(start=date(2024, 3, 1), end=date(2024, 3, 12))}
        assert entries == {"E4", "E5", "E6", "E7"}


class TestTrialBalance:
    """Tests for build_trial_balance."""
    
    def test_balanced_journal(self):
        report = build_trial_balance(lines_for())
        
        assert report.total_debits == Decimal("15800.00")
        assert report.total_credits == Decimal("15800.00")
        assert report.is_balanced is True
    
    def test_items_sorted_by_name(self):
        report = build_trial_balance(lines_for())
        
        assert [item.account_name for item in report.items] == [
            "Furniture & Equipment",
            "Maintenance Expense",
            "Operating Cash",
            "Owner Equity",
            "Rental Income",
            "Security Deposit Cash",
            "Security Deposits Liability",
            "Utilities Expense",
        ]
    
    def test_single_account_is_unbalanced(self):
        report = build_trial_balance(lines_for(account_id="1010"))
        
        assert len(report.items) == 1
        assert report.total_debits == Decimal("11500.00")
        assert report.total_credits == Decimal("3300.00")
        assert report.is_balanced is False
    
    def test_empty_journal(self):
        report = build_trial_balance([])
        
        assert report.items == []
        assert report.total_debits == Decimal("0.00")
        assert report.is_balanced is True


class TestFinancialStatements:
    """Tests for the balance sheet and income statement."""
    
    def test_balance_sheet_sections(self):
        report = build_balance_sheet(lines_for())
        
        assert report.assets.total == Decimal("12200.00")
        assert {row.account_id: row.balance for row in report.assets.rows} == {
            "1010": Decimal("8200.00"),
            "1015": Decimal("1000.00"),
            "1500": Decimal("3000.00"),
        }
        assert report.liabilities.total == Decimal("1000.00")
        assert report.equity.total == Decimal("10000.00")
    
    def test_income_statement(self):
        report = build_income_statement(lines_for())
        
        assert report.income.total == Decimal("1500.00")
        assert report.expenses.total == Decimal("300.00")
        assert report.net_income == Decimal("1200.00")
    
    @pytest.mark.parametrize("filters", [
        {},
        {"property_id": "T1"},
        {"start": date(2024, 3, 1), "end": date(2024, 3, 31)},
        {"account_id": "1010"},
        {"account_id": "5000"},
    ])
    def test_balance_sheet_reconciles_with_trial_balance(self, filters):
        lines = lines_for(**filters)
        sheet = build_balance_sheet(lines)
        income = build_income_statement(lines)
        trial = build_trial_balance(lines)
        
        assert (
            sheet.assets.total - (sheet.liabilities.total + sheet.equity.total)
            == income.net_income + (trial.total_debits - trial.total_credits)
        )
    
    def test_unbalanced_journal_difference_lands_in_cross_check(self):
        lines = lines_for(account_id="1010")
        trial = build_trial_balance(lines)
        
        assert trial.total_debits - trial.total_credits == Decimal("8200.00")
        assert build_balance_sheet(lines).assets.total == Decimal("8200.00")
        assert build_income_statement(lines).net_income == Decimal("0.00")
    
    def test_property_filter_figures(self):
        lines = lines_for(property_id="T1")
        
        sheet = build_balance_sheet(lines)
        assert sheet.assets.total == Decimal("11700.00")
        assert sheet.assets.rows[0].account_name == "Furniture & Equipment"
        assert build_income_statement(lines).net_income == Decimal("700.00")
    
    def test_period_figures(self):
        lines = lines_for(start=date(2024, 3, 1), end=date(2024, 3, 31))
        
        sheet = build_balance_sheet(lines)
        assert sheet.assets.total == Decimal("1400.00")
        assert sheet.liabilities.total == Decimal("1000.00")
        assert sheet.equity.rows == []
        assert build_income_statement(lines).net_income == Decimal("400.00")
    
    def test_account_filter_keeps_cash_balance(self):
        sheet = build_balance_sheet(lines_for(account_id="1010"))
        
        assert sheet.assets.total == Decimal("8200.00")
        assert sheet.liabilities.total == Decimal("0.00")


class TestCashFlowStatement:
    """Tests for build_cash_flow_statement."""
    
    def test_sections_and_totals(self):
        report = build_cash_flow_statement(lines_for())
        changes = {section.category: section.change for section in report.sections}
        
        assert changes == {
            CashFlowCategory.OPERATING: Decimal("11000.00"),
            CashFlowCategory.INVESTING: Decimal("3000.00"),
            CashFlowCategory.FINANCING: Decimal("11000.00"),
        }
        assert report.net_change == Decimal("25000.00")
        assert report.ending_cash == Decimal("9200.00")
    
    def test_section_labels(self):
        report = build_cash_flow_statement([])
        
        assert [section.label for section in report.sections] == [
            "Operating activities",
            "Investing activities",
            "Financing activities",
        ]
        assert report.net_change == Decimal("0.00")


class TestLedgerViews:
    """Tests for the general ledger and journal entry views."""
    
    def test_general_ledger_in_date_order(self):
        rows = build_general_ledger(lines_for())
        
        assert len(rows) == 14
        assert [row.date for row in rows] == sorted(row.date for row in rows)
        assert rows[0].entry_id == "E1"
        assert rows[-1].entry_id == "E7"
    
    def test_journal_entries_newest_first(self):
        entries = group_journal_entries(lines_for())
        
        assert [entry.entry_id for entry in entries] == ["E7", "E6", "E5", "E4", "E3", "E2", "E1"]
        assert all(len(entry.lines) == 2 for entry in entries)
        assert entries[0].property_id == "all"
        assert entries[-1].lines[0].debit == Decimal("10000.00")


class TestChartOfAccounts:
    """Tests for the static chart."""
    
    def test_chart_sorted_by_id(self):
        ids = [account.id for account in list_chart_of_accounts()]
        
        assert ids == sorted(ids)
        assert len(ids) == 12
    
    def test_find_account(self):
        assert find_account(" 1010 ").name == "Operating Cash"
        assert find_account(1500).category == AccountCategory.ASSET
        assert find_account("9999") is None
        assert find_account(None) is None
