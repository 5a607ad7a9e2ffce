"""
PropLedger - Journal Entry Lines

Double-entry lines posted by the bookkeeping side of the back office.
Account ids refer to the static chart in services/chart_of_accounts.py.
"""

from datetime import date
from decimal import Decimal
from typing import Optional

from sqlalchemy import Date, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from propledger.models.base import BaseModel


class JournalEntryLine(BaseModel):
    """One debit/credit line of a journal entry."""
    
    __tablename__ = "journal_entry_lines"
    
    entry_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    property_id: Mapped[Optional[str]] = mapped_column(String(50), nullable=True, index=True)
    entry_date: Mapped[date] = mapped_column("date", Date, nullable=False, index=True)
    account_id: Mapped[str] = mapped_column(String(20), nullable=False, index=True)
    description: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    debit: Mapped[Decimal] = mapped_column(Numeric(precision=15, scale=2), default=Decimal("0.00"), nullable=False)
    credit: Mapped[Decimal] = mapped_column(Numeric(precision=15, scale=2), default=Decimal("0.00"), nullable=False)
