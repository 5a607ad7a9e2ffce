"""
PropLedger - Payment Models

Receipts arrive from two disjoint feeds: the imported bank statement and
manually recorded payments. There is no shared key between them.
"""

from datetime import date
from decimal import Decimal
from typing import Optional

from sqlalchemy import Date, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from propledger.models.base import BaseModel


class BankPayment(BaseModel):
    """Bank statement line matched (or not) to a tenant."""
    
    __tablename__ = "bank_payments"
    
    tenant_id: Mapped[Optional[str]] = mapped_column(String(64), nullable=True, index=True)
    property_id: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    payment_date: Mapped[date] = mapped_column("date", Date, nullable=False, index=True)
    amount: Mapped[Decimal] = mapped_column(Numeric(precision=12, scale=2), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    type: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)


class ManualPayment(BaseModel):
    """Receipt entered by hand, typically cash that never hit the bank feed."""
    
    __tablename__ = "manual_payments"
    
    tenant_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    payment_date: Mapped[date] = mapped_column("date", Date, nullable=False, index=True)
    amount: Mapped[Decimal] = mapped_column(Numeric(precision=12, scale=2), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
