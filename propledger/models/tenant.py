"""
PropLedger - Tenant Models

Tenant master records plus the two optional per-tenant enrichments
(security deposits and ad-hoc charges).

Tenant ids are the legacy text identifiers imported from spreadsheets; some
arrive formatted as floats ("12.0"). Feed tables keep ``tenant_id`` as plain
text rather than a foreign key for the same reason.
"""

from datetime import date
from decimal import Decimal
from typing import Optional

from sqlalchemy import Date, Integer, Numeric, String, Text
from sqlalchemy.orm import Mapped, mapped_column

from propledger.database import Base
from propledger.models.base import BaseModel, TimestampMixin


class Tenant(Base, TimestampMixin):
    """Source of truth for recurring rent charge generation."""
    
    __tablename__ = "tenants"
    
    id: Mapped[str] = mapped_column(String(64), primary_key=True)
    name: Mapped[str] = mapped_column(String(255), nullable=False)
    property_id: Mapped[Optional[str]] = mapped_column(String(50), nullable=True, index=True)
    building: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    unit: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    reference: Mapped[Optional[str]] = mapped_column(String(100), nullable=True)
    monthly_rent: Mapped[Optional[Decimal]] = mapped_column(Numeric(precision=12, scale=2), nullable=True)
    due_day: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    email: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)
    phone: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)


class TenantDeposit(Base, TimestampMixin):
    """Deposit summary per tenant. Held = received - released."""
    
    __tablename__ = "tenant_deposits"
    
    tenant_id: Mapped[str] = mapped_column(String(64), primary_key=True)
    deposit_charged: Mapped[Optional[Decimal]] = mapped_column(Numeric(precision=12, scale=2), nullable=True)
    deposit_received: Mapped[Optional[Decimal]] = mapped_column(Numeric(precision=12, scale=2), nullable=True)
    deposit_released: Mapped[Optional[Decimal]] = mapped_column(Numeric(precision=12, scale=2), nullable=True)
    deposit_notes: Mapped[Optional[str]] = mapped_column(Text, nullable=True)


class TenantCharge(BaseModel):
    """Ad-hoc charge (utility true-up, fee) recorded against a tenant."""
    
    __tablename__ = "tenant_charges"
    
    tenant_id: Mapped[str] = mapped_column(String(64), nullable=False, index=True)
    charge_date: Mapped[date] = mapped_column("date", Date, nullable=False, index=True)
    amount: Mapped[Decimal] = mapped_column(Numeric(precision=12, scale=2), nullable=False)
    description: Mapped[Optional[str]] = mapped_column(String(500), nullable=True)
    category: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
