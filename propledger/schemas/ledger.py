"""
PropLedger - Ledger Schemas

Pydantic schemas for tenant records, charges, payments and the
running-balance statement they are merged into.
"""

from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

from propledger.utils.money import ZERO, round_money, to_decimal


# =============================================================================
# ENUMS
# =============================================================================

class PaymentSource(str, Enum):
    """Feed a payment came from. Bank and manual receipts are never de-duplicated."""
    BANK = "bank"
    MANUAL = "manual"


class EntryType(str, Enum):
    CHARGE = "charge"
    PAYMENT = "payment"


class AgingBucket(str, Enum):
    IN_CREDIT = "in_credit"
    CURRENT = "current"
    PENDING = "pending"
    DAYS_0_30 = "0-30"
    DAYS_31_60 = "31-60"
    DAYS_61_90 = "61-90"
    DAYS_90_PLUS = "90+"


# =============================================================================
# INPUT RECORDS
# =============================================================================

class TenantRecord(BaseModel):
    """Tenant snapshot as delivered by the tenant list."""
    model_config = ConfigDict(extra="ignore")
    
    id: str
    name: str = ""
    property_id: Optional[str] = None
    building: Optional[str] = None
    unit: Optional[str] = None
    reference: Optional[str] = None
    monthly_rent: Decimal = ZERO
    due_day: int = Field(1, description="Day of month rent falls due (1-31)")
    email: Optional[str] = None
    phone: Optional[str] = None
    
    @field_validator("id", "property_id", "building", "unit", "reference", mode="before")
    @classmethod
    def _stringify(cls, value: Any) -> Any:
        # Spreadsheet imports deliver numeric ids and unit labels
        if value is None or isinstance(value, str):
            return value
        return str(value)
    
    @field_validator("name", mode="before")
    @classmethod
    def _name_or_blank(cls, value: Any) -> str:
        return "" if value is None else str(value)
    
    @field_validator("monthly_rent", mode="before")
    @classmethod
    def _parse_rent(cls, value: Any) -> Decimal:
        return to_decimal(value)
    
    @field_validator("due_day", mode="before")
    @classmethod
    def _parse_due_day(cls, value: Any) -> int:
        day = int(to_decimal(value, Decimal(1)))
        return day if day > 0 else 1


class ChargeEntry(BaseModel):
    """A dated obligation other than the synthesized monthly rent."""
    
    date: date
    amount: Decimal
    description: str = "Charge"
    category: Optional[str] = None


class PaymentEntry(BaseModel):
    """A dated receipt fed to the statement builder."""
    
    date: date
    amount: Decimal
    description: Optional[str] = None
    source: Optional[PaymentSource] = None


class DepositInfo(BaseModel):
    """Per-tenant deposit summary. Never derived from the statement ledger."""
    
    charged: Decimal = ZERO
    received: Decimal = ZERO
    released: Decimal = ZERO
    notes: Optional[str] = None
    
    @property
    def held(self) -> Decimal:
        return round_money(self.received - self.released)


class InferredLease(BaseModel):
    """
    Lease dates reconstructed from payment history.
    
    The data path has no lease agreement record, so the first payment stands
    in for the lease start. ``inferred`` is always True to mark the proxy.
    """
    
    start: date
    end: date
    inferred: bool = True


# =============================================================================
# STATEMENT
# =============================================================================

class StatementRow(BaseModel):
    """One ledger line. Exactly one of charge/payment is non-zero."""
    
    date: date
    description: str
    entry_type: EntryType
    charge: Decimal = ZERO
    payment: Decimal = ZERO
    balance: Decimal
    source: Optional[PaymentSource] = None
    category: Optional[str] = None


class StatementTotals(BaseModel):
    charges: Decimal = ZERO
    payments: Decimal = ZERO
    balance: Decimal = ZERO


class StatementPeriod(BaseModel):
    start: date
    end: date


class Statement(BaseModel):
    """Running-balance ledger for one tenant over one window."""
    
    tenant: TenantRecord
    period: StatementPeriod
    opening_balance: Decimal = ZERO
    totals: StatementTotals
    rows: List[StatementRow] = Field(default_factory=list)


class ArrearsClassification(BaseModel):
    """Aging of a statement's oldest unpaid charge at a reference date."""
    
    label: str
    bucket: AgingBucket
    days_overdue: int = 0
    oldest_unpaid_date: Optional[date] = None
