"""
PropLedger - Rent Report Schemas

Filters, rows and results for the portfolio reports built from per-tenant
statements: rent roll, overdue rent, lease expiry and rent-charge schedule.
Each report has its own row type tagged with ``report``.
"""

from datetime import date
from decimal import Decimal
from enum import Enum
from typing import Any, List, Literal, Optional

from pydantic import AliasChoices, BaseModel, Field, field_validator

from propledger.utils.money import ZERO, to_decimal


# =============================================================================
# ENUMS
# =============================================================================

class OccupancyFilter(str, Enum):
    ALL = "all"
    OCCUPIED = "occupied"
    VACANT = "vacant"


class UnitStatus(str, Enum):
    OCCUPIED = "Occupied"
    VACANT = "Vacant"


class TenantStatus(str, Enum):
    """Inferred from payment recency; not stored anywhere."""
    ACTIVE = "active"
    MOVED_OUT = "moved_out"


class TenantStatusFilter(str, Enum):
    ACTIVE = "active"
    MOVED_OUT = "moved_out"
    ALL = "all"


class RenewalStatus(str, Enum):
    PENDING = "Pending"
    SENT = "Sent"
    CONFIRMED = "Confirmed"


class RentChangeType(str, Enum):
    INCREASE = "Increase"
    DECREASE = "Decrease"
    RENEWAL = "Renewal"


class PaymentMethod(str, Enum):
    BANK = "Bank"
    MANUAL = "Manual"
    NONE = "—"


# =============================================================================
# SHARED
# =============================================================================

class PropertyInfo(BaseModel):
    """Property name lookup entry."""
    property_id: str
    name: Optional[str] = None


class UnitRecord(BaseModel):
    """Unit inventory entry."""
    unit: str
    property_id: Optional[str] = None
    floor: Optional[str] = None
    unit_type: Optional[str] = Field(None, validation_alias=AliasChoices("unit_type", "type"))
    beds: Optional[int] = None
    rent: Decimal = ZERO
    status: Optional[str] = None
    
    @field_validator("unit", "property_id", "floor", mode="before")
    @classmethod
    def _stringify(cls, value: Any) -> Any:
        if value is None or isinstance(value, str):
            return value
        return str(value)
    
    @field_validator("beds", mode="before")
    @classmethod
    def _parse_beds(cls, value: Any) -> Optional[int]:
        if value is None or value == "":
            return None
        return int(to_decimal(value))
    
    @field_validator("rent", mode="before")
    @classmethod
    def _parse_rent(cls, value: Any) -> Decimal:
        return to_decimal(value)


# =============================================================================
# RENT ROLL
# =============================================================================

class RentRollFilters(BaseModel):
    """Rent roll filters. ``month`` is ``YYYY-MM``; defaults to the reference month."""
    property_id: Optional[str] = None
    month: Optional[str] = None
    unit_type: Optional[str] = None
    occupancy: OccupancyFilter = OccupancyFilter.ALL


class RentRollRow(BaseModel):
    """One unit line of the rent roll, occupied or vacant."""
    report: Literal["rent_roll"] = "rent_roll"
    property_id: str
    property_name: str
    unit: str
    tenant_id: Optional[str] = None
    tenant: str
    lease_start: Optional[date] = None
    lease_end: Optional[date] = None
    lease_inferred: bool = False
    monthly_rent: Decimal = ZERO
    prorated_rent: Decimal = ZERO
    expected_rent: Decimal = ZERO
    status: UnitStatus
    unit_type: str = "Unknown"
    rent_due: Decimal = ZERO
    rent_received: Decimal = ZERO
    balance: Decimal = ZERO
    deposit_held: Decimal = ZERO
    arrears_status: str
    payment_method: PaymentMethod = PaymentMethod.NONE


class RentRollTotals(BaseModel):
    total_units: int = 0
    occupied_units: int = 0
    vacant_units: int = 0
    expected_rent: Decimal = ZERO
    rent_due: Decimal = ZERO
    rent_received: Decimal = ZERO
    balance: Decimal = ZERO


class RentRollReport(BaseModel):
    """Rent roll for one month."""
    period_start: date
    period_end: date
    rows: List[RentRollRow] = Field(default_factory=list)
    totals: RentRollTotals
    unit_types: List[str] = Field(default_factory=list)


# =============================================================================
# OVERDUE RENT
# =============================================================================

class OverdueRentFilters(BaseModel):
    property_id: Optional[str] = None
    days: int = Field(30, ge=0, description="Minimum days since oldest unpaid charge")
    tenant_status: TenantStatusFilter = TenantStatusFilter.ALL


class OverdueRentRow(BaseModel):
    """A tenant carrying a positive balance past the days threshold."""
    report: Literal["overdue_rent"] = "overdue_rent"
    tenant_id: str
    tenant: str
    property_id: str
    property_name: str
    unit: str
    monthly_rent: Decimal = ZERO
    last_payment_date: Optional[date] = None
    last_payment_amount: Optional[Decimal] = None
    outstanding_balance: Decimal
    days_overdue: int
    arrears_status: str
    tenant_status: TenantStatus
    contact_email: Optional[str] = None
    contact_phone: Optional[str] = None
    notes: str


class OverdueRentTotals(BaseModel):
    tenant_count: int = 0
    total_balance: Decimal = ZERO


class OverdueRentReport(BaseModel):
    """Overdue rent over the trailing lookback window."""
    period_start: date
    period_end: date
    rows: List[OverdueRentRow] = Field(default_factory=list)
    totals: OverdueRentTotals
    worst_ten: List[OverdueRentRow] = Field(default_factory=list)


# =============================================================================
# LEASE EXPIRY
# =============================================================================

class LeaseExpiryFilters(BaseModel):
    property_id: Optional[str] = None
    range_days: int = Field(60, ge=0)
    unit_type: Optional[str] = None


class LeaseExpiryRow(BaseModel):
    """An inferred lease anniversary falling inside the look-ahead range."""
    report: Literal["lease_expiry"] = "lease_expiry"
    tenant_id: str
    tenant: str
    property_id: str
    property_name: str
    unit: str
    unit_type: str = "Unknown"
    lease_start: date
    lease_end: date
    lease_inferred: bool = True
    notice_days: int
    notice_deadline: date
    days_until_expiry: int
    renewal_status: RenewalStatus
    notes: str


class LeaseExpiryTotals(BaseModel):
    expiring: int = 0
    confirmed: int = 0
    vacancies: int = 0


class LeaseExpiryReport(BaseModel):
    """Leases expiring between the reference date and ``range_days`` later."""
    reference_date: date
    rows: List[LeaseExpiryRow] = Field(default_factory=list)
    totals: LeaseExpiryTotals
    unit_types: List[str] = Field(default_factory=list)


# =============================================================================
# RENT CHARGE SCHEDULE
# =============================================================================

class RentChargeFilters(BaseModel):
    property_id: Optional[str] = None
    effective_date: Optional[date] = None
    query: Optional[str] = None


class RentChargeRow(BaseModel):
    """Upcoming rent change at the next inferred lease anniversary."""
    report: Literal["rent_charge"] = "rent_charge"
    tenant_id: str
    tenant: str
    property_id: str
    property_name: str
    unit: str
    current_rent: Decimal
    next_rent: Decimal
    effective_date: date
    lease_inferred: bool = True
    change_type: RentChangeType
    notes: str


class RentChargeSummary(BaseModel):
    upcoming_changes: int = 0
    average_change: Decimal = ZERO


class RentChargeReport(BaseModel):
    """Rent changes scheduled after the pivot date."""
    pivot_date: date
    rows: List[RentChargeRow] = Field(default_factory=list)
    summary: RentChargeSummary
