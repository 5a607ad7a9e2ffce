"""
PropLedger - Rent Reports Router

API endpoints for the portfolio rent reports.
"""

from datetime import date
from typing import Optional

from fastapi import APIRouter, Depends, Query

from propledger.dependencies import get_report_data_source
from propledger.schemas.rent_reports import (
    LeaseExpiryFilters,
    LeaseExpiryReport,
    OccupancyFilter,
    OverdueRentFilters,
    OverdueRentReport,
    RentChargeFilters,
    RentChargeReport,
    RentRollFilters,
    RentRollReport,
    TenantStatusFilter,
)
from propledger.services.data_sources import ReportDataSource
from propledger.services.rent_reports_service import RentReportsService

router = APIRouter()


# ===========================================
# RENT REPORTS
# ===========================================

@router.get("/reports/rent-roll", response_model=RentRollReport)
async def get_rent_roll(
    property_id: Optional[str] = Query(None, description="Property code filter"),
    month: Optional[str] = Query(None, pattern=r"^\d{4}-\d{2}$", description="Reporting month (YYYY-MM)"),
    unit_type: Optional[str] = Query(None, description="Unit type filter"),
    occupancy: OccupancyFilter = Query(OccupancyFilter.ALL),
    as_of: Optional[date] = Query(None, description="Reference date (defaults to today)"),
    source: ReportDataSource = Depends(get_report_data_source),
):
    """
    Rent roll for one month.
    
    Shows per unit:
    - Expected, due and received rent
    - Balance and arrears aging
    - Deposit held
    - Vacant units with their advertised rent
    """
    filters = RentRollFilters(
        property_id=property_id,
        month=month,
        unit_type=unit_type,
        occupancy=occupancy,
    )
    service = RentReportsService(source)
    return await service.rent_roll(filters, as_of or date.today())


@router.get("/reports/overdue-rent", response_model=OverdueRentReport)
async def get_overdue_rent(
    property_id: Optional[str] = Query(None, description="Property code filter"),
    days: Optional[int] = Query(None, ge=0, description="Minimum days overdue"),
    tenant_status: TenantStatusFilter = Query(TenantStatusFilter.ALL),
    as_of: Optional[date] = Query(None, description="Reference date (defaults to today)"),
    source: ReportDataSource = Depends(get_report_data_source),
):
    """Tenants with a positive balance at least ``days`` old, largest balance first."""
    service = RentReportsService(source)
    filters = OverdueRentFilters(
        property_id=property_id,
        days=service.settings.overdue_default_days if days is None else days,
        tenant_status=tenant_status,
    )
    return await service.overdue_rent(filters, as_of or date.today())


@router.get("/reports/lease-expiry", response_model=LeaseExpiryReport)
async def get_lease_expiry(
    property_id: Optional[str] = Query(None, description="Property code filter"),
    range_days: Optional[int] = Query(None, alias="range", ge=0, description="Look-ahead window in days"),
    unit_type: Optional[str] = Query(None, description="Unit type filter"),
    as_of: Optional[date] = Query(None, description="Reference date (defaults to today)"),
    source: ReportDataSource = Depends(get_report_data_source),
):
    """Inferred lease anniversaries falling inside the look-ahead window."""
    service = RentReportsService(source)
    filters = LeaseExpiryFilters(
        property_id=property_id,
        range_days=service.settings.lease_expiry_default_range_days if range_days is None else range_days,
        unit_type=unit_type,
    )
    return await service.lease_expiry(filters, as_of or date.today())


@router.get("/reports/rent-charges", response_model=RentChargeReport)
async def get_rent_charges(
    property_id: Optional[str] = Query(None, description="Property code filter"),
    effective_date: Optional[date] = Query(None, description="Pivot date for the next anniversary"),
    query: Optional[str] = Query(None, description="Tenant name or unit search"),
    as_of: Optional[date] = Query(None, description="Reference date (defaults to today)"),
    source: ReportDataSource = Depends(get_report_data_source),
):
    """Upcoming rent changes at each tenant's next lease anniversary."""
    filters = RentChargeFilters(property_id=property_id, effective_date=effective_date, query=query)
    service = RentReportsService(source)
    return await service.rent_charges(filters, as_of or date.today())
