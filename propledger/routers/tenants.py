"""
PropLedger - Tenants Router

Per-tenant statement endpoint.
"""

from datetime import date
from decimal import Decimal

from fastapi import APIRouter, Depends, HTTPException, Query, status

from propledger.dependencies import get_report_data_source
from propledger.schemas.ledger import Statement
from propledger.services.data_sources import ReportDataSource
from propledger.services.statement_service import TenantStatementService

router = APIRouter()


@router.get("/tenants/{tenant_id}/statement", response_model=Statement)
async def get_tenant_statement(
    tenant_id: str,
    start: date = Query(..., description="Statement period start date"),
    end: date = Query(..., description="Statement period end date"),
    prior_balance: Decimal = Query(Decimal("0.00"), description="Balance carried into the period"),
    source: ReportDataSource = Depends(get_report_data_source),
):
    """
    Running-balance statement for one tenant.
    
    Charges post before payments dated the same day.
    """
    if start > end:
        raise HTTPException(
            status_code=status.HTTP_400_BAD_REQUEST,
            detail="Start date must be before end date",
        )
    
    service = TenantStatementService(source)
    return await service.get_tenant_statement(tenant_id, start, end, prior_balance=prior_balance)
