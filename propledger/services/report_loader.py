"""
PropLedger - Report Data Loader

Fetches every collaborator snapshot concurrently and builds the lookup
indices shared by the rent reports.

Tenants and both payment feeds are required: without them no report is
meaningful, so a failure aborts the report. Units, deposits, ad-hoc
charges and the property lookup are enrichments and degrade to empty.
"""

import asyncio
import logging
from dataclasses import dataclass, field
from typing import Any, Awaitable, Callable, Dict, List, Optional

from propledger.schemas.ledger import ChargeEntry, DepositInfo, TenantRecord
from propledger.schemas.rent_reports import PropertyInfo, UnitRecord
from propledger.services.data_sources import Record, ReportDataSource
from propledger.services.payment_normalizer import (
    NormalizedPayment,
    build_charge_index,
    build_deposit_index,
    build_payment_index,
    normalize_id,
    normalize_payments,
)
from propledger.utils.error_handling import DataSourceUnavailableException

logger = logging.getLogger(__name__)


@dataclass
class ReportingContext:
    """Snapshot of collaborator data plus per-tenant indices."""
    tenants: List[TenantRecord]
    payments: List[NormalizedPayment]
    units: List[UnitRecord] = field(default_factory=list)
    payment_index: Dict[str, List[NormalizedPayment]] = field(default_factory=dict)
    deposits: Dict[str, DepositInfo] = field(default_factory=dict)
    charges: Dict[str, List[ChargeEntry]] = field(default_factory=dict)
    properties: List[PropertyInfo] = field(default_factory=list)
    
    def find_tenant(self, tenant_id: str) -> Optional[TenantRecord]:
        for tenant in self.tenants:
            if normalize_id(tenant.id) == tenant_id:
                return tenant
        return None
    
    def payments_for(self, tenant_id: str) -> List[NormalizedPayment]:
        return self.payment_index.get(tenant_id, [])
    
    def charges_for(self, tenant_id: str) -> List[ChargeEntry]:
        return self.charges.get(tenant_id, [])
    
    def property_name(self, property_id: Optional[str]) -> str:
        key = (property_id or "").lower()
        for prop in self.properties:
            if prop.property_id.lower() == key:
                return prop.name or prop.property_id
        return property_id or "—"
    
    def find_unit(self, tenant: TenantRecord) -> Optional[UnitRecord]:
        """Unit record by label, preferring one in the tenant's own property."""
        label = (tenant.unit or "").strip()
        if not label:
            return None
        candidates = [unit for unit in self.units if unit.unit.strip() == label]
        prop = (tenant.property_id or "").lower()
        for unit in candidates:
            if (unit.property_id or "").lower() == prop:
                return unit
        return candidates[0] if candidates else None


class ReportDataLoader:
    """Loads a ReportingContext from a ReportDataSource."""
    
    def __init__(self, source: ReportDataSource):
        self.source = source
    
    async def _fetch_required(self, name: str, fetch: Callable[[], Awaitable[List[Record]]]) -> List[Record]:
        try:
            return await fetch()
        except Exception as exc:
            logger.error(f"Required data source '{name}' failed: {exc}")
            raise DataSourceUnavailableException(name, original_error=exc) from exc
    
    async def _fetch_optional(self, name: str, fetch: Callable[[], Awaitable[List[Record]]]) -> List[Record]:
        try:
            return await fetch()
        except Exception as exc:
            logger.warning(f"Optional data source '{name}' unavailable, using empty list: {exc}")
            return []
    
    async def load_context(self) -> ReportingContext:
        source = self.source
        (
            tenant_records,
            bank_records,
            manual_records,
            unit_records,
            deposit_records,
            charge_records,
            property_records,
        ) = await asyncio.gather(
            self._fetch_required("tenants", source.list_tenants),
            self._fetch_required("bank_payments", source.list_bank_payments),
            self._fetch_required("manual_payments", source.list_manual_payments),
            self._fetch_optional("units", source.list_units),
            self._fetch_optional("deposits", source.list_deposits),
            self._fetch_optional("tenant_charges", source.list_tenant_charges),
            self._fetch_optional("properties", source.list_properties),
        )
        
        payments = normalize_payments(bank_records, manual_records)
        
        ctx = ReportingContext(
            tenants=[_parse_tenant(r) for r in tenant_records if normalize_id(r.get("id"))],
            payments=payments,
            units=[UnitRecord.model_validate(r) for r in unit_records if r.get("unit") not in (None, "")],
            payment_index=build_payment_index(payments),
            deposits=build_deposit_index(deposit_records),
            charges=build_charge_index(charge_records),
            properties=[
                PropertyInfo(property_id=str(r["property_id"]), name=r.get("name"))
                for r in property_records
                if r.get("property_id")
            ],
        )
        logger.debug(
            f"Loaded reporting context: {len(ctx.tenants)} tenants, "
            f"{len(ctx.payments)} payments, {len(ctx.units)} units"
        )
        return ctx
    
    async def load_journal_lines(self) -> List[Record]:
        return await self._fetch_required("journal_lines", self.source.list_journal_lines)


def _parse_tenant(record: Record) -> TenantRecord:
    data: Dict[str, Any] = dict(record)
    data["id"] = normalize_id(record.get("id"))
    return TenantRecord.model_validate(data)
