"""
PropLedger - Report Data Sources

Boundary to the collaborator data the engine reads. Every fetch returns
plain JSON-shaped dicts so the engine never depends on storage types.
"""

from abc import ABC, abstractmethod
from typing import Any, Callable, Dict, List

from sqlalchemy import select
from sqlalchemy.ext.asyncio import AsyncSession, async_sessionmaker

from propledger.models import (
    BankPayment,
    JournalEntryLine,
    ManualPayment,
    Property,
    Tenant,
    TenantCharge,
    TenantDeposit,
    Unit,
)

Record = Dict[str, Any]


class ReportDataSource(ABC):
    """Read-only snapshot provider for the reporting engine."""
    
    @abstractmethod
    async def list_tenants(self) -> List[Record]:
        ...
    
    @abstractmethod
    async def list_bank_payments(self) -> List[Record]:
        ...
    
    @abstractmethod
    async def list_manual_payments(self) -> List[Record]:
        ...
    
    @abstractmethod
    async def list_units(self) -> List[Record]:
        ...
    
    @abstractmethod
    async def list_deposits(self) -> List[Record]:
        ...
    
    @abstractmethod
    async def list_tenant_charges(self) -> List[Record]:
        ...
    
    @abstractmethod
    async def list_journal_lines(self) -> List[Record]:
        ...
    
    @abstractmethod
    async def list_properties(self) -> List[Record]:
        ...


# ===========================================
# ROW CONVERTERS
# ===========================================

def _tenant_to_dict(tenant: Tenant) -> Record:
    return {
        "id": tenant.id,
        "name": tenant.name,
        "property_id": tenant.property_id,
        "building": tenant.building,
        "unit": tenant.unit,
        "reference": tenant.reference,
        "monthly_rent": tenant.monthly_rent,
        "due_day": tenant.due_day,
        "email": tenant.email,
        "phone": tenant.phone,
    }


def _bank_payment_to_dict(payment: BankPayment) -> Record:
    return {
        "tenant_id": payment.tenant_id,
        "property_id": payment.property_id,
        "date": payment.payment_date,
        "amount": payment.amount,
        "description": payment.description,
        "type": payment.type,
    }


def _manual_payment_to_dict(payment: ManualPayment) -> Record:
    return {
        "tenant_id": payment.tenant_id,
        "date": payment.payment_date,
        "amount": payment.amount,
        "description": payment.description,
    }


def _unit_to_dict(unit: Unit) -> Record:
    return {
        "unit": unit.unit,
        "property_id": unit.property_id,
        "floor": unit.floor,
        "unit_type": unit.unit_type,
        "beds": unit.beds,
        "rent": unit.rent,
        "status": unit.status,
    }


def _deposit_to_dict(deposit: TenantDeposit) -> Record:
    return {
        "tenant_id": deposit.tenant_id,
        "deposit_charged": deposit.deposit_charged,
        "deposit_received": deposit.deposit_received,
        "deposit_released": deposit.deposit_released,
        "deposit_notes": deposit.deposit_notes,
    }


def _charge_to_dict(charge: TenantCharge) -> Record:
    return {
        "tenant_id": charge.tenant_id,
        "date": charge.charge_date,
        "amount": charge.amount,
        "description": charge.description,
        "category": charge.category,
    }


def _journal_line_to_dict(line: JournalEntryLine) -> Record:
    return {
        "entry_id": line.entry_id,
        "property_id": line.property_id,
        "date": line.entry_date,
        "account_id": line.account_id,
        "description": line.description,
        "debit": line.debit,
        "credit": line.credit,
    }


def _property_to_dict(prop: Property) -> Record:
    return {"property_id": prop.property_id, "name": prop.name}


# ===========================================
# SQL SOURCE
# ===========================================

class SQLReportDataSource(ReportDataSource):
    """
    Data source over the SQLAlchemy tables.
    
    Each fetch opens its own session so the loader can run them
    concurrently.
    """
    
    def __init__(self, session_factory: async_sessionmaker[AsyncSession]):
        self.session_factory = session_factory
    
    async def _fetch(self, query, convert: Callable[[Any], Record]) -> List[Record]:
        async with self.session_factory() as session:
            result = await session.execute(query)
            return [convert(row) for row in result.scalars().all()]
    
    async def list_tenants(self) -> List[Record]:
        return await self._fetch(select(Tenant).order_by(Tenant.id), _tenant_to_dict)
    
    async def list_bank_payments(self) -> List[Record]:
        return await self._fetch(
            select(BankPayment).order_by(BankPayment.payment_date), _bank_payment_to_dict
        )
    
    async def list_manual_payments(self) -> List[Record]:
        return await self._fetch(
            select(ManualPayment).order_by(ManualPayment.payment_date), _manual_payment_to_dict
        )
    
    async def list_units(self) -> List[Record]:
        return await self._fetch(select(Unit).order_by(Unit.property_id, Unit.unit), _unit_to_dict)
    
    async def list_deposits(self) -> List[Record]:
        return await self._fetch(select(TenantDeposit), _deposit_to_dict)
    
    async def list_tenant_charges(self) -> List[Record]:
        return await self._fetch(
            select(TenantCharge).order_by(TenantCharge.charge_date), _charge_to_dict
        )
    
    async def list_journal_lines(self) -> List[Record]:
        return await self._fetch(
            select(JournalEntryLine).order_by(JournalEntryLine.entry_date, JournalEntryLine.entry_id),
            _journal_line_to_dict,
        )
    
    async def list_properties(self) -> List[Record]:
        return await self._fetch(select(Property).order_by(Property.property_id), _property_to_dict)
