"""
PropLedger - Test Configuration

Pytest fixtures and configuration.

The sample portfolio (property T1, reference date 2024-06-30):
- Tenant 1 (Alice, unit 101): 1000/month due on the 5th, paid every month
  on the 6th since July 2023; June was a manual receipt.
- Tenant 2.0 (Bob, unit 102): 900/month due on the 1st, single 600 bank
  payment on 2024-06-11 (the inferred move-in).
- Tenant 3 (Carol, unit 103): 1200/month due on the 1st, one manual
  payment on 2024-01-15 and nothing since.
- Unit 104 has no tenant.
"""

from datetime import date
from decimal import Decimal
from typing import Any, AsyncGenerator, Dict, Iterable, List, Optional

import pytest
import pytest_asyncio
from httpx import AsyncClient, ASGITransport

from propledger.dependencies import get_report_data_source
from propledger.services.data_sources import ReportDataSource
from propledger.services.payment_normalizer import (
    build_charge_index,
    build_deposit_index,
    build_payment_index,
    normalize_payments,
)
from propledger.services.report_loader import ReportingContext, _parse_tenant
from propledger.schemas.rent_reports import PropertyInfo, UnitRecord
from propledger.utils.dates import add_months
from main import app


REFERENCE_DATE = date(2024, 6, 30)


class InMemoryDataSource(ReportDataSource):
    """ReportDataSource over plain lists; names in ``failing`` raise on fetch."""
    
    def __init__(
        self,
        tenants: Optional[List[Dict[str, Any]]] = None,
        bank_payments: Optional[List[Dict[str, Any]]] = None,
        manual_payments: Optional[List[Dict[str, Any]]] = None,
        units: Optional[List[Dict[str, Any]]] = None,
        deposits: Optional[List[Dict[str, Any]]] = None,
        tenant_charges: Optional[List[Dict[str, Any]]] = None,
        journal_lines: Optional[List[Dict[str, Any]]] = None,
        properties: Optional[List[Dict[str, Any]]] = None,
        failing: Iterable[str] = (),
    ):
        self.data = {
            "tenants": tenants or [],
            "bank_payments": bank_payments or [],
            "manual_payments": manual_payments or [],
            "units": units or [],
            "deposits": deposits or [],
            "tenant_charges": tenant_charges or [],
            "journal_lines": journal_lines or [],
            "properties": properties or [],
        }
        self.failing = set(failing)
    
    async def _get(self, name: str) -> List[Dict[str, Any]]:
        if name in self.failing:
            raise ConnectionError(f"{name} endpoint unavailable")
        return [dict(record) for record in self.data[name]]
    
    async def list_tenants(self):
        return await self._get("tenants")
    
    async def list_bank_payments(self):
        return await self._get("bank_payments")
    
    async def list_manual_payments(self):
        return await self._get("manual_payments")
    
    async def list_units(self):
        return await self._get("units")
    
    async def list_deposits(self):
        return await self._get("deposits")
    
    async def list_tenant_charges(self):
        return await self._get("tenant_charges")
    
    async def list_journal_lines(self):
        return await self._get("journal_lines")
    
    async def list_properties(self):
        return await self._get("properties")


def build_context(
    tenants: Iterable[Dict[str, Any]] = (),
    bank_payments: Iterable[Dict[str, Any]] = (),
    manual_payments: Iterable[Dict[str, Any]] = (),
    units: Iterable[Dict[str, Any]] = (),
    deposits: Iterable[Dict[str, Any]] = (),
    tenant_charges: Iterable[Dict[str, Any]] = (),
    properties: Iterable[Dict[str, Any]] = (),
) -> ReportingContext:
    """Synchronous ReportingContext for the pure report builders."""
    payments = normalize_payments(bank_payments, manual_payments)
    return ReportingContext(
        tenants=[_parse_tenant(t) for t in tenants],
        payments=payments,
        units=[UnitRecord.model_validate(u) for u in units],
        payment_index=build_payment_index(payments),
        deposits=build_deposit_index(deposits),
        charges=build_charge_index(tenant_charges),
        properties=[PropertyInfo(**p) for p in properties],
    )


# ===========================================
# SAMPLE PORTFOLIO
# ===========================================

def _alice_payments() -> List[Dict[str, Any]]:
    first = date(2023, 7, 6)
    return [
        {
            "tenant_id": "1",
            "date": add_months(first, i).isoformat(),
            "amount": "1000.00",
            "description": "Rent - Alice",
            "property_id": "T1",
        }
        for i in range(11)
    ]


def sample_records() -> Dict[str, List[Dict[str, Any]]]:
    return {
        "tenants": [
            {"id": "1", "name": "Alice Jama", "property_id": "T1", "unit": "101",
             "monthly_rent": 1000, "due_day": 5, "email": "alice@tower.test", "phone": "+252 61 100 100"},
            {"id": "2.0", "name": "Bob Warsame", "property_id": "T1", "unit": "102",
             "monthly_rent": "900", "due_day": "1"},
            {"id": 3, "name": "Carol Farah", "property_id": "T1", "unit": "103",
             "monthly_rent": 1200, "due_day": 1, "phone": "+252 61 300 300"},
        ],
        "bank_payments": _alice_payments() + [
            {"tenant_id": 2, "date": "2024-06-11", "amount": 600, "description": "Bob first payment"},
            {"tenant_id": None, "date": "2024-06-12", "amount": 450, "description": "Unmatched transfer"},
            {"tenant_id": "", "date": "2024-06-13", "amount": 75, "description": "Bank fee refund"},
        ],
        "manual_payments": [
            {"tenant_id": "1", "date": "2024-06-06", "amount": "1000", "description": "Cash - Alice"},
            {"tenant_id": "3.0", "date": "2024-01-15", "amount": 1200},
        ],
        "units": [
            {"unit": "101", "property_id": "T1", "unit_type": "1BR", "rent": 1000},
            {"unit": "102", "property_id": "T1", "unit_type": "Studio", "rent": 900},
            {"unit": "103", "property_id": "T1", "unit_type": "2BR", "rent": 1200},
            {"unit": "104", "property_id": "T1", "type": "2BR", "rent": "1,300.00"},
        ],
        "deposits": [
            {"tenant_id": "1", "deposit_charged": "1000", "deposit_received": "1000",
             "deposit_released": "0", "deposit_notes": "Held in trust"},
        ],
        "tenant_charges": [],
        "properties": [{"property_id": "T1", "name": "Tower One"}],
        "journal_lines": sample_journal_lines(),
    }


def sample_journal_lines() -> List[Dict[str, Any]]:
    def line(entry_id, day, account_id, debit="0", credit="0", property_id="T1", description=None):
        return {
            "entry_id": entry_id,
            "property_id": property_id,
            "date": day,
            "account_id": account_id,
            "description": description,
            "debit": debit,
            "credit": credit,
        }
    
    return [
        line("E1", "2024-01-01", "1010", debit="10000", description="Owner capital"),
        line("E1", "2024-01-01", "3100", credit="10000", description="Owner capital"),
        line("E2", "2024-02-01", "1010", debit="1000", description="February rent"),
        line("E2", "2024-02-01", "4000", credit="1000", description="February rent"),
        line("E3", "2024-02-15", "5000", debit="200", description="Plumbing repair"),
        line("E3", "2024-02-15", "1010", credit="200", description="Plumbing repair"),
        line("E4", "2024-03-01", "1500", debit="3000", description="Lobby furniture"),
        line("E4", "2024-03-01", "1010", credit="3000", description="Lobby furniture"),
        line("E5", "2024-03-05", "1015", debit="1000", description="Deposit received"),
        line("E5", "2024-03-05", "2100", credit="1000", description="Deposit received"),
        line("E6", "2024-03-10", "1010", debit="500", property_id="T2", description="Parking rent"),
        line("E6", "2024-03-10", "4000", credit="500", property_id="T2", description="Parking rent"),
        line("E7", "2024-03-12", "6000", debit="100", property_id="all", description="Shared utilities"),
        line("E7", "2024-03-12", "1010", credit="100", property_id="all", description="Shared utilities"),
        line("E8", "2024-03-15", "9999", debit="50", description="Unmapped suspense"),
        line("E9", "not-a-date", "1010", debit="75", description="Bad import row"),
    ]


@pytest.fixture
def portfolio() -> Dict[str, List[Dict[str, Any]]]:
    return sample_records()


@pytest.fixture
def portfolio_context(portfolio) -> ReportingContext:
    return build_context(
        tenants=portfolio["tenants"],
        bank_payments=portfolio["bank_payments"],
        manual_payments=portfolio["manual_payments"],
        units=portfolio["units"],
        deposits=portfolio["deposits"],
        tenant_charges=portfolio["tenant_charges"],
        properties=portfolio["properties"],
    )


@pytest.fixture
def data_source(portfolio) -> InMemoryDataSource:
    return InMemoryDataSource(**portfolio)


@pytest_asyncio.fixture(scope="function")
async def client(data_source) -> AsyncGenerator[AsyncClient, None]:
    """Test client with the report data source overridden."""
    app.dependency_overrides[get_report_data_source] = lambda: data_source
    
    transport = ASGITransport(app=app)
    async with AsyncClient(transport=transport, base_url="http://test") as ac:
        yield ac
    
    app.dependency_overrides.clear()


@pytest.fixture
def money():
    """Parse a JSON money string."""
    return lambda value: Decimal(str(value))
