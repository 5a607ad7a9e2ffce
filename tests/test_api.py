"""
PropLedger - API Tests

Endpoint tests over the in-memory report data source.
"""

import pytest

from main import app
from propledger.dependencies import get_report_data_source

from conftest import InMemoryDataSource


AS_OF = "2024-06-30"


class TestHealth:
    """Tests for service endpoints."""
    
    @pytest.mark.asyncio
    async def test_health(self, client):
        response = await client.get("/health")
        
        assert response.status_code == 200
        assert response.json()["status"] == "healthy"
    
    @pytest.mark.asyncio
    async def test_api_root_lists_endpoints(self, client):
        response = await client.get("/api/v1")
        
        assert response.status_code == 200
        assert response.json()["endpoints"]["accounting"] == "/api/v1/accounting"


class TestTenantStatementEndpoint:
    """Tests for GET /api/v1/tenants/{tenant_id}/statement."""
    
    @pytest.mark.asyncio
    async def test_statement(self, client, money):
        response = await client.get(
            "/api/v1/tenants/2.0/statement",
            params={"start": "2024-06-01", "end": "2024-06-30"},
        )
        
        assert response.status_code == 200
        data = response.json()
        assert data["tenant"]["name"] == "Bob Warsame"
        assert [row["entry_type"] for row in data["rows"]] == ["charge", "payment"]
        assert data["rows"][1]["source"] == "bank"
        assert money(data["totals"]["charges"]) == money("900")
        assert money(data["totals"]["payments"]) == money("600")
        assert money(data["totals"]["balance"]) == money("300")
        assert isinstance(data["totals"]["balance"], str)
    
    @pytest.mark.asyncio
    async def test_prior_balance_carried(self, client, money):
        response = await client.get(
            "/api/v1/tenants/2/statement",
            params={"start": "2024-06-01", "end": "2024-06-30", "prior_balance": "150.50"},
        )
        
        data = response.json()
        assert money(data["opening_balance"]) == money("150.50")
        assert money(data["totals"]["balance"]) == money("450.50")
    
    @pytest.mark.asyncio
    async def test_start_after_end(self, client):
        response = await client.get(
            "/api/v1/tenants/1/statement",
            params={"start": "2024-07-01", "end": "2024-06-01"},
        )
        
        assert response.status_code == 400
        assert response.json()["detail"]["code"] == "INVALID_INPUT"
    
    @pytest.mark.asyncio
    async def test_unknown_tenant(self, client):
        response = await client.get(
            "/api/v1/tenants/404/statement",
            params={"start": "2024-06-01", "end": "2024-06-30"},
        )
        
        assert response.status_code == 404
        assert response.json()["detail"]["code"] == "TENANT_NOT_FOUND"
    
    @pytest.mark.asyncio
    async def test_missing_dates(self, client):
        response = await client.get("/api/v1/tenants/1/statement")
        assert response.status_code == 422


class TestRentReportEndpoints:
    """Tests for the /api/v1/reports endpoints."""
    
    @pytest.mark.asyncio
    async def test_rent_roll(self, client, money):
        response = await client.get("/api/v1/reports/rent-roll", params={"as_of": AS_OF})
        
        assert response.status_code == 200
        data = response.json()
        assert data["period_start"] == "2024-06-01"
        assert data["totals"]["total_units"] == 4
        assert data["totals"]["vacant_units"] == 1
        assert money(data["totals"]["expected_rent"]) == money("4100")
        assert {row["report"] for row in data["rows"]} == {"rent_roll"}
    
    @pytest.mark.asyncio
    async def test_rent_roll_vacant_only(self, client):
        response = await client.get(
            "/api/v1/reports/rent-roll",
            params={"as_of": AS_OF, "occupancy": "vacant"},
        )
        
        rows = response.json()["rows"]
        assert [row["unit"] for row in rows] == ["104"]
        assert rows[0]["status"] == "Vacant"
    
    @pytest.mark.asyncio
    async def test_rent_roll_rejects_bad_month(self, client):
        response = await client.get("/api/v1/reports/rent-roll", params={"month": "June"})
        
        assert response.status_code == 422
        assert response.json()["detail"]["code"] == "VALIDATION_ERROR"
    
    @pytest.mark.asyncio
    async def test_rent_roll_month_before_calendar_start(self, client):
        response = await client.get("/api/v1/reports/rent-roll", params={"month": "0001-01", "as_of": AS_OF})
        
        assert response.status_code == 422
        assert response.json()["detail"]["code"] == "INVALID_DATE_RANGE"
    
    @pytest.mark.asyncio
    async def test_rent_charges_past_calendar_end(self, client):
        response = await client.get("/api/v1/reports/rent-charges", params={"as_of": "9999-12-15"})
        
        assert response.status_code == 422
        assert response.json()["detail"]["details"]["months"] == 1
    
    @pytest.mark.asyncio
    async def test_overdue_rent_defaults(self, client, money):
        response = await client.get("/api/v1/reports/overdue-rent", params={"as_of": AS_OF})
        
        data = response.json()
        assert [row["tenant"] for row in data["rows"]] == ["Carol Farah", "Bob Warsame"]
        assert money(data["totals"]["total_balance"]) == money("12900")
        assert len(data["worst_ten"]) == 2
    
    @pytest.mark.asyncio
    async def test_overdue_rent_status_filter(self, client):
        response = await client.get(
            "/api/v1/reports/overdue-rent",
            params={"as_of": AS_OF, "tenant_status": "active"},
        )
        
        assert [row["tenant"] for row in response.json()["rows"]] == ["Bob Warsame"]
    
    @pytest.mark.asyncio
    async def test_lease_expiry_range_alias(self, client):
        default = await client.get("/api/v1/reports/lease-expiry", params={"as_of": AS_OF})
        wide = await client.get("/api/v1/reports/lease-expiry", params={"as_of": AS_OF, "range": 250})
        
        assert [row["tenant"] for row in default.json()["rows"]] == ["Alice Jama"]
        assert default.json()["rows"][0]["renewal_status"] == "Pending"
        assert wide.json()["totals"]["expiring"] == 2
    
    @pytest.mark.asyncio
    async def test_rent_charges(self, client, money):
        response = await client.get("/api/v1/reports/rent-charges", params={"as_of": AS_OF})
        
        data = response.json()
        assert data["pivot_date"] == "2024-07-01"
        assert data["summary"]["upcoming_changes"] == 3
        assert money(data["summary"]["average_change"]) == money("31.00")
        assert data["rows"][0]["change_type"] == "Increase"


class TestAccountingEndpoints:
    """Tests for the /api/v1/accounting endpoints."""
    
    @pytest.mark.asyncio
    async def test_trial_balance(self, client, money):
        response = await client.get("/api/v1/accounting/trial-balance")
        
        data = response.json()
        assert data["is_balanced"] is True
        assert money(data["total_debits"]) == money("15800")
    
    @pytest.mark.asyncio
    async def test_balance_sheet_for_property(self, client, money):
        response = await client.get("/api/v1/accounting/balance-sheet", params={"property_id": "T1"})
        
        assert money(response.json()["assets"]["total"]) == money("11700")
    
    @pytest.mark.asyncio
    async def test_income_statement_for_period(self, client, money):
        response = await client.get(
            "/api/v1/accounting/income-statement",
            params={"start": "2024-03-01", "end": "2024-03-31"},
        )
        
        assert money(response.json()["net_income"]) == money("400")
    
    @pytest.mark.asyncio
    async def test_cashflow(self, client, money):
        response = await client.get("/api/v1/accounting/cashflow")
        
        data = response.json()
        assert money(data["net_change"]) == money("25000")
        assert money(data["ending_cash"]) == money("9200")
    
    @pytest.mark.asyncio
    async def test_general_ledger_for_account(self, client):
        response = await client.get("/api/v1/accounting/general-ledger", params={"account_id": "4000"})
        
        assert [row["entry_id"] for row in response.json()] == ["E2", "E6"]
    
    @pytest.mark.asyncio
    async def test_journal_entries(self, client):
        response = await client.get("/api/v1/accounting/journal-entries")
        
        assert response.json()[0]["entry_id"] == "E7"
    
    @pytest.mark.asyncio
    async def test_chart_of_accounts(self, client):
        response = await client.get("/api/v1/accounting/chart-of-accounts")
        
        assert response.status_code == 200
        assert response.json()[0]["id"] == "1010"
    
    @pytest.mark.asyncio
    async def test_start_after_end(self, client):
        response = await client.get(
            "/api/v1/accounting/trial-balance",
            params={"start": "2024-04-01", "end": "2024-03-01"},
        )
        
        assert response.status_code == 400


class TestCollaboratorFailures:
    """Required inputs fail with 503; optional ones degrade."""
    
    @pytest.mark.asyncio
    async def test_required_source_unavailable(self, client, portfolio):
        failing = InMemoryDataSource(**portfolio, failing=["bank_payments"])
        app.dependency_overrides[get_report_data_source] = lambda: failing
        
        response = await client.get("/api/v1/reports/rent-roll", params={"as_of": AS_OF})
        
        assert response.status_code == 503
        detail = response.json()["detail"]
        assert detail["code"] == "DATA_SOURCE_UNAVAILABLE"
        assert detail["details"]["service"] == "bank_payments"
    
    @pytest.mark.asyncio
    async def test_journal_lines_unavailable(self, client, portfolio):
        failing = InMemoryDataSource(**portfolio, failing=["journal_lines"])
        app.dependency_overrides[get_report_data_source] = lambda: failing
        
        response = await client.get("/api/v1/accounting/trial-balance")
        
        assert response.status_code == 503
    
    @pytest.mark.asyncio
    async def test_optional_source_degrades(self, client, portfolio, money):
        degraded = InMemoryDataSource(**portfolio, failing=["deposits", "properties"])
        app.dependency_overrides[get_report_data_source] = lambda: degraded
        
        response = await client.get("/api/v1/reports/rent-roll", params={"as_of": AS_OF})
        
        assert response.status_code == 200
        rows = response.json()["rows"]
        assert all(money(row["deposit_held"]) == 0 for row in rows)
        assert {row["property_name"] for row in rows} == {"T1"}
