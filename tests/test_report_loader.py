"""
PropLedger - Report Loader Tests

Collaborator fetches: required inputs fail the request, optional inputs
degrade to empty lists.
"""

import logging

import pytest

from propledger.services.report_loader import ReportDataLoader
from propledger.utils.error_handling import DataSourceUnavailableException

from conftest import InMemoryDataSource


class TestLoadContext:
    """Tests for ReportDataLoader.load_context."""
    
    @pytest.mark.asyncio
    async def test_loads_all_inputs(self, data_source):
        ctx = await ReportDataLoader(data_source).load_context()
        
        assert [t.id for t in ctx.tenants] == ["1", "2", "3"]
        assert len(ctx.units) == 4
        assert ctx.deposits["1"].held == 1000
        assert ctx.property_name("t1") == "Tower One"
        assert len(ctx.payments_for("2")) == 1
        assert len(ctx.payments_for("3")) == 1
    
    @pytest.mark.asyncio
    async def test_unattributed_bank_lines_dropped(self, data_source):
        ctx = await ReportDataLoader(data_source).load_context()
        
        assert len(ctx.payments) == 14
        assert "" not in ctx.payment_index
    
    @pytest.mark.asyncio
    async def test_skips_tenants_without_id(self):
        source = InMemoryDataSource(tenants=[{"id": "", "name": "Blank"}, {"id": 7, "name": "Kept"}])
        
        ctx = await ReportDataLoader(source).load_context()
        
        assert [t.name for t in ctx.tenants] == ["Kept"]
    
    @pytest.mark.asyncio
    @pytest.mark.parametrize("name", ["units", "deposits", "tenant_charges", "properties"])
    async def test_optional_source_degrades(self, portfolio, name, caplog):
        source = InMemoryDataSource(**portfolio, failing=[name])
        
        with caplog.at_level(logging.WARNING, logger="propledger.services.report_loader"):
            ctx = await ReportDataLoader(source).load_context()
        
        assert len(ctx.tenants) == 3
        assert f"Optional data source '{name}' unavailable" in caplog.text
    
    @pytest.mark.asyncio
    @pytest.mark.parametrize("name", ["tenants", "bank_payments", "manual_payments"])
    async def test_required_source_fails(self, portfolio, name):
        source = InMemoryDataSource(**portfolio, failing=[name])
        
        with pytest.raises(DataSourceUnavailableException) as exc_info:
            await ReportDataLoader(source).load_context()
        
        assert exc_info.value.source == name
        assert exc_info.value.status_code == 503
        assert isinstance(exc_info.value.original_error, ConnectionError)


class TestLoadJournalLines:
    """Tests for ReportDataLoader.load_journal_lines."""
    
    @pytest.mark.asyncio
    async def test_returns_raw_records(self, data_source):
        records = await ReportDataLoader(data_source).load_journal_lines()
        assert len(records) == 16
    
    @pytest.mark.asyncio
    async def test_journal_lines_are_required(self, portfolio):
        source = InMemoryDataSource(**portfolio, failing=["journal_lines"])
        
        with pytest.raises(DataSourceUnavailableException) as exc_info:
            await ReportDataLoader(source).load_journal_lines()
        
        assert exc_info.value.source == "journal_lines"
