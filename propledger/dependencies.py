"""
PropLedger - FastAPI Dependencies

Shared dependencies for the API routers.
"""

from propledger.database import async_session_factory
from propledger.services.data_sources import ReportDataSource, SQLReportDataSource


async def get_report_data_source() -> ReportDataSource:
    """
    Data source for report endpoints.
    
    Backed by the application's session factory; tests override this
    dependency with an in-memory source.
    """
    return SQLReportDataSource(async_session_factory)
