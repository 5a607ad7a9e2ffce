"""
PropLedger - Tenant Ledger & Rent-Roll Engine

Property-management reporting back office.
"""

__version__ = "0.1.0"
