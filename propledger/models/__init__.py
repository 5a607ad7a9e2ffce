"""
PropLedger - SQLAlchemy Models Package

Read-side tables for the collaborator data the reporting engine consumes.
"""

from propledger.models.base import BaseModel, TimestampMixin
from propledger.models.property import Property, Unit
from propledger.models.tenant import Tenant, TenantDeposit, TenantCharge
from propledger.models.payment import BankPayment, ManualPayment
from propledger.models.accounting import JournalEntryLine

__all__ = [
    "BaseModel",
    "TimestampMixin",
    "Property",
    "Unit",
    "Tenant",
    "TenantDeposit",
    "TenantCharge",
    "BankPayment",
    "ManualPayment",
    "JournalEntryLine",
]
