"""
PropLedger - Property & Unit Models

Portfolio inventory: properties (name lookup) and their lettable units.
"""

from decimal import Decimal
from typing import Optional

from sqlalchemy import Integer, Numeric, String
from sqlalchemy.orm import Mapped, mapped_column

from propledger.database import Base
from propledger.models.base import BaseModel, TimestampMixin


class Property(Base, TimestampMixin):
    """A managed building. ``property_id`` is the short code used across feeds (e.g. "T1")."""
    
    __tablename__ = "properties"
    
    property_id: Mapped[str] = mapped_column(String(50), primary_key=True)
    name: Mapped[Optional[str]] = mapped_column(String(255), nullable=True)


class Unit(BaseModel):
    """A lettable unit with its advertised rent."""
    
    __tablename__ = "units"
    
    property_id: Mapped[Optional[str]] = mapped_column(String(50), nullable=True, index=True)
    unit: Mapped[str] = mapped_column(String(50), nullable=False)
    floor: Mapped[Optional[str]] = mapped_column(String(20), nullable=True)
    unit_type: Mapped[Optional[str]] = mapped_column(String(50), nullable=True)
    beds: Mapped[Optional[int]] = mapped_column(Integer, nullable=True)
    rent: Mapped[Optional[Decimal]] = mapped_column(Numeric(precision=12, scale=2), nullable=True)
    status: Mapped[Optional[str]] = mapped_column(String(30), nullable=True)
