"""
PropLedger - Pydantic Schemas Package
"""
