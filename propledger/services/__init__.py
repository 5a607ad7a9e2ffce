"""
PropLedger - Services Package

The tenant ledger and rent-roll computation engine.
"""
