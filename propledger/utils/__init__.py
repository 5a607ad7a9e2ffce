"""
PropLedger - Utilities Package
"""
