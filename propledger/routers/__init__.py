"""
PropLedger - API Routers Package
"""
