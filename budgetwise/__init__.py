"""
BudgetWise - Core Package

Local-first personal finance tracking: a transaction ledger, category
budgets, user settings and derived analytics, all persisted through a
flat key-value store on the device.

DESIGN PRINCIPLES:
1. In-memory state is authoritative for the running session
2. Every mutation is persisted, but never blocks the caller
3. Expected conditions never raise (missing keys, unknown ids)
4. Every mutation is auditable
5. Storage backend is swappable
"""

__version__ = "1.0.0"
__author__ = "BudgetWise Team"
