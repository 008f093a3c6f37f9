"""
Expense Tracker - Source Package

A personal expense-tracking utility. Expenses are recorded once and
queried through several in-memory views kept consistent with each other.

DESIGN PRINCIPLES:
1. One authoritative record log, every other view points into it
2. Deletions are lazy (tombstones), never physical
3. Queries never mutate stored order
4. Every mutation is auditable
"""

__version__ = "1.0.0"
__author__ = "Expense Tracker Team"
