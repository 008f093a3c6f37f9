"""
Store Package

Provides the abstract store interfaces and the in-memory implementation
of the expense store and the audit log.
"""

from expense_tracker.store.interface import (
    AuditStorageInterface,
    ExpenseStoreInterface,
    IndexOutOfRangeError,
    StoreError,
)
from expense_tracker.store.memory import (
    ExpenseStore,
    InMemoryAuditStorage,
)

__all__ = [
    # Interfaces
    "AuditStorageInterface",
    "ExpenseStoreInterface",
    # Exceptions
    "IndexOutOfRangeError",
    "StoreError",
    # In-memory implementation
    "ExpenseStore",
    "InMemoryAuditStorage",
]
