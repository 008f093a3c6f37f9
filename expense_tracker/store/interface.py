"""
Abstract Store Interface

DESIGN DECISION: We define an abstract interface for store operations.
This allows us to:
1. Keep the query executor and flows decoupled from the indexing scheme
2. Swap the in-memory store for a persistent one later
3. Use a fake store in tests

The interface is intentionally small - just the operations a user can
trigger from the menu.
"""

from abc import ABC, abstractmethod
from uuid import UUID

from expense_tracker.models.expense import Expense
from expense_tracker.models.audit import AuditEvent


class ExpenseStoreInterface(ABC):
    """
    Abstract interface for expense storage and querying.

    Every query returns visible (non-deleted) expenses only.
    """

    @abstractmethod
    def add(self, amount: float, category: str, date: str) -> int:
        """
        Record a new expense.

        Args:
            amount: Non-negative amount
            category: Category label
            date: YYYY-MM-DD

        Returns:
            The positional index assigned to the expense
        """
        pass

    @abstractmethod
    def list_all(self) -> list[Expense]:
        """
        List visible expenses in insertion order.
        """
        pass

    @abstractmethod
    def list_by_category(self, category: str) -> list[Expense]:
        """
        List visible expenses for one category (exact match).

        Returns an empty list for a category never seen.
        """
        pass

    @abstractmethod
    def category_totals(self) -> dict[str, float]:
        """
        Get the running total per category.

        Categories have no defined order.
        """
        pass

    @abstractmethod
    def list_by_date(self, date: str) -> list[Expense]:
        """
        List visible expenses recorded on one date.

        Must not change the order in which expenses are stored.
        """
        pass

    @abstractmethod
    def delete(self, index: int) -> bool:
        """
        Lazily delete an expense.

        Args:
            index: Positional index returned by add()

        Returns:
            True if this call deleted the expense,
            False if it was already deleted

        Raises:
            IndexOutOfRangeError: If no expense was ever added at index
        """
        pass

    @abstractmethod
    def top_n(self, n: int) -> list[Expense]:
        """
        Get up to n visible expenses with the largest amounts.

        Returns:
            Expenses in descending amount order
        """
        pass


class AuditStorageInterface(ABC):
    """
    Abstract interface for audit log storage.

    Audit logs are append-only - we never delete or modify them.
    """

    @abstractmethod
    def append_event(self, event: AuditEvent) -> bool:
        """
        Append an audit event to the log.

        Returns:
            True if logged successfully
        """
        pass

    @abstractmethod
    def get_events_by_correlation_id(
        self,
        correlation_id: UUID,
    ) -> list[AuditEvent]:
        """
        Get all events for a correlation ID, in chronological order.
        """
        pass

    @abstractmethod
    def get_events_by_entity(
        self,
        entity_type: str,
        entity_id: str,
    ) -> list[AuditEvent]:
        """
        Get all events for a specific entity, in chronological order.
        """
        pass

    @abstractmethod
    def get_recent_events(
        self,
        limit: int = 100,
    ) -> list[AuditEvent]:
        """
        Get the most recent audit events (newest first).
        """
        pass


class StoreError(Exception):
    """Base exception for store operations."""
    pass


class IndexOutOfRangeError(StoreError):
    """No expense was ever added at the given index."""

    def __init__(self, index: int, size: int):
        self.index = index
        self.size = size
        super().__init__(
            f"Invalid index {index}: expected 0 <= index < {size}"
        )
