"""
Main Orchestrator for Expense Tracker

This module ties together all the components and defines the flows for:
1. Recording expenses (validated input -> store -> audit)
2. Deleting expenses (index -> store -> audit)
3. Queries (structured query -> execute -> audit)

DESIGN DECISION: The store trusts its inputs. The orchestrator is the
boundary where input has already been validated (ExpenseInput) and
where store errors are turned into messages the UI can show.
"""

from typing import Optional
from uuid import UUID

from expense_tracker.audit import AuditLogger, create_correlation_id
from expense_tracker.config import Settings, get_settings
from expense_tracker.models.expense import (
    Expense,
    ExpenseInput,
    QueryResult,
    StructuredQuery,
)
from expense_tracker.queries import QueryExecutor
from expense_tracker.store import (
    ExpenseStore,
    ExpenseStoreInterface,
    InMemoryAuditStorage,
    IndexOutOfRangeError,
)


class ExpenseFlow:
    """
    Orchestrates mutations of the expense store.

    Every successful or rejected mutation produces an audit event.
    """

    def __init__(
        self,
        store: ExpenseStoreInterface,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._store = store
        self._audit_logger = audit_logger

    def add_expense(
        self,
        expense: ExpenseInput,
        correlation_id: Optional[UUID] = None,
    ) -> Expense:
        """
        Record a validated expense.

        Returns:
            The stored expense, with its assigned index
        """
        correlation_id = correlation_id or create_correlation_id()

        index = self._store.add(
            amount=expense.amount,
            category=expense.category,
            date=expense.date,
        )

        if self._audit_logger:
            self._audit_logger.log_expense_added(
                index=index,
                amount=expense.amount,
                category=expense.category,
                date=expense.date,
                correlation_id=correlation_id,
            )

        return Expense(
            index=index,
            amount=expense.amount,
            category=expense.category,
            date=expense.date,
        )

    def delete_expense(
        self,
        index: int,
        correlation_id: Optional[UUID] = None,
    ) -> tuple[bool, str]:
        """
        Lazily delete an expense.

        Returns:
            (success, message)

        Deleting an already deleted expense still succeeds.
        """
        correlation_id = correlation_id or create_correlation_id()

        try:
            deleted = self._store.delete(index)
        except IndexOutOfRangeError as e:
            if self._audit_logger:
                self._audit_logger.log_delete_rejected(
                    index=e.index,
                    size=e.size,
                    correlation_id=correlation_id,
                )
            return False, "Invalid index."

        if self._audit_logger:
            self._audit_logger.log_expense_deleted(
                index=index,
                already_deleted=not deleted,
                correlation_id=correlation_id,
            )

        if deleted:
            return True, "Expense deleted lazily."
        return True, "Expense was already deleted."


class QueryFlow:
    """
    Orchestrates queries.

    Flow:
    1. Caller builds a StructuredQuery
    2. Query -> Execute on the store (deterministic)
    3. Result is audited and returned for rendering
    """

    def __init__(
        self,
        store: ExpenseStoreInterface,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._query_executor = QueryExecutor(store)
        self._audit_logger = audit_logger

    def run(
        self,
        query: StructuredQuery,
        correlation_id: Optional[UUID] = None,
    ) -> QueryResult:
        """Execute a query and audit the outcome."""
        correlation_id = correlation_id or create_correlation_id()

        result = self._query_executor.execute(query)

        if self._audit_logger:
            if result.success:
                self._audit_logger.log_query_executed(
                    query_id=query.query_id,
                    query_type=query.query_type.value,
                    result_count=result.result_count,
                    correlation_id=correlation_id,
                )
            else:
                self._audit_logger.log_query_failed(
                    query_id=query.query_id,
                    query_type=query.query_type.value,
                    error_message=result.error_message or "",
                    correlation_id=correlation_id,
                )

        return result


def create_app_components(
    settings: Optional[Settings] = None,
) -> tuple[ExpenseFlow, QueryFlow, ExpenseStore]:
    """
    Factory function to create all application components.

    Args:
        settings: Settings to build from. Defaults to get_settings().

    Returns:
        (expense_flow, query_flow, store)
    """
    settings = settings or get_settings()

    store = ExpenseStore(totals_policy=settings.tracker.totals_policy)
    audit_logger = AuditLogger(InMemoryAuditStorage())

    expense_flow = ExpenseFlow(
        store=store,
        audit_logger=audit_logger,
    )

    query_flow = QueryFlow(
        store=store,
        audit_logger=audit_logger,
    )

    return expense_flow, query_flow, store
