"""
Query Execution Engine

DESIGN DECISION: Query execution is DETERMINISTIC.
The UI builds a StructuredQuery; this engine maps it onto exactly one
store operation and packages what the store returned. It never
computes anything the store did not return.
"""

from expense_tracker.models.expense import (
    Expense,
    QueryResult,
    QueryType,
    StructuredQuery,
)
from expense_tracker.store import ExpenseStoreInterface, StoreError


class QueryExecutionError(Exception):
    """Error during query execution."""
    pass


class QueryExecutor:
    """
    Executes structured queries against the expense store.

    GUARANTEES:
    - Only returns real data from the store
    - Deleted expenses never appear in results
    - Clear "no data found" if nothing matches
    """

    def __init__(self, store: ExpenseStoreInterface):
        self._store = store

    def execute(self, query: StructuredQuery) -> QueryResult:
        """
        Execute a structured query and return results.

        Malformed queries and store errors produce a failed QueryResult
        rather than an exception.
        """
        try:
            if query.query_type == QueryType.LIST:
                return self._execute_list(query)
            elif query.query_type == QueryType.CATEGORY:
                return self._execute_category(query)
            elif query.query_type == QueryType.TOTALS:
                return self._execute_totals(query)
            elif query.query_type == QueryType.DATE:
                return self._execute_date(query)
            elif query.query_type == QueryType.TOP:
                return self._execute_top(query)
            else:
                raise QueryExecutionError(f"Unsupported query type: {query.query_type}")

        except (QueryExecutionError, StoreError) as e:
            return QueryResult(
                query_id=query.query_id,
                success=False,
                error_message=str(e),
                data_found=False,
                result_count=0,
                query_description=f"Query failed: {str(e)}",
            )

    def _execute_list(self, query: StructuredQuery) -> QueryResult:
        """List every visible expense."""
        return self._records_result(
            query,
            self._store.list_all(),
            "Listing all expenses",
        )

    def _execute_category(self, query: StructuredQuery) -> QueryResult:
        """List visible expenses for one category."""
        if not query.category:
            raise QueryExecutionError("Category query requires a category")

        return self._records_result(
            query,
            self._store.list_by_category(query.category),
            f"Listing expenses | category: {query.category}",
        )

    def _execute_date(self, query: StructuredQuery) -> QueryResult:
        """List visible expenses on one date."""
        if not query.date:
            raise QueryExecutionError("Date query requires a date")

        return self._records_result(
            query,
            self._store.list_by_date(query.date),
            f"Listing expenses | on {query.date}",
        )

    def _execute_top(self, query: StructuredQuery) -> QueryResult:
        """Largest visible expenses, descending."""
        return self._records_result(
            query,
            self._store.top_n(query.limit),
            f"Top {query.limit} expenses by amount",
        )

    def _execute_totals(self, query: StructuredQuery) -> QueryResult:
        """Per-category running totals."""
        totals = self._store.category_totals()

        if not totals:
            return QueryResult(
                query_id=query.query_id,
                success=True,
                data_found=False,
                result_count=0,
                query_description="No category totals recorded",
            )

        return QueryResult(
            query_id=query.query_id,
            success=True,
            data_found=True,
            result_count=len(totals),
            aggregation_result={
                "totals": totals,
                "grand_total": sum(totals.values()),
            },
            query_description="Calculating total by category",
        )

    def _records_result(
        self,
        query: StructuredQuery,
        expenses: list[Expense],
        description: str,
    ) -> QueryResult:
        results = [expense.to_result_dict() for expense in expenses]
        return QueryResult(
            query_id=query.query_id,
            success=True,
            data_found=len(results) > 0,
            result_count=len(results),
            results=results,
            query_description=description,
        )
