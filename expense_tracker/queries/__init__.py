"""Query execution package."""

from expense_tracker.queries.executor import QueryExecutionError, QueryExecutor

__all__ = ["QueryExecutionError", "QueryExecutor"]
