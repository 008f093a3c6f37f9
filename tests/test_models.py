"""
Tests for Expense Tracker

Test strategy:
1. Unit tests for individual components (models, store, executor)
2. Flow tests for the orchestrator, with the in-memory audit storage
3. No external services anywhere
"""

import pytest
from uuid import uuid4

from expense_tracker.models.expense import (
    Expense,
    ExpenseInput,
    QueryResult,
    QueryType,
    StructuredQuery,
    TotalsPolicy,
)
from expense_tracker.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)


class TestExpenseModels:
    """Tests for expense-related Pydantic models."""

    def test_expense_creation(self):
        """Test Expense model creation."""
        expense = Expense(index=0, amount=12.5, category="food", date="2024-01-05")
        assert expense.amount == 12.5
        assert expense.is_deleted is False

    def test_expense_to_result_dict(self):
        """Test conversion to a result row."""
        expense = Expense(index=3, amount=40.0, category="food", date="2024-01-06")
        assert expense.to_result_dict() == {
            "index": 3,
            "amount": 40.0,
            "category": "food",
            "date": "2024-01-06",
        }

    def test_expense_input_creation(self):
        """Test ExpenseInput model creation."""
        expense_input = ExpenseInput(amount=100, category="travel", date="2024-01-05")
        assert expense_input.amount == 100.0
        assert expense_input.category == "travel"

    def test_expense_input_strips_whitespace(self):
        """Test that whitespace is stripped from the category."""
        expense_input = ExpenseInput(amount=1, category="  food  ", date="2024-01-05")
        assert expense_input.category == "food"

    def test_expense_input_rejects_negative_amount(self):
        """Test that negative amounts are rejected."""
        with pytest.raises(ValueError):
            ExpenseInput(amount=-1, category="food", date="2024-01-05")

    def test_expense_input_rejects_empty_category(self):
        """Test that a blank category is rejected."""
        with pytest.raises(ValueError):
            ExpenseInput(amount=1, category="   ", date="2024-01-05")

    def test_expense_input_rejects_bad_date_format(self):
        """Test that non canonical dates are rejected."""
        with pytest.raises(ValueError):
            ExpenseInput(amount=1, category="food", date="05/01/2024")

    def test_expense_input_rejects_impossible_date(self):
        """Test that well-formed but impossible dates are rejected."""
        with pytest.raises(ValueError, match="Not a valid calendar date"):
            ExpenseInput(amount=1, category="food", date="2024-02-30")


class TestQueryModels:
    """Tests for query models."""

    def test_structured_query_defaults(self):
        """Test StructuredQuery defaults."""
        query = StructuredQuery(query_type=QueryType.TOP)
        assert query.limit == 5
        assert query.category is None

    def test_structured_query_accepts_string_type(self):
        """Test that query types can be given by value."""
        query = StructuredQuery(query_type="totals")
        assert query.query_type == QueryType.TOTALS

    def test_structured_query_rejects_negative_limit(self):
        """Test that limit must be non-negative."""
        with pytest.raises(ValueError):
            StructuredQuery(query_type=QueryType.TOP, limit=-1)

    def test_structured_query_rejects_bad_date(self):
        """Test that date must be YYYY-MM-DD."""
        with pytest.raises(ValueError):
            StructuredQuery(query_type=QueryType.DATE, date="2024/01/05")

    def test_structured_query_strips_category(self):
        """Test that the category is stripped."""
        query = StructuredQuery(query_type=QueryType.CATEGORY, category=" food ")
        assert query.category == "food"

    def test_query_result_rejects_negative_count(self):
        """Test that result_count cannot be negative."""
        with pytest.raises(ValueError):
            QueryResult(
                query_id=uuid4(),
                success=True,
                data_found=False,
                result_count=-1,
                query_description="x",
            )


class TestAuditModels:
    """Tests for audit-related models."""

    def test_audit_event_creation(self):
        """Test AuditEvent model creation."""
        event = AuditEvent(
            event_type=AuditEventType.EXPENSE_ADDED,
            description="Test expense added",
        )
        assert event.event_type == AuditEventType.EXPENSE_ADDED
        assert event.severity == AuditSeverity.INFO

    def test_audit_event_to_log_dict(self):
        """Test conversion to log dictionary."""
        event = AuditEvent(
            event_type=AuditEventType.EXPENSE_DELETED,
            description="Expense deleted",
            details={"already_deleted": False},
        )
        log_dict = event.to_log_dict()
        assert "event_id" in log_dict
        assert log_dict["event_type"] == "expense_deleted"
        assert log_dict["details"]["already_deleted"] is False

    def test_audit_event_builder_expense_added(self):
        """Test AuditEventBuilder.expense_added."""
        correlation_id = uuid4()

        event = AuditEventBuilder.expense_added(
            index=4,
            amount=12.5,
            category="food",
            date="2024-01-05",
            correlation_id=correlation_id,
        )

        assert event.event_type == AuditEventType.EXPENSE_ADDED
        assert event.entity_id == "4"
        assert event.correlation_id == correlation_id
        assert event.is_user_action is True
        assert event.details["category"] == "food"

    def test_audit_event_builder_delete_rejected(self):
        """Test AuditEventBuilder.delete_rejected is a warning."""
        event = AuditEventBuilder.delete_rejected(
            index=9,
            size=3,
            correlation_id=uuid4(),
        )

        assert event.event_type == AuditEventType.DELETE_REJECTED
        assert event.severity == AuditSeverity.WARNING
        assert event.details == {"index": 9, "size": 3}

    def test_audit_event_builder_expense_deleted_twice(self):
        """Test the description distinguishes a repeated delete."""
        event = AuditEventBuilder.expense_deleted(
            index=1,
            already_deleted=True,
            correlation_id=uuid4(),
        )
        assert "already deleted" in event.description


class TestTotalsPolicy:
    """Tests for the totals policy enum."""

    def test_policy_values(self):
        """Test policy string values."""
        assert TotalsPolicy.CUMULATIVE.value == "cumulative"
        assert TotalsPolicy.RECOMPUTE.value == "recompute"

    def test_policy_from_value(self):
        """Test that policies can be looked up by value."""
        assert TotalsPolicy("recompute") is TotalsPolicy.RECOMPUTE


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
