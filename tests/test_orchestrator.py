"""Tests for the expense and query flows."""

import pytest
from uuid import uuid4

from expense_tracker.audit import AuditLogger
from expense_tracker.config import Settings
from expense_tracker.models.audit import AuditEventType, AuditSeverity
from expense_tracker.models.expense import (
    ExpenseInput,
    QueryType,
    StructuredQuery,
    TotalsPolicy,
)
from expense_tracker.orchestrator import ExpenseFlow, QueryFlow, create_app_components
from expense_tracker.store import ExpenseStore, InMemoryAuditStorage


@pytest.fixture
def audit_storage():
    return InMemoryAuditStorage()


@pytest.fixture
def store():
    return ExpenseStore()


@pytest.fixture
def expense_flow(store, audit_storage):
    return ExpenseFlow(store=store, audit_logger=AuditLogger(audit_storage))


@pytest.fixture
def query_flow(store, audit_storage):
    return QueryFlow(store=store, audit_logger=AuditLogger(audit_storage))


class TestExpenseFlow:
    """Tests for adding and deleting through the flow."""

    def test_add_expense(self, expense_flow, store, audit_storage):
        """Test that adding stores the expense and audits it."""
        correlation_id = uuid4()

        expense = expense_flow.add_expense(
            ExpenseInput(amount=12.5, category="food", date="2024-01-05"),
            correlation_id=correlation_id,
        )

        assert expense.index == 0
        assert store.category_totals() == {"food": 12.5}

        events = audit_storage.get_events_by_correlation_id(correlation_id)
        assert len(events) == 1
        assert events[0].event_type == AuditEventType.EXPENSE_ADDED
        assert events[0].entity_id == "0"

    def test_delete_expense(self, expense_flow, store, audit_storage):
        """Test a successful delete."""
        expense_flow.add_expense(ExpenseInput(amount=1, category="a", date="2024-01-01"))

        success, message = expense_flow.delete_expense(0)

        assert success is True
        assert message == "Expense deleted lazily."
        assert store.list_all() == []
        assert audit_storage.count("expense_deleted") == 1

    def test_delete_twice_reports_differently(self, expense_flow):
        """Test that a repeated delete succeeds with a distinct message."""
        expense_flow.add_expense(ExpenseInput(amount=1, category="a", date="2024-01-01"))
        expense_flow.delete_expense(0)

        success, message = expense_flow.delete_expense(0)

        assert success is True
        assert message == "Expense was already deleted."

    def test_delete_out_of_range(self, expense_flow, audit_storage):
        """Test that a bad index is reported and audited as a warning."""
        correlation_id = uuid4()

        success, message = expense_flow.delete_expense(5, correlation_id=correlation_id)

        assert success is False
        assert message == "Invalid index."
        events = audit_storage.get_events_by_correlation_id(correlation_id)
        assert events[0].event_type == AuditEventType.DELETE_REJECTED
        assert events[0].severity == AuditSeverity.WARNING
        assert events[0].details == {"index": 5, "size": 0}

    def test_flow_without_audit_logger(self, store):
        """Test that the flow works without auditing."""
        flow = ExpenseFlow(store=store)
        flow.add_expense(ExpenseInput(amount=3, category="a", date="2024-01-01"))
        assert flow.delete_expense(0) == (True, "Expense deleted lazily.")


class TestQueryFlow:
    """Tests for running queries through the flow."""

    def test_run_audits_success(self, expense_flow, query_flow, audit_storage):
        """Test that a successful query is audited with its result count."""
        expense_flow.add_expense(ExpenseInput(amount=1, category="a", date="2024-01-01"))
        expense_flow.add_expense(ExpenseInput(amount=2, category="a", date="2024-01-02"))

        result = query_flow.run(StructuredQuery(query_type=QueryType.TOP, limit=1))

        assert [row["amount"] for row in result.results] == [2.0]
        event = audit_storage.get_recent_events(limit=1)[0]
        assert event.event_type == AuditEventType.QUERY_EXECUTED
        assert event.details == {"query_type": "top", "result_count": 1}

    def test_run_audits_failure(self, query_flow, audit_storage):
        """Test that a failed query is audited as such."""
        result = query_flow.run(StructuredQuery(query_type=QueryType.CATEGORY))

        assert result.success is False
        event = audit_storage.get_recent_events(limit=1)[0]
        assert event.event_type == AuditEventType.QUERY_FAILED
        assert event.error_message == "Category query requires a category"


class TestCreateAppComponents:
    """Tests for the component factory."""

    def test_components_share_one_store(self):
        """Test that both flows see the same store."""
        expense_flow, query_flow, store = create_app_components(Settings())

        expense_flow.add_expense(ExpenseInput(amount=9, category="x", date="2024-01-01"))
        result = query_flow.run(StructuredQuery(query_type=QueryType.LIST))

        assert len(store) == 1
        assert result.result_count == 1

    def test_components_use_configured_policy(self, monkeypatch):
        """Test that the totals policy comes from settings."""
        monkeypatch.setenv("EXPENSE_TRACKER_TOTALS_POLICY", "recompute")

        _, _, store = create_app_components(Settings())

        assert store.totals_policy == TotalsPolicy.RECOMPUTE
