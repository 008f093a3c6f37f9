"""
Audit Models for Expense Tracker

Every mutation of the store and every query is logged for audit purposes.
This provides:
1. Traceability of what was added and deleted
2. Debugging information when a result looks wrong
3. A record of rejected operations

DESIGN DECISION: Audit logs are append-only. We never delete or modify them.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of events we audit."""
    # Mutations
    EXPENSE_ADDED = "expense_added"
    EXPENSE_DELETED = "expense_deleted"
    DELETE_REJECTED = "delete_rejected"

    # Query operations
    QUERY_EXECUTED = "query_executed"
    QUERY_FAILED = "query_failed"

    # System events
    SYSTEM_ERROR = "system_error"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"
    CRITICAL = "critical"


class AuditEvent(BaseModel):
    """
    A single audit event.

    This is the core unit of our audit trail.
    Every significant action creates one of these.
    """

    # Identity
    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=datetime.utcnow,
        description="When the event occurred (UTC)"
    )

    # Event classification
    event_type: AuditEventType = Field(
        ...,
        description="Type of event"
    )
    severity: AuditSeverity = Field(
        default=AuditSeverity.INFO,
        description="Event severity"
    )

    # Context - what entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'expense', 'query')"
    )
    entity_id: Optional[str] = Field(
        default=None,
        description="ID of the entity (expense index or query UUID)"
    )

    # Correlation - for tracking related events
    correlation_id: Optional[UUID] = Field(
        default=None,
        description="ID to correlate related events of one user action"
    )

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )

    # Additional data (event-specific)
    details: dict[str, Any] = Field(
        default_factory=dict,
        description="Additional event-specific data"
    )

    # Error information (if applicable)
    error_message: Optional[str] = None

    is_user_action: bool = Field(
        default=False,
        description="Was this triggered by a user action?"
    )

    def to_log_dict(self) -> dict:
        """
        Convert to a dictionary suitable for structured logging.
        """
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": self.entity_id,
            "correlation_id": str(self.correlation_id) if self.correlation_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
            "is_user_action": self.is_user_action,
        }


class AuditEventBuilder:
    """
    Helper class to build audit events with common patterns.

    Usage:
        event = AuditEventBuilder.expense_added(index, amount, category, date, correlation_id)
        event = AuditEventBuilder.delete_rejected(index, size, correlation_id)
    """

    @staticmethod
    def expense_added(
        index: int,
        amount: float,
        category: str,
        date: str,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_ADDED,
            entity_type="expense",
            entity_id=str(index),
            correlation_id=correlation_id,
            description=f"Expense added: {category} - {amount:.2f} on {date}",
            details={
                "amount": amount,
                "category": category,
                "date": date,
            },
            is_user_action=True,
        )

    @staticmethod
    def expense_deleted(
        index: int,
        already_deleted: bool,
        correlation_id: UUID
    ) -> AuditEvent:
        description = (
            f"Expense {index} was already deleted"
            if already_deleted
            else f"Expense {index} deleted"
        )
        return AuditEvent(
            event_type=AuditEventType.EXPENSE_DELETED,
            entity_type="expense",
            entity_id=str(index),
            correlation_id=correlation_id,
            description=description,
            details={
                "already_deleted": already_deleted,
            },
            is_user_action=True,
        )

    @staticmethod
    def delete_rejected(
        index: int,
        size: int,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.DELETE_REJECTED,
            severity=AuditSeverity.WARNING,
            entity_type="expense",
            entity_id=str(index),
            correlation_id=correlation_id,
            description=f"Delete rejected: index {index} out of range",
            details={
                "index": index,
                "size": size,
            },
            is_user_action=True,
        )

    @staticmethod
    def query_executed(
        query_id: UUID,
        query_type: str,
        result_count: int,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.QUERY_EXECUTED,
            entity_type="query",
            entity_id=str(query_id),
            correlation_id=correlation_id,
            description=f"Query executed: {query_type} returned {result_count} results",
            details={
                "query_type": query_type,
                "result_count": result_count,
            },
        )

    @staticmethod
    def query_failed(
        query_id: UUID,
        query_type: str,
        error_message: str,
        correlation_id: UUID
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.QUERY_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type="query",
            entity_id=str(query_id),
            correlation_id=correlation_id,
            description=f"Query failed: {query_type}",
            error_message=error_message,
            details={
                "query_type": query_type,
            },
        )

    @staticmethod
    def system_error(
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.SYSTEM_ERROR,
            severity=AuditSeverity.ERROR,
            description=f"System error: {error_type}",
            error_message=error_message,
            details=details or {},
            correlation_id=correlation_id,
        )
