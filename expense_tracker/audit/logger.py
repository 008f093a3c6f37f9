"""
Audit Logger

DESIGN DECISION: Every mutation of the store and every query is logged.
This provides:
1. Traceability of what was added and deleted, and when
2. Debugging capability when a total or a top-N list looks wrong
3. A record of rejected operations (bad delete indices)

The audit logger:
- Always logs locally through structlog
- Appends to an audit storage backend when one is configured
- Supports correlation IDs to trace related events
"""

import logging
from typing import Optional
from uuid import UUID, uuid4

import structlog

from expense_tracker.config import LoggingSettings, get_settings
from expense_tracker.models.audit import AuditEvent, AuditEventBuilder, AuditSeverity
from expense_tracker.store import AuditStorageInterface


def configure_logging(settings: Optional[LoggingSettings] = None) -> None:
    """
    Configure structlog (and the stdlib root logger it writes through).

    Safe to call more than once; the last call wins.
    """
    settings = settings or get_settings().logging

    logging.basicConfig(
        format="%(message)s",
        level=getattr(logging, settings.level),
        force=True,
    )

    renderer = (
        structlog.processors.JSONRenderer()
        if settings.json_output
        else structlog.dev.ConsoleRenderer()
    )

    structlog.configure(
        processors=[
            structlog.stdlib.filter_by_level,
            structlog.stdlib.add_logger_name,
            structlog.stdlib.add_log_level,
            structlog.stdlib.PositionalArgumentsFormatter(),
            structlog.processors.TimeStamper(fmt="iso"),
            structlog.processors.StackInfoRenderer(),
            structlog.processors.format_exc_info,
            structlog.processors.UnicodeDecoder(),
            renderer,
        ],
        wrapper_class=structlog.stdlib.BoundLogger,
        context_class=dict,
        logger_factory=structlog.stdlib.LoggerFactory(),
        cache_logger_on_first_use=True,
    )


configure_logging()


class AuditLogger:
    """
    Central audit logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. Audit storage (for the in-app history view)
    """

    def __init__(
        self,
        storage: Optional[AuditStorageInterface] = None,
    ):
        """
        Initialize audit logger.

        Args:
            storage: Storage backend for audit events.
                    If None, only logs locally.
        """
        self._storage = storage
        self._logger = structlog.get_logger("expense_tracker.audit")

    @property
    def storage(self) -> Optional[AuditStorageInterface]:
        return self._storage

    def log(self, event: AuditEvent) -> bool:
        """
        Log an audit event.

        Always logs locally. Persists to storage if available.

        Returns True if storage write succeeded (or no storage configured).
        """
        log_dict = event.to_log_dict()

        if event.severity in (AuditSeverity.ERROR, AuditSeverity.CRITICAL):
            self._logger.error("audit_event", **log_dict)
        elif event.severity == AuditSeverity.WARNING:
            self._logger.warning("audit_event", **log_dict)
        elif event.severity == AuditSeverity.DEBUG:
            self._logger.debug("audit_event", **log_dict)
        else:
            self._logger.info("audit_event", **log_dict)

        if self._storage:
            return self._storage.append_event(event)

        return True

    def log_expense_added(
        self,
        index: int,
        amount: float,
        category: str,
        date: str,
        correlation_id: UUID,
    ) -> None:
        """Log a new expense."""
        event = AuditEventBuilder.expense_added(
            index=index,
            amount=amount,
            category=category,
            date=date,
            correlation_id=correlation_id,
        )
        self.log(event)

    def log_expense_deleted(
        self,
        index: int,
        already_deleted: bool,
        correlation_id: UUID,
    ) -> None:
        """Log a lazy deletion."""
        event = AuditEventBuilder.expense_deleted(
            index=index,
            already_deleted=already_deleted,
            correlation_id=correlation_id,
        )
        self.log(event)

    def log_delete_rejected(
        self,
        index: int,
        size: int,
        correlation_id: UUID,
    ) -> None:
        """Log a delete with an out-of-range index."""
        event = AuditEventBuilder.delete_rejected(
            index=index,
            size=size,
            correlation_id=correlation_id,
        )
        self.log(event)

    def log_query_executed(
        self,
        query_id: UUID,
        query_type: str,
        result_count: int,
        correlation_id: UUID,
    ) -> None:
        """Log query execution."""
        event = AuditEventBuilder.query_executed(
            query_id=query_id,
            query_type=query_type,
            result_count=result_count,
            correlation_id=correlation_id,
        )
        self.log(event)

    def log_query_failed(
        self,
        query_id: UUID,
        query_type: str,
        error_message: str,
        correlation_id: UUID,
    ) -> None:
        """Log a query that could not be executed."""
        event = AuditEventBuilder.query_failed(
            query_id=query_id,
            query_type=query_type,
            error_message=error_message,
            correlation_id=correlation_id,
        )
        self.log(event)

    def log_error(
        self,
        error_type: str,
        error_message: str,
        details: Optional[dict] = None,
        correlation_id: Optional[UUID] = None,
    ) -> None:
        """Log an error."""
        event = AuditEventBuilder.system_error(
            error_type=error_type,
            error_message=error_message,
            details=details,
            correlation_id=correlation_id,
        )
        self.log(event)


def create_correlation_id() -> UUID:
    """
    Create a new correlation ID for tracking related events.

    Use this at the start of a new user action (e.g., adding an expense).
    Pass it through all subsequent operations.
    """
    return uuid4()
