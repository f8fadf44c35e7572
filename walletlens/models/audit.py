"""
Activity Models for WalletLens

Every ledger mutation and every swallowed failure produces an event.
This provides:
1. A structured log of what the ledger did
2. Debugging information when persistence or alerts fail
3. A way for tests to observe side effects that are otherwise silent

DESIGN DECISION: No failure in the ledger is fatal, so failures are
recorded here instead of being raised.
"""

from datetime import datetime
from enum import Enum
from typing import Any, Optional
from uuid import UUID, uuid4

from pydantic import BaseModel, Field


class AuditEventType(str, Enum):
    """Types of events we record."""
    # Transactions
    TRANSACTION_ADDED = "transaction_added"
    TRANSACTION_DELETED = "transaction_deleted"

    # Reminders
    REMINDER_ADDED = "reminder_added"
    REMINDER_UPDATED = "reminder_updated"
    REMINDER_DELETED = "reminder_deleted"
    REMINDER_COMPLETED = "reminder_completed"
    REMINDER_SNOOZED = "reminder_snoozed"

    # Budget
    BUDGET_SET = "budget_set"
    BUDGET_SPENDING_UPDATED = "budget_spending_updated"
    BUDGET_THRESHOLD_CROSSED = "budget_threshold_crossed"

    # Alerts
    ALERT_SCHEDULED = "alert_scheduled"
    ALERT_SKIPPED = "alert_skipped"
    ALERT_CANCELLED = "alert_cancelled"

    # Persistence
    LEDGER_LOADED = "ledger_loaded"
    PERSISTENCE_LOAD_FAILED = "persistence_load_failed"
    PERSISTENCE_SAVE_FAILED = "persistence_save_failed"

    # Widget
    WIDGET_REFRESHED = "widget_refreshed"
    WIDGET_REFRESH_FAILED = "widget_refresh_failed"

    # Lookups / failures
    ENTITY_NOT_FOUND = "entity_not_found"
    NOTIFICATION_FAILED = "notification_failed"


class AuditSeverity(str, Enum):
    """Severity level for audit events."""
    DEBUG = "debug"
    INFO = "info"
    WARNING = "warning"
    ERROR = "error"


class AuditEvent(BaseModel):
    """A single activity event."""

    event_id: UUID = Field(
        default_factory=uuid4,
        description="Unique event identifier"
    )
    timestamp: datetime = Field(
        default_factory=datetime.now,
        description="When the event occurred (local time)"
    )

    event_type: AuditEventType
    severity: AuditSeverity = AuditSeverity.INFO

    # What entity is this about?
    entity_type: Optional[str] = Field(
        default=None,
        description="Type of entity (e.g., 'transaction', 'reminder', 'budget')"
    )
    entity_id: Optional[UUID] = None

    description: str = Field(
        ...,
        max_length=500,
        description="Human-readable description of what happened"
    )
    details: dict[str, Any] = Field(default_factory=dict)
    error_message: Optional[str] = None

    def to_log_dict(self) -> dict:
        """Convert to a dictionary suitable for structured logging."""
        return {
            "event_id": str(self.event_id),
            "timestamp": self.timestamp.isoformat(),
            "event_type": self.event_type.value,
            "severity": self.severity.value,
            "entity_type": self.entity_type,
            "entity_id": str(self.entity_id) if self.entity_id else None,
            "description": self.description,
            "details": self.details,
            "error_message": self.error_message,
        }


class AuditEventBuilder:
    """
    Helper class to build events with common patterns.

    Usage:
        event = AuditEventBuilder.transaction_added(transaction_id, "Food", "12.50", "EXPENSE")
        event = AuditEventBuilder.entity_not_found("reminder", reminder_id, "update")
    """

    @staticmethod
    def transaction_added(
        transaction_id: UUID,
        category: str,
        amount: str,
        transaction_type: str,
    ) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_ADDED,
            entity_type="transaction",
            entity_id=transaction_id,
            description=f"{transaction_type.capitalize()} added: {category} - {amount}",
            details={
                "category": category,
                "amount": amount,
                "type": transaction_type,
            },
        )

    @staticmethod
    def transaction_deleted(transaction_id: UUID, removed: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.TRANSACTION_DELETED,
            entity_type="transaction",
            entity_id=transaction_id,
            description=f"Transaction deleted ({removed} removed)",
            details={"removed": removed},
        )

    @staticmethod
    def reminder_changed(
        event_type: AuditEventType,
        reminder_id: UUID,
        title: str,
    ) -> AuditEvent:
        verb = event_type.value.split("_", 1)[1]
        return AuditEvent(
            event_type=event_type,
            entity_type="reminder",
            entity_id=reminder_id,
            description=f"Reminder {verb}: {title}",
            details={"title": title},
        )

    @staticmethod
    def budget_set(budget_id: UUID, limit: str, spent: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BUDGET_SET,
            entity_type="budget",
            entity_id=budget_id,
            description=f"Monthly budget set to {limit}",
            details={"limit": limit, "spent": spent},
        )

    @staticmethod
    def budget_spending_updated(budget_id: UUID, spent: str, percentage: float) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BUDGET_SPENDING_UPDATED,
            severity=AuditSeverity.DEBUG,
            entity_type="budget",
            entity_id=budget_id,
            description=f"Budget spending updated: {spent} ({percentage:.1f}%)",
            details={"spent": spent, "percentage_used": percentage},
        )

    @staticmethod
    def threshold_crossed(level: str, percentage: int, over_amount: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.BUDGET_THRESHOLD_CROSSED,
            severity=AuditSeverity.WARNING,
            entity_type="budget",
            description=f"Budget {level}: {percentage}% used",
            details={
                "level": level,
                "percentage": percentage,
                "over_amount": over_amount,
            },
        )

    @staticmethod
    def alert_scheduled(identifier: str, fire_at: datetime) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ALERT_SCHEDULED,
            entity_type="alert",
            description=f"Alert scheduled: {identifier}",
            details={"identifier": identifier, "fire_at": fire_at.isoformat()},
        )

    @staticmethod
    def alert_skipped(identifier: str, reason: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ALERT_SKIPPED,
            severity=AuditSeverity.DEBUG,
            entity_type="alert",
            description=f"Alert not scheduled: {identifier}",
            details={"identifier": identifier, "reason": reason},
        )

    @staticmethod
    def alert_cancelled(identifier: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ALERT_CANCELLED,
            entity_type="alert",
            description=f"Alert cancelled: {identifier}",
            details={"identifier": identifier},
        )

    @staticmethod
    def ledger_loaded(transactions: int, reminders: int, has_budget: bool) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.LEDGER_LOADED,
            description=(
                f"Ledger loaded: {transactions} transactions, {reminders} reminders"
            ),
            details={
                "transactions": transactions,
                "reminders": reminders,
                "has_budget": has_budget,
            },
        )

    @staticmethod
    def persistence_failed(
        operation: str,
        key: str,
        error_message: str,
    ) -> AuditEvent:
        event_type = (
            AuditEventType.PERSISTENCE_LOAD_FAILED
            if operation == "load"
            else AuditEventType.PERSISTENCE_SAVE_FAILED
        )
        return AuditEvent(
            event_type=event_type,
            severity=AuditSeverity.ERROR,
            description=f"Failed to {operation} '{key}'",
            error_message=error_message,
            details={"key": key, "operation": operation},
        )

    @staticmethod
    def entity_not_found(entity_type: str, entity_id: UUID, operation: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.ENTITY_NOT_FOUND,
            severity=AuditSeverity.WARNING,
            entity_type=entity_type,
            entity_id=entity_id,
            description=f"Cannot {operation} {entity_type}: not found",
            details={"operation": operation},
        )

    @staticmethod
    def notification_failed(identifier: str, error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.NOTIFICATION_FAILED,
            severity=AuditSeverity.ERROR,
            entity_type="alert",
            description=f"Notification request failed: {identifier}",
            error_message=error_message,
            details={"identifier": identifier},
        )

    @staticmethod
    def widget_refreshed(attempt: int) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.WIDGET_REFRESHED,
            severity=AuditSeverity.DEBUG,
            entity_type="widget",
            description=f"Widget refresh signal #{attempt} delivered",
            details={"attempt": attempt},
        )

    @staticmethod
    def widget_refresh_failed(attempt: int, error_message: str) -> AuditEvent:
        return AuditEvent(
            event_type=AuditEventType.WIDGET_REFRESH_FAILED,
            severity=AuditSeverity.WARNING,
            entity_type="widget",
            description=f"Widget refresh signal #{attempt} failed",
            error_message=error_message,
            details={"attempt": attempt},
        )
