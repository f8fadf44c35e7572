"""
Data Models Package

This package contains all Pydantic models used by WalletLens.
All data flowing through the ledger must conform to these schemas.
"""

from walletlens.models.ledger import (
    Budget,
    CategoryTotal,
    LedgerSummary,
    MonthlyBudget,
    Reminder,
    Transaction,
    TransactionType,
    WidgetTransaction,
    clamp_amount,
)
from walletlens.models.notifications import (
    DEFAULT_CATEGORIES,
    ActionDefinition,
    AlertRequest,
    CategoryDefinition,
    NotificationAction,
    NotificationCategory,
    ThresholdLevel,
    ThresholdSignal,
)
from walletlens.models.audit import (
    AuditEvent,
    AuditEventBuilder,
    AuditEventType,
    AuditSeverity,
)
from walletlens.models.validation import ValidationIssue, ValidationResult

__all__ = [
    # Ledger models
    "Budget",
    "CategoryTotal",
    "LedgerSummary",
    "MonthlyBudget",
    "Reminder",
    "Transaction",
    "TransactionType",
    "WidgetTransaction",
    "clamp_amount",
    # Notification models
    "DEFAULT_CATEGORIES",
    "ActionDefinition",
    "AlertRequest",
    "CategoryDefinition",
    "NotificationAction",
    "NotificationCategory",
    "ThresholdLevel",
    "ThresholdSignal",
    # Audit models
    "AuditEvent",
    "AuditEventBuilder",
    "AuditEventType",
    "AuditSeverity",
    # Validation models
    "ValidationIssue",
    "ValidationResult",
]
