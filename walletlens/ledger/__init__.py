"""
Ledger Package

The in-memory ledger, the aggregation engine over it, and the glue that
turns ledger changes into alerts.
"""

from walletlens.ledger import aggregation
from walletlens.ledger.thresholds import (
    budget_percentage,
    build_budget_alert,
    evaluate_budget_threshold,
)
from walletlens.ledger.reminders import ReminderAlertScheduler, alert_identifier
from walletlens.ledger.store import LedgerStore
from walletlens.ledger.actions import ActionOutcome, NotificationActionHandler

__all__ = [
    "aggregation",
    "budget_percentage",
    "build_budget_alert",
    "evaluate_budget_threshold",
    "ReminderAlertScheduler",
    "alert_identifier",
    "LedgerStore",
    "ActionOutcome",
    "NotificationActionHandler",
]
