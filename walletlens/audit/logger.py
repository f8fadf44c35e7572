"""
Activity Logger

DESIGN DECISION: The ledger never raises for persistence or alert
failures, so every such failure (and every mutation) is logged here.

The logger:
- Always writes a structured local log line
- Keeps a bounded in-memory history of recent events
- Never raises

Background widget refresh threads write to the history. Every access
holds the lock.
"""

import threading
from collections import deque
from typing import Optional

import structlog

from walletlens.models.audit import AuditEvent, AuditEventType, AuditSeverity


# Configure structlog for local logging
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
        structlog.processors.JSONRenderer()
    ],
    wrapper_class=structlog.stdlib.BoundLogger,
    context_class=dict,
    logger_factory=structlog.stdlib.LoggerFactory(),
    cache_logger_on_first_use=True,
)


class AuditLogger:
    """
    Central activity logging service.

    Logs events both to:
    1. Structured local log (for debugging)
    2. An in-memory history (for inspection by callers and tests)
    """

    def __init__(self, history_size: int = 500):
        """
        Initialize the logger.

        Args:
            history_size: How many events to keep in memory.
                          Zero disables the history.
        """
        self._history: deque[AuditEvent] = deque(maxlen=history_size)
        self._lock = threading.Lock()
        self._logger = structlog.get_logger("walletlens")

    def log(self, event: AuditEvent) -> None:
        """Log an event locally and remember it."""
        log_dict = event.to_log_dict()

        if event.severity == AuditSeverity.ERROR:
            self._logger.error("ledger_event", **log_dict)
        elif event.severity == AuditSeverity.WARNING:
            self._logger.warning("ledger_event", **log_dict)
        elif event.severity == AuditSeverity.DEBUG:
            self._logger.debug("ledger_event", **log_dict)
        else:
            self._logger.info("ledger_event", **log_dict)

        with self._lock:
            self._history.append(event)

    def recent_events(
        self,
        limit: int = 100,
        event_type: Optional[AuditEventType] = None,
    ) -> list[AuditEvent]:
        """
        Get the most recent events, newest first.

        Args:
            limit: Maximum number of events to return
            event_type: Only return events of this type
        """
        with self._lock:
            history = list(self._history)
        events = [
            event for event in reversed(history)
            if event_type is None or event.event_type == event_type
        ]
        return events[:limit]

    def count(self, event_type: AuditEventType) -> int:
        """Count remembered events of a type."""
        with self._lock:
            history = list(self._history)
        return sum(1 for event in history if event.event_type == event_type)

    def clear(self) -> None:
        with self._lock:
            self._history.clear()
