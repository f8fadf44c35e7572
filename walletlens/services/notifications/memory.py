"""
In-process Notification Scheduler

Keeps pending alerts in a dictionary. A host loop (or a test) polls
`deliver_due()` to collect alerts whose fire time has passed.
"""

from datetime import datetime
from typing import Optional

import structlog

from walletlens.models.notifications import (
    AlertRequest,
    CategoryDefinition,
    NotificationCategory,
)
from walletlens.services.notifications.interface import (
    NotificationError,
    NotificationScheduler,
)


class InMemoryNotificationScheduler(NotificationScheduler):
    """Dictionary-backed scheduler."""

    def __init__(self, permission_granted: bool = True):
        self._permission_granted = permission_granted
        self._permission_requested = False
        self._pending: dict[str, AlertRequest] = {}
        self._delivered: list[AlertRequest] = []
        self._categories: dict[NotificationCategory, CategoryDefinition] = {}
        self._logger = structlog.get_logger("walletlens.notifications")

    @property
    def permission_requested(self) -> bool:
        return self._permission_requested

    @property
    def categories(self) -> dict[NotificationCategory, CategoryDefinition]:
        return dict(self._categories)

    @property
    def delivered(self) -> list[AlertRequest]:
        return list(self._delivered)

    def request_permission(self) -> bool:
        self._permission_requested = True
        if self._permission_granted:
            self._logger.info("notification_permission_granted")
        else:
            self._logger.warning("notification_permission_denied")
        return self._permission_granted

    def schedule_one_shot(self, request: AlertRequest) -> None:
        if not self._permission_granted:
            raise NotificationError(
                f"Notification permission denied; cannot schedule {request.identifier}"
            )
        self._pending[request.identifier] = request
        self._logger.info(
            "alert_scheduled",
            identifier=request.identifier,
            fire_at=request.fire_at.isoformat(),
        )

    def cancel(self, identifier: str) -> None:
        if self._pending.pop(identifier, None) is not None:
            self._logger.info("alert_cancelled", identifier=identifier)

    def cancel_all(self) -> None:
        self._pending.clear()
        self._logger.info("all_alerts_cancelled")

    def register_categories(self, categories: list[CategoryDefinition]) -> None:
        self._categories = {category.identifier: category for category in categories}

    def pending(self) -> list[AlertRequest]:
        return sorted(self._pending.values(), key=lambda r: r.fire_at)

    def get(self, identifier: str) -> Optional[AlertRequest]:
        return self._pending.get(identifier)

    def due(self, now: datetime) -> list[AlertRequest]:
        """Pending alerts whose fire time is at or before now."""
        return [request for request in self.pending() if request.fire_at <= now]

    def deliver_due(self, now: datetime) -> list[AlertRequest]:
        """Remove and return alerts that are due."""
        due = self.due(now)
        for request in due:
            del self._pending[request.identifier]
            self._delivered.append(request)
        return due
