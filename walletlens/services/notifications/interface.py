"""
Abstract Notification Scheduler Interface

DESIGN DECISION: Alert scheduling is an injected collaborator, not a
process-wide singleton. The ledger hands requests to whatever scheduler
it was constructed with and never waits on the outcome.
"""

from abc import ABC, abstractmethod

from walletlens.models.notifications import AlertRequest, CategoryDefinition


class NotificationScheduler(ABC):
    """
    Fire-and-forget scheduler for one-shot local alerts.

    Alerts are keyed by identifier. Scheduling an identifier that is
    already pending replaces the pending alert.
    """

    @abstractmethod
    def request_permission(self) -> bool:
        """
        Ask for permission to deliver alerts.

        Returns:
            True if alerts may be delivered
        """
        pass

    @abstractmethod
    def schedule_one_shot(self, request: AlertRequest) -> None:
        """
        Schedule a single alert.

        Raises:
            NotificationError: If the request could not be scheduled
        """
        pass

    @abstractmethod
    def cancel(self, identifier: str) -> None:
        """Cancel a pending alert. Unknown identifiers are ignored."""
        pass

    @abstractmethod
    def cancel_all(self) -> None:
        """Cancel every pending alert."""
        pass

    @abstractmethod
    def register_categories(self, categories: list[CategoryDefinition]) -> None:
        """Register the alert categories and their action buttons."""
        pass

    @abstractmethod
    def pending(self) -> list[AlertRequest]:
        """List pending alerts ordered by fire time."""
        pass


class NotificationError(Exception):
    """An alert could not be scheduled or cancelled."""
    pass
