"""
Notification Action Handling

Actions tapped on an alert are dispatched straight to the ledger store.
There is no event bus in between: each action maps to one store call.
"""

from typing import Any, Optional, Union
from uuid import UUID

from pydantic import BaseModel

from walletlens.ledger.store import LedgerStore
from walletlens.models.notifications import NotificationAction


class ActionOutcome(BaseModel):
    """What handling an action did."""

    action: Optional[NotificationAction] = None
    handled: bool = False
    message: str = ""
    result: Any = None


class NotificationActionHandler:
    """Maps alert actions onto ledger operations."""

    def __init__(self, store: LedgerStore):
        self._store = store

    def handle(
        self,
        action_identifier: Union[str, NotificationAction],
        reminder_id: Optional[UUID] = None,
    ) -> ActionOutcome:
        """
        Handle an action from a bill reminder or budget alert.

        Args:
            action_identifier: One of the NotificationAction values
            reminder_id: The reminder the alert belongs to (bill actions only)
        """
        try:
            action = NotificationAction(action_identifier)
        except ValueError:
            return ActionOutcome(message=f"Unknown action: {action_identifier}")

        if action == NotificationAction.MARK_PAID:
            return self._mark_paid(reminder_id)
        elif action == NotificationAction.REMIND_LATER:
            return self._remind_later(reminder_id)
        elif action == NotificationAction.VIEW_DETAILS:
            return ActionOutcome(
                action=action,
                handled=True,
                message="Showing budget details",
                result=self._store.monthly_budget,
            )
        else:
            return ActionOutcome(action=action, handled=True, message="Dismissed")

    def _mark_paid(self, reminder_id: Optional[UUID]) -> ActionOutcome:
        action = NotificationAction.MARK_PAID
        if reminder_id is None:
            return ActionOutcome(action=action, message="No reminder attached to the alert")

        completed = self._store.mark_reminder_completed(reminder_id)
        return ActionOutcome(
            action=action,
            handled=completed,
            message="Bill marked as paid" if completed else "Reminder not found",
            result=self._store.get_reminder(reminder_id),
        )

    def _remind_later(self, reminder_id: Optional[UUID]) -> ActionOutcome:
        action = NotificationAction.REMIND_LATER
        if reminder_id is None:
            return ActionOutcome(action=action, message="No reminder attached to the alert")

        snoozed = self._store.snooze_reminder(reminder_id)
        if snoozed is None:
            return ActionOutcome(action=action, message="Reminder not found")
        return ActionOutcome(
            action=action,
            handled=True,
            message=f"Reminding again on {snoozed.due_date:%Y-%m-%d}",
            result=snoozed,
        )
