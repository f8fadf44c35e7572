"""
Reminder Alert Scheduling

Bill reminders get one alert, at a fixed local time on the due date.
Alerts whose due date or fire time has already passed are skipped.

"Remind later" has two modes (see NotificationSettings):
- default: alert for a detached copy due one day from now. The copy has
  a new id and is not stored; the stored reminder is untouched.
- snooze_preserves_identity: move the stored reminder's due date and
  reschedule its own alert.
"""

from datetime import datetime, timedelta
from typing import Callable, Optional
from uuid import UUID

from walletlens.audit import AuditLogger
from walletlens.config import NotificationSettings
from walletlens.models.audit import AuditEventBuilder, AuditEventType
from walletlens.models.ledger import Reminder, to_local_naive
from walletlens.models.notifications import (
    DEFAULT_CATEGORIES,
    AlertRequest,
    NotificationCategory,
)
from walletlens.services.notifications import NotificationError, NotificationScheduler


def alert_identifier(reminder_id: UUID) -> str:
    return f"bill_{reminder_id}"


class ReminderAlertScheduler:
    """
    Schedules and cancels bill reminder alerts.

    Scheduler failures are logged and never raised.
    """

    def __init__(
        self,
        notifications: NotificationScheduler,
        settings: Optional[NotificationSettings] = None,
        activity_log: Optional[AuditLogger] = None,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self._notifications = notifications
        self._settings = settings or NotificationSettings()
        self._activity_log = activity_log or AuditLogger()
        self._clock = clock

    @property
    def preserves_identity(self) -> bool:
        return self._settings.snooze_preserves_identity

    def fire_time(self, reminder: Reminder) -> datetime:
        """The due date at the configured local time of day."""
        return reminder.due_date.replace(
            hour=self._settings.reminder_hour,
            minute=self._settings.reminder_minute,
            second=0,
            microsecond=0,
        )

    def build_request(self, reminder: Reminder) -> AlertRequest:
        symbol = self._settings.currency_symbol
        return AlertRequest(
            identifier=alert_identifier(reminder.id),
            fire_at=self.fire_time(reminder),
            title="Bill Reminder",
            body=f"{reminder.title} - {symbol}{reminder.amount:.2f} is due today",
            category=NotificationCategory.BILL_REMINDER,
        )

    def schedule(self, reminder: Reminder) -> Optional[AlertRequest]:
        """
        Request the due-date alert for a reminder.

        Returns:
            The scheduled request, or None if it was skipped or failed
        """
        identifier = alert_identifier(reminder.id)
        now = to_local_naive(self._clock())

        if reminder.due_date < now:
            self._activity_log.log(AuditEventBuilder.alert_skipped(identifier, "past_due_date"))
            return None

        request = self.build_request(reminder)
        if request.fire_at <= now:
            self._activity_log.log(AuditEventBuilder.alert_skipped(identifier, "past_fire_time"))
            return None

        try:
            self._notifications.schedule_one_shot(request)
        except NotificationError as e:
            self._activity_log.log(AuditEventBuilder.notification_failed(identifier, str(e)))
            return None

        self._activity_log.log(AuditEventBuilder.alert_scheduled(identifier, request.fire_at))
        return request

    def cancel(self, reminder_id: UUID) -> None:
        identifier = alert_identifier(reminder_id)
        try:
            self._notifications.cancel(identifier)
        except NotificationError as e:
            self._activity_log.log(AuditEventBuilder.notification_failed(identifier, str(e)))
            return
        self._activity_log.log(AuditEventBuilder.alert_cancelled(identifier))

    def reschedule(self, reminder: Reminder) -> Optional[AlertRequest]:
        """Cancel the reminder's alert, then schedule it again unless completed."""
        self.cancel(reminder.id)
        if reminder.is_completed:
            return None
        return self.schedule(reminder)

    def snoozed_copy(self, reminder: Reminder) -> Reminder:
        """
        The reminder as it should look after "remind later".

        The due date moves to `snooze_days` after now. Unless identity is
        preserved, the result is a new reminder with its own id.
        """
        due_date = self._clock() + timedelta(days=self._settings.snooze_days)
        if self.preserves_identity:
            return reminder.model_copy(update={"due_date": due_date})
        return Reminder(
            title=reminder.title,
            amount=reminder.amount,
            due_date=due_date,
            notes=reminder.notes,
        )

    def snooze(self, reminder: Reminder) -> tuple[Reminder, Optional[AlertRequest]]:
        """
        Schedule a "remind later" alert.

        Returns:
            (snoozed reminder, scheduled request or None)
        """
        snoozed = self.snoozed_copy(reminder)
        if self.preserves_identity:
            request = self.reschedule(snoozed)
        else:
            request = self.schedule(snoozed)
        self._activity_log.log(
            AuditEventBuilder.reminder_changed(
                AuditEventType.REMINDER_SNOOZED, reminder.id, reminder.title
            )
        )
        return snoozed, request

    def register_categories(self) -> None:
        try:
            self._notifications.register_categories(DEFAULT_CATEGORIES)
        except NotificationError as e:
            self._activity_log.log(AuditEventBuilder.notification_failed("categories", str(e)))
