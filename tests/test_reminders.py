"""
Tests for bill reminder alert scheduling.

The clock is fixed at 08:00 on 2025-03-15, an hour before reminders fire.
"""

from datetime import datetime, timedelta

import pytest

from conftest import NOW
from walletlens.config import NotificationSettings
from walletlens.ledger.reminders import ReminderAlertScheduler, alert_identifier
from walletlens.models.audit import AuditEventType
from walletlens.models.ledger import Reminder
from walletlens.models.notifications import NotificationCategory
from walletlens.services.notifications import InMemoryNotificationScheduler


@pytest.fixture
def alerts(scheduler, activity_log, clock) -> ReminderAlertScheduler:
    return ReminderAlertScheduler(
        scheduler,
        settings=NotificationSettings(),
        activity_log=activity_log,
        clock=clock,
    )


def make_reminder(due_date, **kwargs) -> Reminder:
    fields = {"title": "Electric Bill", "amount": 75.5, "due_date": due_date}
    fields.update(kwargs)
    return Reminder(**fields)


class TestSchedule:
    """Due-date alerts."""

    def test_fires_at_nine_on_due_date(self, alerts, scheduler):
        reminder = make_reminder(datetime(2025, 3, 20, 17, 45))
        request = alerts.schedule(reminder)

        assert request.fire_at == datetime(2025, 3, 20, 9, 0)
        assert request.identifier == f"bill_{reminder.id}"
        assert request.title == "Bill Reminder"
        assert request.body == "Electric Bill - $75.50 is due today"
        assert request.category == NotificationCategory.BILL_REMINDER
        assert scheduler.get(alert_identifier(reminder.id)) == request

    def test_past_due_date_is_skipped(self, alerts, scheduler, activity_log):
        reminder = make_reminder(NOW - timedelta(seconds=1))
        assert alerts.schedule(reminder) is None
        assert scheduler.pending() == []

        skipped = activity_log.recent_events(event_type=AuditEventType.ALERT_SKIPPED)
        assert skipped[0].details["reason"] == "past_due_date"

    def test_due_today_before_nine_is_scheduled(self, alerts, scheduler):
        reminder = make_reminder(NOW)
        request = alerts.schedule(reminder)
        assert request.fire_at == datetime(2025, 3, 15, 9, 0)
        assert len(scheduler.pending()) == 1

    def test_due_today_after_nine_is_skipped(self, alerts, scheduler, activity_log, clock):
        clock.advance(hours=2)
        reminder = make_reminder(datetime(2025, 3, 15, 18, 0))
        assert alerts.schedule(reminder) is None
        assert scheduler.pending() == []

        skipped = activity_log.recent_events(event_type=AuditEventType.ALERT_SKIPPED)
        assert skipped[0].details["reason"] == "past_fire_time"

    def test_schedule_twice_replaces(self, alerts, scheduler):
        reminder = make_reminder(datetime(2025, 3, 20))
        alerts.schedule(reminder)
        alerts.schedule(reminder.model_copy(update={"due_date": datetime(2025, 3, 22)}))
        pending = scheduler.pending()
        assert len(pending) == 1
        assert pending[0].fire_at == datetime(2025, 3, 22, 9, 0)

    def test_custom_fire_time(self, scheduler, activity_log, clock):
        settings = NotificationSettings(reminder_hour=7, reminder_minute=30)
        alerts = ReminderAlertScheduler(scheduler, settings, activity_log, clock)
        request = alerts.schedule(make_reminder(datetime(2025, 3, 20)))
        assert request.fire_at == datetime(2025, 3, 20, 7, 30)

    def test_permission_denied_is_logged_not_raised(self, activity_log, clock):
        denied = InMemoryNotificationScheduler(permission_granted=False)
        alerts = ReminderAlertScheduler(denied, NotificationSettings(), activity_log, clock)

        assert alerts.schedule(make_reminder(datetime(2025, 3, 20))) is None
        assert activity_log.count(AuditEventType.NOTIFICATION_FAILED) == 1


class TestCancelAndReschedule:

    def test_cancel(self, alerts, scheduler):
        reminder = make_reminder(datetime(2025, 3, 20))
        alerts.schedule(reminder)
        alerts.cancel(reminder.id)
        assert scheduler.pending() == []

    def test_cancel_unknown_is_harmless(self, alerts, scheduler):
        alerts.cancel(make_reminder(datetime(2025, 3, 20)).id)
        assert scheduler.pending() == []

    def test_reschedule_completed_only_cancels(self, alerts, scheduler):
        reminder = make_reminder(datetime(2025, 3, 20))
        alerts.schedule(reminder)
        assert alerts.reschedule(reminder.model_copy(update={"is_completed": True})) is None
        assert scheduler.pending() == []

    def test_reschedule_moves_alert(self, alerts, scheduler):
        reminder = make_reminder(datetime(2025, 3, 20))
        alerts.schedule(reminder)
        alerts.reschedule(reminder.model_copy(update={"due_date": datetime(2025, 4, 1)}))
        assert [r.fire_at for r in scheduler.pending()] == [datetime(2025, 4, 1, 9, 0)]


class TestSnooze:

    def test_snooze_creates_detached_copy(self, alerts, scheduler):
        reminder = make_reminder(datetime(2025, 3, 15, 8, 0))
        snoozed, request = alerts.snooze(reminder)

        assert snoozed.id != reminder.id
        assert snoozed.title == reminder.title
        assert snoozed.amount == reminder.amount
        assert snoozed.due_date == NOW + timedelta(days=1)
        assert request.identifier == alert_identifier(snoozed.id)
        assert request.fire_at == datetime(2025, 3, 16, 9, 0)

    def test_snooze_leaves_original_alert(self, alerts, scheduler):
        reminder = make_reminder(datetime(2025, 3, 20))
        alerts.schedule(reminder)
        alerts.snooze(reminder)
        identifiers = {r.identifier for r in scheduler.pending()}
        assert alert_identifier(reminder.id) in identifiers
        assert len(identifiers) == 2

    def test_snooze_preserving_identity(self, scheduler, activity_log, clock):
        settings = NotificationSettings(snooze_preserves_identity=True)
        alerts = ReminderAlertScheduler(scheduler, settings, activity_log, clock)
        reminder = make_reminder(datetime(2025, 3, 20))
        alerts.schedule(reminder)

        snoozed, request = alerts.snooze(reminder)

        assert snoozed.id == reminder.id
        assert request.identifier == alert_identifier(reminder.id)
        assert [r.fire_at for r in scheduler.pending()] == [datetime(2025, 3, 16, 9, 0)]

    def test_snooze_is_logged(self, alerts, activity_log):
        alerts.snooze(make_reminder(datetime(2025, 3, 20)))
        assert activity_log.count(AuditEventType.REMINDER_SNOOZED) == 1


class TestCategories:

    def test_register_categories(self, alerts, scheduler):
        alerts.register_categories()
        assert set(scheduler.categories) == {
            NotificationCategory.BILL_REMINDER,
            NotificationCategory.BUDGET_WARNING,
        }
