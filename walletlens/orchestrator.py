"""
Component Wiring for WalletLens

This module builds the ledger and its collaborators and connects them:
1. Storage: app namespace + widget shared namespace
2. Notifications: scheduler + reminder alert glue + action handler
3. Widget: timeline provider, in-process host, redundant refresh notifier

DESIGN DECISION: Every collaborator is passed explicitly. Nothing here
is a process-wide singleton, so tests can build isolated ledgers.
"""

from dataclasses import dataclass
from datetime import datetime
from typing import Callable, Optional

from walletlens.audit import AuditLogger
from walletlens.config import get_settings
from walletlens.ledger import LedgerStore, NotificationActionHandler, ReminderAlertScheduler
from walletlens.services.notifications import (
    InMemoryNotificationScheduler,
    NotificationScheduler,
)
from walletlens.services.storage import (
    FileKeyValueStore,
    InMemoryKeyValueStore,
    KeyValueStore,
)
from walletlens.services.widget import (
    RedundantRefreshNotifier,
    TimelineWidgetHost,
    WidgetTimelineProvider,
)
from walletlens.validation import EntryValidator


@dataclass
class AppComponents:
    """Everything a front end needs to drive the ledger."""

    store: LedgerStore
    reminder_alerts: ReminderAlertScheduler
    actions: NotificationActionHandler
    notifications: NotificationScheduler
    widget_host: TimelineWidgetHost
    widget_provider: WidgetTimelineProvider
    validator: EntryValidator
    activity_log: AuditLogger


def create_app_components(
    use_files: bool = True,
    notifications: Optional[NotificationScheduler] = None,
    clock: Callable[[], datetime] = datetime.now,
) -> AppComponents:
    """
    Factory function to create all application components.

    Args:
        use_files: Persist to the configured data directory.
                   Set to False for an in-memory ledger (testing).
        notifications: Alert scheduler; an in-process one if not given
        clock: Source of "now" shared by every component

    Returns:
        The wired components, with the ledger already loaded
    """
    settings = get_settings()
    storage_settings = settings.storage
    notification_settings = settings.notifications
    widget_settings = settings.widget

    activity_log = AuditLogger(history_size=settings.app.activity_history_size)

    app_storage: KeyValueStore
    widget_storage: KeyValueStore
    if use_files:
        app_storage = FileKeyValueStore(storage_settings.app_dir)
        widget_storage = FileKeyValueStore(storage_settings.widget_dir)
    else:
        app_storage = InMemoryKeyValueStore()
        widget_storage = InMemoryKeyValueStore()

    notifications = notifications or InMemoryNotificationScheduler()

    widget_provider = WidgetTimelineProvider(
        widget_storage,
        key=storage_settings.widget_transactions_key,
        refresh_minutes=widget_settings.timeline_refresh_minutes,
        clock=clock,
    )
    widget_host = TimelineWidgetHost(widget_provider)
    widget_notifier = RedundantRefreshNotifier(
        widget_host,
        delays=widget_settings.refresh_delays_list,
        background=widget_settings.background_refresh,
        activity_log=activity_log,
    )

    reminder_alerts = ReminderAlertScheduler(
        notifications,
        settings=notification_settings,
        activity_log=activity_log,
        clock=clock,
    )
    notifications.request_permission()
    reminder_alerts.register_categories()

    store = LedgerStore(
        storage=app_storage,
        notifications=notifications,
        widget_storage=widget_storage,
        widget_notifier=widget_notifier,
        reminder_alerts=reminder_alerts,
        activity_log=activity_log,
        storage_settings=storage_settings,
        notification_settings=notification_settings,
        recent_limit=settings.app.recent_transactions_limit,
        clock=clock,
    )
    store.load()

    return AppComponents(
        store=store,
        reminder_alerts=reminder_alerts,
        actions=NotificationActionHandler(store),
        notifications=notifications,
        widget_host=widget_host,
        widget_provider=widget_provider,
        validator=EntryValidator(),
        activity_log=activity_log,
    )
