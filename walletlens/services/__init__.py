"""Services package."""

from walletlens.services.notifications import (
    InMemoryNotificationScheduler,
    NotificationError,
    NotificationScheduler,
)
from walletlens.services.storage import (
    EncodingError,
    FileKeyValueStore,
    InMemoryKeyValueStore,
    KeyValueStore,
    LedgerCodec,
    StorageError,
)
from walletlens.services.widget import (
    QuickBalanceEntry,
    RedundantRefreshNotifier,
    TimelineWidgetHost,
    WidgetRefreshSignal,
    WidgetTimelineProvider,
)

__all__ = [
    # Notification services
    "InMemoryNotificationScheduler",
    "NotificationError",
    "NotificationScheduler",
    # Storage services
    "EncodingError",
    "FileKeyValueStore",
    "InMemoryKeyValueStore",
    "KeyValueStore",
    "LedgerCodec",
    "StorageError",
    # Widget services
    "QuickBalanceEntry",
    "RedundantRefreshNotifier",
    "TimelineWidgetHost",
    "WidgetRefreshSignal",
    "WidgetTimelineProvider",
]
