"""Notification scheduling services."""

from walletlens.services.notifications.interface import (
    NotificationError,
    NotificationScheduler,
)
from walletlens.services.notifications.memory import InMemoryNotificationScheduler

__all__ = [
    "InMemoryNotificationScheduler",
    "NotificationError",
    "NotificationScheduler",
]
