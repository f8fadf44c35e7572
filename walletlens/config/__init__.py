"""Configuration package."""

from walletlens.config.settings import (
    AppSettings,
    NotificationSettings,
    Settings,
    StorageSettings,
    WidgetSettings,
    get_settings,
    validate_all_settings,
)

__all__ = [
    "AppSettings",
    "NotificationSettings",
    "Settings",
    "StorageSettings",
    "WidgetSettings",
    "get_settings",
    "validate_all_settings",
]
