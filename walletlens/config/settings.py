"""
Configuration Management for WalletLens

Uses pydantic-settings for type-safe configuration from environment variables.

DESIGN DECISION: All configuration is centralized here.
Storage locations, alert timing and widget refresh behaviour are all
tunable from the environment (or a .env file) without touching code.
"""

from functools import lru_cache
from pathlib import Path

from pydantic import Field, ValidationInfo, field_validator
from pydantic_settings import BaseSettings, SettingsConfigDict


class StorageSettings(BaseSettings):
    """Key-value persistence configuration."""

    model_config = SettingsConfigDict(
        env_prefix="WALLETLENS_STORAGE_",
        extra="ignore"
    )

    data_dir: Path = Field(
        default=Path.home() / ".walletlens",
        description="Root directory for file-backed key-value namespaces"
    )
    app_namespace: str = Field(
        default="walletlens",
        description="Namespace holding the app's own keys"
    )
    widget_namespace: str = Field(
        default="group.com.walletlens.widget",
        description="Shared namespace read by the widget"
    )

    # Key names within the namespaces
    transactions_key: str = Field(default="transactions")
    reminders_key: str = Field(default="reminders")
    budget_key: str = Field(default="monthlyBudget")
    widget_transactions_key: str = Field(default="widget_transactions")

    @property
    def app_dir(self) -> Path:
        return self.data_dir / self.app_namespace

    @property
    def widget_dir(self) -> Path:
        return self.data_dir / self.widget_namespace


class NotificationSettings(BaseSettings):
    """Bill reminder and budget alert configuration."""

    model_config = SettingsConfigDict(
        env_prefix="WALLETLENS_NOTIFY_",
        extra="ignore"
    )

    reminder_hour: int = Field(
        default=9,
        ge=0,
        le=23,
        description="Local hour at which a bill reminder fires on its due date"
    )
    reminder_minute: int = Field(
        default=0,
        ge=0,
        le=59,
    )
    warning_threshold: float = Field(
        default=80.0,
        gt=0,
        description="Budget percentage that triggers a warning"
    )
    critical_threshold: float = Field(
        default=100.0,
        gt=0,
        description="Budget percentage that triggers an exceeded alert"
    )
    budget_alert_delay_seconds: int = Field(
        default=1,
        ge=0,
        description="Delay before a budget alert fires"
    )
    snooze_days: int = Field(
        default=1,
        ge=1,
        description="How far 'Remind Later' pushes a bill reminder"
    )
    snooze_preserves_identity: bool = Field(
        default=False,
        description=(
            "Reschedule the stored reminder in place instead of alerting "
            "for a detached copy"
        )
    )
    currency_symbol: str = Field(default="$")

    @field_validator('critical_threshold')
    @classmethod
    def validate_critical_above_warning(cls, v: float, info: ValidationInfo) -> float:
        """The exceeded alert must sit at or above the warning level."""
        warning = info.data.get('warning_threshold')
        if warning is not None and v < warning:
            raise ValueError(
                f"critical_threshold ({v}) cannot be below warning_threshold ({warning})"
            )
        return v


class WidgetSettings(BaseSettings):
    """Home-screen widget configuration."""

    model_config = SettingsConfigDict(
        env_prefix="WALLETLENS_WIDGET_",
        extra="ignore"
    )

    refresh_delays: str = Field(
        default="1,3",
        description="Comma-separated seconds after a save at which the refresh is repeated"
    )
    timeline_refresh_minutes: int = Field(
        default=2,
        ge=1,
        description="How often the widget timeline asks to be rebuilt"
    )
    background_refresh: bool = Field(
        default=True,
        description="Deliver redundant refresh signals on a background thread"
    )

    @property
    def refresh_delays_list(self) -> list[float]:
        """Get refresh delays as a sorted list of seconds."""
        delays = [
            float(part.strip())
            for part in self.refresh_delays.split(",")
            if part.strip()
        ]
        return sorted(delay for delay in delays if delay >= 0)


class AppSettings(BaseSettings):
    """
    Main application settings.

    Loads configuration from environment variables and .env file.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    app_environment: str = Field(
        default="development",
        description="Application environment"
    )
    debug_mode: bool = Field(
        default=False,
        description="Enable debug mode"
    )
    recent_transactions_limit: int = Field(
        default=4,
        ge=1,
        description="How many transactions the recent activity list shows"
    )
    activity_history_size: int = Field(
        default=500,
        ge=0,
        description="How many activity events are kept in memory"
    )


class Settings(BaseSettings):
    """
    Root settings container.

    Aggregates all sub-settings for easy access.
    """

    model_config = SettingsConfigDict(
        env_file=".env",
        env_file_encoding="utf-8",
        extra="ignore"
    )

    @property
    def storage(self) -> StorageSettings:
        return StorageSettings()

    @property
    def notifications(self) -> NotificationSettings:
        return NotificationSettings()

    @property
    def widget(self) -> WidgetSettings:
        return WidgetSettings()

    @property
    def app(self) -> AppSettings:
        return AppSettings()


@lru_cache()
def get_settings() -> Settings:
    """
    Get application settings (cached).

    Uses LRU cache to ensure settings are only loaded once.
    Call get_settings.cache_clear() to reload if needed.
    """
    return Settings()


def validate_all_settings() -> dict[str, bool]:
    """
    Validate all settings are properly configured.

    Returns a dict of {setting_name: is_valid}, with an
    additional "<name>_error" entry for each failure.
    """
    results = {}
    settings = get_settings()

    for name in ("storage", "notifications", "widget", "app"):
        try:
            getattr(settings, name)
            results[name] = True
        except Exception as e:
            results[name] = False
            results[f"{name}_error"] = str(e)

    return results
