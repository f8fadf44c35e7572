"""
Widget Timeline Provider

Reads the denormalized snapshot from the shared namespace and builds
the "quick balance" entry: this month's income, expense and balance,
plus the balance change against the previous month.

The provider never writes. Missing or undecodable data gives an
all-zero entry.
"""

from datetime import datetime, timedelta
from decimal import Decimal
from typing import Callable, Optional

import structlog
from pydantic import BaseModel

from walletlens.ledger.aggregation import monthly_totals, previous_month
from walletlens.models.ledger import WidgetTransaction
from walletlens.services.storage import (
    EncodingError,
    KeyValueStore,
    LedgerCodec,
    StorageError,
)
from walletlens.services.widget.refresher import WidgetRefreshSignal


class QuickBalanceEntry(BaseModel):
    """One rendered state of the widget."""

    date: datetime
    balance: Decimal
    income: Decimal
    expense: Decimal
    percentage_change: float

    @property
    def is_positive(self) -> bool:
        return self.balance >= 0

    @property
    def trend_up(self) -> bool:
        return self.percentage_change >= 0


class Timeline(BaseModel):
    """Entries to show and when to ask for a new timeline."""

    entries: list[QuickBalanceEntry]
    next_update: datetime


def percentage_change(current: Decimal, previous: Decimal) -> float:
    """Relative change against the previous value; 0 when previous is 0."""
    if previous == 0:
        return 0.0
    return float((current - previous) / abs(previous) * 100)


class WidgetTimelineProvider:
    """Builds quick balance entries from the shared snapshot."""

    def __init__(
        self,
        shared_storage: KeyValueStore,
        key: str = "widget_transactions",
        refresh_minutes: int = 2,
        clock: Callable[[], datetime] = datetime.now,
    ):
        self._storage = shared_storage
        self._key = key
        self._refresh_minutes = refresh_minutes
        self._clock = clock
        self._logger = structlog.get_logger("walletlens.widget")

    def placeholder(self) -> QuickBalanceEntry:
        """Fixed preview entry shown before real data is available."""
        return QuickBalanceEntry(
            date=self._clock(),
            balance=Decimal("1250.0"),
            income=Decimal("3000.0"),
            expense=Decimal("1750.0"),
            percentage_change=5.2,
        )

    def load_snapshot(self) -> list[WidgetTransaction]:
        try:
            data = self._storage.get(self._key)
            if data is None:
                return []
            return LedgerCodec.decode_widget_transactions(data)
        except (StorageError, EncodingError) as e:
            self._logger.warning("widget_snapshot_unreadable", key=self._key, error=str(e))
            return []

    def current_entry(self) -> QuickBalanceEntry:
        now = self._clock()
        snapshot = self.load_snapshot()

        income, expense, current_balance = monthly_totals(snapshot, now)
        _, _, previous_balance = monthly_totals(snapshot, previous_month(now))

        return QuickBalanceEntry(
            date=now,
            balance=current_balance,
            income=income,
            expense=expense,
            percentage_change=percentage_change(current_balance, previous_balance),
        )

    def timeline(self) -> Timeline:
        entry = self.current_entry()
        return Timeline(
            entries=[entry],
            next_update=entry.date + timedelta(minutes=self._refresh_minutes),
        )


class TimelineWidgetHost(WidgetRefreshSignal):
    """
    In-process widget host.

    Rebuilds the timeline on every reload signal and keeps the latest one.
    """

    def __init__(self, provider: WidgetTimelineProvider):
        self._provider = provider
        self._latest: Optional[Timeline] = None
        self._reloads = 0

    @property
    def reloads(self) -> int:
        return self._reloads

    @property
    def latest(self) -> Optional[Timeline]:
        return self._latest

    def reload_all_timelines(self) -> None:
        self._reloads += 1
        self._latest = self._provider.timeline()

    def needs_refresh(self, now: datetime) -> bool:
        """True when no timeline exists yet or the current one has expired."""
        return self._latest is None or now >= self._latest.next_update
