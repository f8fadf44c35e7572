"""
Shared fixtures.

Every ledger in the tests runs against in-memory storage, an in-memory
alert scheduler and a fixed clock. No test touches the filesystem
except through pytest's tmp_path.
"""

from datetime import datetime, timedelta
from decimal import Decimal

import pytest

from walletlens.audit import AuditLogger
from walletlens.ledger import LedgerStore
from walletlens.models.ledger import Transaction, TransactionType
from walletlens.services.notifications import InMemoryNotificationScheduler
from walletlens.services.storage import InMemoryKeyValueStore
from walletlens.services.widget import (
    RedundantRefreshNotifier,
    TimelineWidgetHost,
    WidgetTimelineProvider,
)


NOW = datetime(2025, 3, 15, 8, 0, 0)


class FakeClock:
    """A clock that only moves when told to."""

    def __init__(self, now: datetime = NOW):
        self.now = now

    def __call__(self) -> datetime:
        return self.now

    def advance(self, **kwargs) -> None:
        self.now = self.now + timedelta(**kwargs)


def make_transaction(amount, category, kind, date=NOW, description=""):
    return Transaction(
        amount=Decimal(str(amount)),
        category=category,
        type=kind,
        date=date,
        description=description,
    )


def income(amount, category="Salary", date=NOW):
    return make_transaction(amount, category, TransactionType.INCOME, date)


def expense(amount, category="Food & Dining", date=NOW):
    return make_transaction(amount, category, TransactionType.EXPENSE, date)


@pytest.fixture
def clock() -> FakeClock:
    return FakeClock()


@pytest.fixture
def activity_log() -> AuditLogger:
    return AuditLogger(history_size=1000)


@pytest.fixture
def app_storage() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def widget_storage() -> InMemoryKeyValueStore:
    return InMemoryKeyValueStore()


@pytest.fixture
def scheduler() -> InMemoryNotificationScheduler:
    return InMemoryNotificationScheduler()


@pytest.fixture
def widget_host(widget_storage, clock) -> TimelineWidgetHost:
    return TimelineWidgetHost(WidgetTimelineProvider(widget_storage, clock=clock))


@pytest.fixture
def sleeps() -> list:
    return []


@pytest.fixture
def widget_notifier(widget_host, activity_log, sleeps) -> RedundantRefreshNotifier:
    return RedundantRefreshNotifier(
        widget_host,
        delays=(1.0, 3.0),
        background=False,
        activity_log=activity_log,
        sleep=sleeps.append,
    )


@pytest.fixture
def store(
    app_storage,
    widget_storage,
    scheduler,
    widget_notifier,
    activity_log,
    clock,
) -> LedgerStore:
    ledger = LedgerStore(
        storage=app_storage,
        notifications=scheduler,
        widget_storage=widget_storage,
        widget_notifier=widget_notifier,
        activity_log=activity_log,
        clock=clock,
    )
    ledger.load()
    return ledger
