"""
Tests for the widget timeline provider and the redundant refresh notifier.
"""

import threading
from datetime import datetime, timedelta
from decimal import Decimal

import pytest

from conftest import NOW, expense, income
from walletlens.models.audit import AuditEventType
from walletlens.services.storage import InMemoryKeyValueStore, LedgerCodec
from walletlens.services.widget import (
    RedundantRefreshNotifier,
    WidgetRefreshSignal,
    WidgetTimelineProvider,
)
from walletlens.services.widget.timeline import percentage_change


class CountingSignal(WidgetRefreshSignal):

    def __init__(self, fail: bool = False):
        self.calls = 0
        self.fail = fail

    def reload_all_timelines(self) -> None:
        self.calls += 1
        if self.fail:
            raise RuntimeError("widget host unavailable")


@pytest.fixture
def provider(widget_storage, clock) -> WidgetTimelineProvider:
    return WidgetTimelineProvider(widget_storage, clock=clock)


def write_snapshot(storage, transactions):
    storage.set("widget_transactions", LedgerCodec.encode_widget_transactions(transactions))


class TestPercentageChange:

    def test_increase(self):
        assert percentage_change(Decimal("1250"), Decimal("1000")) == pytest.approx(25.0)

    def test_decrease(self):
        assert percentage_change(Decimal("500"), Decimal("1000")) == pytest.approx(-50.0)

    def test_previous_zero(self):
        assert percentage_change(Decimal("1250"), Decimal("0")) == 0.0

    def test_previous_negative_uses_magnitude(self):
        assert percentage_change(Decimal("100"), Decimal("-100")) == pytest.approx(200.0)


class TestTimelineProvider:
    """Entries built from the shared snapshot."""

    def test_placeholder(self, provider):
        entry = provider.placeholder()
        assert entry.balance == Decimal("1250")
        assert entry.income == Decimal("3000")
        assert entry.expense == Decimal("1750")
        assert entry.percentage_change == pytest.approx(5.2)

    def test_missing_snapshot_gives_zeros(self, provider):
        entry = provider.current_entry()
        assert entry.balance == Decimal("0")
        assert entry.income == Decimal("0")
        assert entry.expense == Decimal("0")
        assert entry.percentage_change == 0.0

    def test_corrupt_snapshot_gives_zeros(self, provider, widget_storage):
        widget_storage.set("widget_transactions", b"{broken")
        entry = provider.current_entry()
        assert entry.balance == Decimal("0")

    def test_current_month_entry(self, provider, widget_storage):
        write_snapshot(widget_storage, [income(3000), expense(1750)])
        entry = provider.current_entry()
        assert entry.date == NOW
        assert entry.balance == Decimal("1250")
        assert entry.is_positive is True

    def test_change_against_previous_month(self, provider, widget_storage):
        february = datetime(2025, 2, 10)
        write_snapshot(widget_storage, [
            income(1000, date=february),
            income(1250),
        ])
        entry = provider.current_entry()
        assert entry.percentage_change == pytest.approx(25.0)
        assert entry.trend_up is True

    def test_timeline_asks_for_update(self, provider):
        timeline = provider.timeline()
        assert len(timeline.entries) == 1
        assert timeline.next_update == NOW + timedelta(minutes=2)

    def test_custom_key(self, clock):
        storage = InMemoryKeyValueStore()
        storage.set("shared", LedgerCodec.encode_widget_transactions([income(40)]))
        provider = WidgetTimelineProvider(storage, key="shared", clock=clock)
        assert provider.current_entry().income == Decimal("40")


class TestWidgetHost:

    def test_reload_builds_timeline(self, widget_host):
        assert widget_host.latest is None
        widget_host.reload_all_timelines()
        assert widget_host.reloads == 1
        assert widget_host.latest is not None

    def test_needs_refresh(self, widget_host):
        assert widget_host.needs_refresh(NOW) is True
        widget_host.reload_all_timelines()
        assert widget_host.needs_refresh(NOW + timedelta(minutes=1)) is False
        assert widget_host.needs_refresh(NOW + timedelta(minutes=2)) is True


class TestRedundantRefreshNotifier:
    """Fixed-count best-effort refresh signalling."""

    def test_three_signals_with_gaps(self, activity_log):
        signal = CountingSignal()
        sleeps = []
        notifier = RedundantRefreshNotifier(
            signal, background=False, activity_log=activity_log, sleep=sleeps.append
        )
        assert notifier.notify() is None
        assert signal.calls == 3
        assert sleeps == [1.0, 2.0]
        assert activity_log.count(AuditEventType.WIDGET_REFRESHED) == 3

    def test_custom_delays(self):
        signal = CountingSignal()
        sleeps = []
        notifier = RedundantRefreshNotifier(
            signal, delays=(5, 0.5, 2), background=False, sleep=sleeps.append
        )
        notifier.notify()
        assert notifier.attempts == 4
        assert signal.calls == 4
        assert sleeps == pytest.approx([0.5, 1.5, 3.0])

    def test_no_delays_signals_once(self):
        signal = CountingSignal()
        sleeps = []
        notifier = RedundantRefreshNotifier(
            signal, delays=(), background=False, sleep=sleeps.append
        )
        notifier.notify()
        assert signal.calls == 1
        assert sleeps == []

    def test_failures_are_logged_and_all_attempts_made(self, activity_log):
        signal = CountingSignal(fail=True)
        notifier = RedundantRefreshNotifier(
            signal, background=False, activity_log=activity_log, sleep=lambda _: None
        )
        notifier.notify()
        assert signal.calls == 3
        assert activity_log.count(AuditEventType.WIDGET_REFRESH_FAILED) == 3

    def test_background_delivery(self):
        signal = CountingSignal()
        notifier = RedundantRefreshNotifier(signal, sleep=lambda _: None)
        thread = notifier.notify()
        thread.join(timeout=5)
        assert thread.daemon is True
        assert signal.calls == 3


class TestRefreshCoalescing:
    """Saves made while a background refresh is running share its thread."""

    def test_burst_of_saves_runs_one_extra_pass(self):
        signal = CountingSignal()
        gate = threading.Event()
        notifier = RedundantRefreshNotifier(signal, sleep=lambda _: gate.wait(5))

        first = notifier.notify()
        followers = [notifier.notify() for _ in range(4)]
        gate.set()
        first.join(timeout=5)

        assert all(thread is first for thread in followers)
        assert not first.is_alive()
        assert signal.calls == 6

    def test_new_thread_after_previous_finished(self):
        signal = CountingSignal()
        notifier = RedundantRefreshNotifier(signal, sleep=lambda _: None)

        first = notifier.notify()
        first.join(timeout=5)
        second = notifier.notify()
        second.join(timeout=5)

        assert second is not first
        assert signal.calls == 6
