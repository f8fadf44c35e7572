"""Home-screen widget services."""

from walletlens.services.widget.refresher import (
    RedundantRefreshNotifier,
    WidgetRefreshSignal,
)
from walletlens.services.widget.timeline import (
    QuickBalanceEntry,
    Timeline,
    TimelineWidgetHost,
    WidgetTimelineProvider,
    percentage_change,
)

__all__ = [
    "QuickBalanceEntry",
    "RedundantRefreshNotifier",
    "Timeline",
    "TimelineWidgetHost",
    "WidgetRefreshSignal",
    "WidgetTimelineProvider",
    "percentage_change",
]
