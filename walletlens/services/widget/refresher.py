"""
Widget Refresh Signalling

DESIGN DECISION: Delivery of "reload all timelines" to the widget host is
not guaranteed to be timely, so every save signals it several times:
once immediately, then again after each configured delay (1s and 3s by
default). This is a fixed-count, best-effort repeat with no backoff and
no cancellation. tenacity drives the repeats; every attempt is treated
as "retry" until the attempt budget runs out.
"""

import threading
import time
from abc import ABC, abstractmethod
from typing import Callable, Optional, Sequence

from tenacity import (
    RetryCallState,
    Retrying,
    retry_always,
    stop_after_attempt,
    wait_chain,
    wait_fixed,
)

from walletlens.audit import AuditLogger
from walletlens.models.audit import AuditEventBuilder


class WidgetRefreshSignal(ABC):
    """The widget host's "reload all timelines" entry point."""

    @abstractmethod
    def reload_all_timelines(self) -> None:
        pass


class RedundantRefreshNotifier:
    """
    Signals the widget host immediately and again after each delay.

    Args:
        signal: The widget host to signal
        delays: Seconds after the first signal at which to repeat it
        background: Deliver on a daemon thread so callers never wait.
                    Requests made while a delivery thread is running are
                    coalesced into one more full run after it finishes.
        sleep: Sleep function (injectable for tests)
    """

    def __init__(
        self,
        signal: WidgetRefreshSignal,
        delays: Sequence[float] = (1.0, 3.0),
        background: bool = True,
        activity_log: Optional[AuditLogger] = None,
        sleep: Callable[[float], None] = time.sleep,
    ):
        self._signal = signal
        self._delays = sorted(delays)
        self._background = background
        self._activity_log = activity_log or AuditLogger()
        self._sleep = sleep
        self._lock = threading.Lock()
        self._worker: Optional[threading.Thread] = None
        self._rerun = False

    @property
    def attempts(self) -> int:
        return len(self._delays) + 1

    def _steps(self) -> list[float]:
        """Gaps between consecutive signals."""
        steps = []
        previous = 0.0
        for delay in self._delays:
            steps.append(delay - previous)
            previous = delay
        return steps

    def _deliver(self, retry_state: Optional[RetryCallState] = None) -> bool:
        attempt = retry_state.attempt_number if retry_state else 1
        try:
            self._signal.reload_all_timelines()
        except Exception as e:
            self._activity_log.log(AuditEventBuilder.widget_refresh_failed(attempt, str(e)))
            return False
        self._activity_log.log(AuditEventBuilder.widget_refreshed(attempt))
        return True

    def _run(self) -> None:
        if not self._delays:
            self._deliver()
            return

        retrying = Retrying(
            stop=stop_after_attempt(self.attempts),
            wait=wait_chain(*[wait_fixed(step) for step in self._steps()]),
            retry=retry_always,
            retry_error_callback=lambda state: state.outcome.result(),
            sleep=self._sleep,
        )
        for attempt in retrying:
            with attempt:
                self._deliver(attempt.retry_state)

    def notify(self) -> Optional[threading.Thread]:
        """
        Send the redundant refresh signals.

        Returns:
            The delivery thread when running in the background, else None
        """
        if not self._background:
            self._run()
            return None

        with self._lock:
            if self._worker is not None:
                self._rerun = True
                return self._worker

            self._rerun = False
            self._worker = threading.Thread(
                target=self._run_coalesced,
                name="widget-refresh",
                daemon=True,
            )
            self._worker.start()
            return self._worker

    def _run_coalesced(self) -> None:
        while True:
            self._run()
            with self._lock:
                if not self._rerun:
                    self._worker = None
                    return
                self._rerun = False
