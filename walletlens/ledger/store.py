"""
Ledger Store

DESIGN DECISION: The store is the single authoritative holder of
transactions, reminders and the monthly budget. Every read and write
goes through it, and after every mutating call returns the persisted
state and the in-memory state agree.

Flow for a transaction mutation:
1. Mutate the in-memory collection
2. Save the full collection (app namespace)
3. Save the widget snapshot (shared namespace) and signal the widget
4. Recompute all aggregates
5. Overwrite the budget's spent amount, save it, evaluate thresholds

TRADEOFFS:
- No atomicity across keys or namespaces. A crash between writes leaves
  them inconsistent; the budget's spent amount is re-derived from
  transactions at the next load.
- Persistence and alert failures are logged and swallowed. The worst
  outcome of any failure is stale or default data.

Threading: all mutations are expected on one thread. There is no locking.
"""

from datetime import datetime
from decimal import Decimal
from typing import Callable, Optional
from uuid import UUID

from walletlens.audit import AuditLogger
from walletlens.config import NotificationSettings, StorageSettings
from walletlens.ledger import aggregation
from walletlens.ledger.reminders import ReminderAlertScheduler
from walletlens.ledger.thresholds import build_budget_alert, evaluate_budget_threshold
from walletlens.models.audit import AuditEventBuilder, AuditEventType
from walletlens.models.ledger import (
    CategoryTotal,
    LedgerSummary,
    MonthlyBudget,
    Reminder,
    Transaction,
)
from walletlens.models.notifications import ThresholdSignal
from walletlens.services.notifications.interface import (
    NotificationError,
    NotificationScheduler,
)
from walletlens.services.storage.codec import LedgerCodec
from walletlens.services.storage.interface import KeyValueStore, StorageError
from walletlens.services.widget.refresher import RedundantRefreshNotifier


class LedgerStore:
    """
    In-memory ledger backed by a key-value store.

    Published state (read-only from the outside):
        transactions, reminders, monthly_budget,
        total_income, total_expense, balance, category_totals
    """

    def __init__(
        self,
        storage: KeyValueStore,
        notifications: NotificationScheduler,
        widget_storage: Optional[KeyValueStore] = None,
        widget_notifier: Optional[RedundantRefreshNotifier] = None,
        reminder_alerts: Optional[ReminderAlertScheduler] = None,
        activity_log: Optional[AuditLogger] = None,
        storage_settings: Optional[StorageSettings] = None,
        notification_settings: Optional[NotificationSettings] = None,
        recent_limit: int = 4,
        clock: Callable[[], datetime] = datetime.now,
    ):
        """
        Initialize the store. Call load() to read persisted state.

        Args:
            storage: App namespace for transactions, reminders and budget
            notifications: Scheduler for bill and budget alerts
            widget_storage: Shared namespace read by the widget.
                            If None, no widget snapshot is written.
            widget_notifier: Signals the widget host after each save
            reminder_alerts: Bill alert scheduling; built from
                             `notifications` if not given
            activity_log: Where events and swallowed failures are logged
            recent_limit: Default length of the recent activity list
            clock: Source of "now"
        """
        self._storage = storage
        self._notifications = notifications
        self._widget_storage = widget_storage
        self._widget_notifier = widget_notifier
        self._activity_log = activity_log or AuditLogger()
        self._keys = storage_settings or StorageSettings()
        self._notify_settings = notification_settings or NotificationSettings()
        self._recent_limit = recent_limit
        self._clock = clock
        self._reminder_alerts = reminder_alerts or ReminderAlertScheduler(
            notifications,
            settings=self._notify_settings,
            activity_log=self._activity_log,
            clock=clock,
        )

        self._transactions: list[Transaction] = []
        self._reminders: list[Reminder] = []
        self._monthly_budget: Optional[MonthlyBudget] = None
        self._summary = LedgerSummary(computed_at=clock())

    # =========================================================================
    # PUBLISHED STATE
    # =========================================================================

    @property
    def transactions(self) -> list[Transaction]:
        return list(self._transactions)

    @property
    def reminders(self) -> list[Reminder]:
        return list(self._reminders)

    @property
    def monthly_budget(self) -> Optional[MonthlyBudget]:
        return self._monthly_budget

    @property
    def total_income(self) -> Decimal:
        return self._summary.total_income

    @property
    def total_expense(self) -> Decimal:
        return self._summary.total_expense

    @property
    def balance(self) -> Decimal:
        return self._summary.balance

    @property
    def category_totals(self) -> list[CategoryTotal]:
        return list(self._summary.category_totals)

    @property
    def reminder_alerts(self) -> ReminderAlertScheduler:
        return self._reminder_alerts

    def summary(self) -> LedgerSummary:
        return self._summary.model_copy(deep=True)

    def get_reminder(self, reminder_id: UUID) -> Optional[Reminder]:
        for reminder in self._reminders:
            if reminder.id == reminder_id:
                return reminder
        return None

    def recent_transactions(self, limit: Optional[int] = None) -> list[Transaction]:
        if limit is None:
            limit = self._recent_limit
        return aggregation.recent_transactions(self._transactions, limit)

    def transactions_for_month(self, month: datetime) -> list[Transaction]:
        return aggregation.transactions_for_month(self._transactions, month)

    # =========================================================================
    # LOAD
    # =========================================================================

    def load(self) -> None:
        """
        Read all three collections.

        Each key is decoded independently: a failure on one resets only
        that collection.
        """
        self._transactions = self._load_key(
            self._keys.transactions_key, LedgerCodec.decode_transactions, []
        )
        self._reminders = self._load_key(
            self._keys.reminders_key, LedgerCodec.decode_reminders, []
        )
        self._monthly_budget = self._load_key(
            self._keys.budget_key, LedgerCodec.decode_budget, None
        )

        self.recalculate()
        if self._monthly_budget is not None:
            # Persisted spent may be stale; transactions are authoritative
            self._monthly_budget.spent = self.total_expense

        self._activity_log.log(
            AuditEventBuilder.ledger_loaded(
                len(self._transactions),
                len(self._reminders),
                self._monthly_budget is not None,
            )
        )

    def _load_key(self, key: str, decode: Callable, default):
        try:
            data = self._storage.get(key)
            if data is None:
                return default
            return decode(data)
        except StorageError as e:
            self._activity_log.log(AuditEventBuilder.persistence_failed("load", key, str(e)))
            return default

    # =========================================================================
    # SAVE
    # =========================================================================

    def _save_key(self, store: KeyValueStore, key: str, encode: Callable, value) -> bool:
        try:
            store.set(key, encode(value))
            return True
        except StorageError as e:
            self._activity_log.log(AuditEventBuilder.persistence_failed("save", key, str(e)))
            return False

    def _save_transactions(self) -> None:
        self._save_key(
            self._storage,
            self._keys.transactions_key,
            LedgerCodec.encode_transactions,
            self._transactions,
        )
        self._save_widget_snapshot()

    def _save_widget_snapshot(self) -> None:
        if self._widget_storage is None:
            return
        saved = self._save_key(
            self._widget_storage,
            self._keys.widget_transactions_key,
            LedgerCodec.encode_widget_transactions,
            self._transactions,
        )
        if saved and self._widget_notifier is not None:
            self._widget_notifier.notify()

    def _save_reminders(self) -> None:
        self._save_key(
            self._storage,
            self._keys.reminders_key,
            LedgerCodec.encode_reminders,
            self._reminders,
        )

    def _save_budget(self) -> None:
        if self._monthly_budget is None:
            return
        self._save_key(
            self._storage,
            self._keys.budget_key,
            LedgerCodec.encode_budget,
            self._monthly_budget,
        )

    # =========================================================================
    # AGGREGATES
    # =========================================================================

    def recalculate(self) -> LedgerSummary:
        """Recompute every aggregate from the full transaction list."""
        self._summary = aggregation.summarize(self._transactions, self._clock())
        return self._summary

    # =========================================================================
    # TRANSACTIONS
    # =========================================================================

    def add_transaction(self, transaction: Transaction) -> None:
        self._transactions.append(transaction)
        self._activity_log.log(
            AuditEventBuilder.transaction_added(
                transaction.id,
                transaction.category,
                str(transaction.amount),
                transaction.type.value,
            )
        )
        self._after_transactions_changed()

    def delete_transaction(self, transaction_id: UUID) -> bool:
        """
        Remove a transaction by id.

        Returns:
            True if a transaction was removed
        """
        before = len(self._transactions)
        self._transactions = [t for t in self._transactions if t.id != transaction_id]
        removed = before - len(self._transactions)

        if removed:
            self._activity_log.log(AuditEventBuilder.transaction_deleted(transaction_id, removed))
        else:
            self._activity_log.log(
                AuditEventBuilder.entity_not_found("transaction", transaction_id, "delete")
            )
        self._after_transactions_changed()
        return removed > 0

    def _after_transactions_changed(self) -> None:
        self._save_transactions()
        self.recalculate()
        self.update_budget_spending()

    # =========================================================================
    # REMINDERS
    # =========================================================================

    def add_reminder(self, reminder: Reminder) -> None:
        self._reminders.append(reminder)
        self._save_reminders()
        self._activity_log.log(
            AuditEventBuilder.reminder_changed(
                AuditEventType.REMINDER_ADDED, reminder.id, reminder.title
            )
        )
        if not reminder.is_completed:
            self._reminder_alerts.schedule(reminder)

    def delete_reminder(self, reminder_id: UUID) -> bool:
        """Remove a reminder and cancel its pending alert."""
        existing = self.get_reminder(reminder_id)
        self._reminders = [r for r in self._reminders if r.id != reminder_id]

        self._save_reminders()
        self._reminder_alerts.cancel(reminder_id)
        if existing is None:
            self._activity_log.log(
                AuditEventBuilder.entity_not_found("reminder", reminder_id, "delete")
            )
            return False

        self._activity_log.log(
            AuditEventBuilder.reminder_changed(
                AuditEventType.REMINDER_DELETED, reminder_id, existing.title
            )
        )
        return True

    def update_reminder(self, reminder: Reminder) -> bool:
        """
        Replace the stored reminder with the same id.

        Returns:
            False (and changes nothing) if no reminder has that id
        """
        for index, existing in enumerate(self._reminders):
            if existing.id == reminder.id:
                break
        else:
            self._activity_log.log(
                AuditEventBuilder.entity_not_found("reminder", reminder.id, "update")
            )
            return False

        self._reminders[index] = reminder
        self._save_reminders()
        self._activity_log.log(
            AuditEventBuilder.reminder_changed(
                AuditEventType.REMINDER_UPDATED, reminder.id, reminder.title
            )
        )
        self._reminder_alerts.reschedule(reminder)
        return True

    def mark_reminder_completed(self, reminder_id: UUID) -> bool:
        """Mark a bill as paid and cancel its alert."""
        existing = self.get_reminder(reminder_id)
        if existing is None:
            self._activity_log.log(
                AuditEventBuilder.entity_not_found("reminder", reminder_id, "complete")
            )
            return False

        updated = self.update_reminder(existing.model_copy(update={"is_completed": True}))
        if updated:
            self._activity_log.log(
                AuditEventBuilder.reminder_changed(
                    AuditEventType.REMINDER_COMPLETED, existing.id, existing.title
                )
            )
        return updated

    def snooze_reminder(self, reminder_id: UUID) -> Optional[Reminder]:
        """
        "Remind later" for a stored reminder.

        Returns:
            The reminder the new alert belongs to, or None if not found.
            Unless identity is preserved this is a detached copy that is
            not stored.
        """
        existing = self.get_reminder(reminder_id)
        if existing is None:
            self._activity_log.log(
                AuditEventBuilder.entity_not_found("reminder", reminder_id, "snooze")
            )
            return None

        if not self._reminder_alerts.preserves_identity:
            snoozed, _ = self._reminder_alerts.snooze(existing)
            return snoozed

        snoozed = self._reminder_alerts.snoozed_copy(existing)
        self.update_reminder(snoozed)
        self._activity_log.log(
            AuditEventBuilder.reminder_changed(
                AuditEventType.REMINDER_SNOOZED, snoozed.id, snoozed.title
            )
        )
        return snoozed

    # =========================================================================
    # BUDGET
    # =========================================================================

    def set_monthly_budget(self, limit: Decimal) -> MonthlyBudget:
        """Replace the budget; spent starts at this month's expense total."""
        self._monthly_budget = MonthlyBudget(
            total_limit=limit,
            month=self._clock(),
            spent=self.total_expense,
        )
        self._save_budget()
        self._activity_log.log(
            AuditEventBuilder.budget_set(
                self._monthly_budget.id,
                str(self._monthly_budget.total_limit),
                str(self._monthly_budget.spent),
            )
        )
        return self._monthly_budget

    def update_budget_spending(self) -> Optional[ThresholdSignal]:
        """
        Sync the budget's spent amount and evaluate thresholds.

        Returns:
            The threshold signal that was dispatched, if any
        """
        budget = self._monthly_budget
        if budget is None:
            return None

        budget.spent = self.total_expense
        self._save_budget()
        self._activity_log.log(
            AuditEventBuilder.budget_spending_updated(
                budget.id, str(budget.spent), budget.percentage_used
            )
        )

        signal = evaluate_budget_threshold(
            budget.spent,
            budget.total_limit,
            warning_threshold=self._notify_settings.warning_threshold,
            critical_threshold=self._notify_settings.critical_threshold,
        )
        if signal is not None:
            self._dispatch_budget_alert(signal)
        return signal

    def _dispatch_budget_alert(self, signal: ThresholdSignal) -> None:
        self._activity_log.log(
            AuditEventBuilder.threshold_crossed(
                signal.level.value, signal.percentage, signal.over_amount
            )
        )
        request = build_budget_alert(
            signal,
            self._clock(),
            delay_seconds=self._notify_settings.budget_alert_delay_seconds,
        )
        try:
            self._notifications.schedule_one_shot(request)
        except NotificationError as e:
            self._activity_log.log(
                AuditEventBuilder.notification_failed(request.identifier, str(e))
            )
            return
        self._activity_log.log(
            AuditEventBuilder.alert_scheduled(request.identifier, request.fire_at)
        )
