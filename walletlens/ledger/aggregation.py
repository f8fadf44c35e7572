"""
Aggregation Engine

DESIGN DECISION: Aggregation is DETERMINISTIC and stateless.
Every function takes the full transaction collection and a reference
moment, and recomputes from scratch. There is no incremental update and
no cache: a personal ledger is small enough that a full pass per
mutation is cheap.

"Current month" always means the calendar month containing `now`,
never the month of any stored record.

The functions accept anything with `amount`, `type` and `date`
attributes, so the widget's denormalized snapshot aggregates the same
way as full transactions.
"""

from datetime import datetime
from decimal import Decimal
from typing import Iterable, Protocol, Sequence

from walletlens.models.ledger import (
    ZERO,
    CategoryTotal,
    LedgerSummary,
    Transaction,
    TransactionType,
)


class Entry(Protocol):
    amount: Decimal
    type: TransactionType
    date: datetime


# =============================================================================
# MONTH HELPERS
# =============================================================================

def is_same_month(a: datetime, b: datetime) -> bool:
    """True when both moments fall in the same calendar month."""
    return (a.year, a.month) == (b.year, b.month)


def month_start(moment: datetime) -> datetime:
    return moment.replace(day=1, hour=0, minute=0, second=0, microsecond=0)


def previous_month(moment: datetime) -> datetime:
    """Start of the calendar month before the one containing moment."""
    start = month_start(moment)
    if start.month == 1:
        return start.replace(year=start.year - 1, month=12)
    return start.replace(month=start.month - 1)


# =============================================================================
# TOTALS
# =============================================================================

def _sum_for_month(
    entries: Iterable[Entry],
    entry_type: TransactionType,
    month: datetime,
) -> Decimal:
    return sum(
        (e.amount for e in entries if e.type == entry_type and is_same_month(e.date, month)),
        ZERO,
    )


def total_income(transactions: Iterable[Entry], now: datetime) -> Decimal:
    """Sum of income in the month containing now."""
    return _sum_for_month(transactions, TransactionType.INCOME, now)


def total_expense(transactions: Iterable[Entry], now: datetime) -> Decimal:
    """Sum of expenses in the month containing now."""
    return _sum_for_month(transactions, TransactionType.EXPENSE, now)


def balance(transactions: Sequence[Entry], now: datetime) -> Decimal:
    return total_income(transactions, now) - total_expense(transactions, now)


def monthly_totals(
    transactions: Sequence[Entry],
    month: datetime,
) -> tuple[Decimal, Decimal, Decimal]:
    """
    Income, expense and balance for an arbitrary month.

    Returns:
        (income, expense, balance)
    """
    income = total_income(transactions, month)
    expense = total_expense(transactions, month)
    return income, expense, income - expense


def category_totals(
    transactions: Iterable[Transaction],
    now: datetime,
) -> list[CategoryTotal]:
    """
    Current-month expenses grouped by category, largest first.

    Groups keep first-seen order, and the sort is stable, so ties stay
    in the order their categories first appeared.
    """
    grouped: dict[str, Decimal] = {}
    for t in transactions:
        if t.type != TransactionType.EXPENSE or not is_same_month(t.date, now):
            continue
        grouped[t.category] = grouped.get(t.category, ZERO) + t.amount

    totals = [CategoryTotal(category=c, total=total) for c, total in grouped.items()]
    totals.sort(key=lambda ct: ct.total, reverse=True)
    return totals


# =============================================================================
# LISTINGS
# =============================================================================

def recent_transactions(
    transactions: Iterable[Transaction],
    limit: int = 4,
) -> list[Transaction]:
    """Newest transactions from any month."""
    if limit <= 0:
        return []
    return sorted(transactions, key=lambda t: t.date, reverse=True)[:limit]


def transactions_for_month(
    transactions: Iterable[Transaction],
    target_month: datetime,
) -> list[Transaction]:
    """Transactions in the month containing target_month, newest first."""
    return sorted(
        (t for t in transactions if is_same_month(t.date, target_month)),
        key=lambda t: t.date,
        reverse=True,
    )


def summarize(transactions: Sequence[Transaction], now: datetime) -> LedgerSummary:
    """All current-month aggregates in one pass over the API above."""
    income, expense, net = monthly_totals(transactions, now)
    return LedgerSummary(
        computed_at=now,
        total_income=income,
        total_expense=expense,
        balance=net,
        category_totals=category_totals(transactions, now),
    )
