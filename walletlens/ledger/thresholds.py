"""
Budget Threshold Evaluator

Turns (current expense, monthly limit) into at most one signal:
- below the warning threshold: nothing
- warning <= percentage < critical: WARNING with the percentage used
- percentage >= critical: CRITICAL with the points over budget

Signals are not de-duplicated. Evaluating again at the same percentage
emits the same signal again.
"""

from datetime import datetime, timedelta
from decimal import Decimal
from typing import Optional, Union

from walletlens.models.notifications import (
    AlertRequest,
    NotificationCategory,
    ThresholdLevel,
    ThresholdSignal,
)


Number = Union[Decimal, float, int]


def budget_percentage(current_expense: Number, monthly_limit: Number) -> Optional[float]:
    """Percentage of the limit used, or None when there is no usable limit."""
    limit = Decimal(str(monthly_limit))
    if limit <= 0:
        return None
    return float(Decimal(str(current_expense)) / limit * 100)


def evaluate_budget_threshold(
    current_expense: Number,
    monthly_limit: Number,
    warning_threshold: float = 80.0,
    critical_threshold: float = 100.0,
) -> Optional[ThresholdSignal]:
    """
    Evaluate spending against the monthly limit.

    Args:
        current_expense: Expense total for the current month
        monthly_limit: The budget's limit; zero or less disables evaluation
        warning_threshold: Percentage at which a warning starts
        critical_threshold: Percentage at which the budget counts as exceeded

    Returns:
        The signal to emit, or None
    """
    percentage = budget_percentage(current_expense, monthly_limit)
    if percentage is None:
        return None

    used = int(percentage)
    if percentage >= critical_threshold:
        return ThresholdSignal(
            level=ThresholdLevel.CRITICAL,
            percentage=used,
            over_amount=max(0, used - int(critical_threshold)),
        )
    if percentage >= warning_threshold:
        return ThresholdSignal(level=ThresholdLevel.WARNING, percentage=used)
    return None


def build_budget_alert(
    signal: ThresholdSignal,
    now: datetime,
    delay_seconds: int = 1,
) -> AlertRequest:
    """Alert request for a threshold signal, firing shortly after now."""
    if signal.is_critical:
        title = "Budget Exceeded!"
        body = f"You've exceeded your monthly budget by {signal.over_amount}%"
    else:
        title = "Budget Warning"
        body = f"You've used {signal.percentage}% of your monthly budget"

    return AlertRequest(
        identifier=f"budget_warning_{now.timestamp()}",
        fire_at=now + timedelta(seconds=delay_seconds),
        title=title,
        body=body,
        category=NotificationCategory.BUDGET_WARNING,
        critical=signal.is_critical,
    )
