"""
Notification Models for WalletLens

Alerts are fire-and-forget requests handed to a notification scheduler.
They are not durable records: nothing in the ledger stores them.
"""

from datetime import datetime
from enum import Enum
from typing import Optional

from pydantic import BaseModel, Field


class NotificationCategory(str, Enum):
    """Categories an alert can belong to. Each carries its own actions."""
    BILL_REMINDER = "BILL_REMINDER"
    BUDGET_WARNING = "BUDGET_WARNING"


class NotificationAction(str, Enum):
    """Actions the user can take from an alert."""
    # Bill reminder actions
    MARK_PAID = "MARK_PAID"
    REMIND_LATER = "REMIND_LATER"

    # Budget warning actions
    VIEW_DETAILS = "VIEW_DETAILS"
    DISMISS = "DISMISS"


class ActionDefinition(BaseModel):
    """An action button offered on alerts of a category."""

    identifier: NotificationAction
    title: str
    opens_app: bool = True


class CategoryDefinition(BaseModel):
    """A notification category and the actions it offers."""

    identifier: NotificationCategory
    actions: list[ActionDefinition] = Field(default_factory=list)


DEFAULT_CATEGORIES: list[CategoryDefinition] = [
    CategoryDefinition(
        identifier=NotificationCategory.BILL_REMINDER,
        actions=[
            ActionDefinition(identifier=NotificationAction.MARK_PAID, title="Mark as Paid"),
            ActionDefinition(identifier=NotificationAction.REMIND_LATER, title="Remind Later"),
        ],
    ),
    CategoryDefinition(
        identifier=NotificationCategory.BUDGET_WARNING,
        actions=[
            ActionDefinition(identifier=NotificationAction.VIEW_DETAILS, title="View Details"),
            ActionDefinition(
                identifier=NotificationAction.DISMISS,
                title="Dismiss",
                opens_app=False,
            ),
        ],
    ),
]


class AlertRequest(BaseModel):
    """
    A one-shot local alert.

    Scheduling a request whose identifier is already pending replaces it.
    """

    identifier: str = Field(
        ...,
        min_length=1,
        description="Key used to replace or cancel the alert"
    )
    fire_at: datetime = Field(
        ...,
        description="When the alert should be delivered"
    )
    title: str
    body: str
    category: Optional[NotificationCategory] = None
    critical: bool = Field(
        default=False,
        description="Use the critical alert sound"
    )


class ThresholdLevel(str, Enum):
    """Budget threshold severity."""
    WARNING = "warning"
    CRITICAL = "critical"


class ThresholdSignal(BaseModel):
    """
    Result of a budget threshold evaluation.

    `percentage` is the truncated percentage of the budget used.
    `over_amount` is how many percentage points the budget is exceeded by
    (CRITICAL only, zero otherwise).
    """

    level: ThresholdLevel
    percentage: int = Field(ge=0)
    over_amount: int = Field(default=0, ge=0)

    @property
    def is_critical(self) -> bool:
        return self.level == ThresholdLevel.CRITICAL
