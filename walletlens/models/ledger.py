"""
Core Ledger Models for WalletLens

These models define the records held by the ledger:
1. Transactions (income and expenses)
2. Bill reminders
3. The monthly budget (plus optional per-category budgets)

DESIGN DECISION: Records normalize rather than reject.
Amounts are clamped to zero, strings are trimmed and timestamps are
stored as naive local time on construction.
User input is validated at the entry boundary (see walletlens.validation);
these models are the second, defensive layer.
"""

from datetime import datetime
from decimal import Decimal, InvalidOperation
from enum import Enum
from typing import Annotated, Any, Optional
from uuid import UUID, uuid4

from pydantic import (
    BaseModel,
    ConfigDict,
    Field,
    PlainSerializer,
    field_validator,
)


ZERO = Decimal("0")
NEAR_LIMIT_PERCENTAGE = 80.0


def clamp_amount(value: Any) -> Decimal:
    """Coerce a currency value to Decimal and clamp it to be non-negative."""
    if isinstance(value, bool):
        raise ValueError("Amount must be a number, not a boolean")
    try:
        amount = value if isinstance(value, Decimal) else Decimal(str(value))
    except InvalidOperation:
        raise ValueError(f"Invalid amount: {value!r}")
    if not amount.is_finite():
        raise ValueError(f"Amount must be finite: {value!r}")
    return max(ZERO, amount)


def to_local_naive(value: datetime) -> datetime:
    """Convert an aware timestamp to naive local time. Naive values pass through."""
    if value.tzinfo is None:
        return value
    return value.astimezone().replace(tzinfo=None)


# =============================================================================
# ENUMS
# =============================================================================

class TransactionType(str, Enum):
    """Direction of money flow. Values match the persisted/widget format."""
    INCOME = "INCOME"
    EXPENSE = "EXPENSE"


# =============================================================================
# TRANSACTIONS
# =============================================================================

class Transaction(BaseModel):
    """
    A single income or expense entry.

    Transactions are immutable once created. Changing one means
    deleting it and adding a replacement.
    """
    model_config = ConfigDict(str_strip_whitespace=True, frozen=True)

    id: UUID = Field(
        default_factory=uuid4,
        description="Unique transaction ID"
    )
    amount: Decimal = Field(
        ...,
        description="Amount, never negative"
    )
    description: str = Field(
        default="",
        description="Free text description (may be empty)"
    )
    category: str = Field(
        ...,
        min_length=1,
        description="Category name"
    )
    type: TransactionType
    date: datetime = Field(
        default_factory=datetime.now,
        description="When the transaction happened"
    )
    image_path: Optional[str] = Field(
        default=None,
        description="Reference to a receipt image"
    )

    @field_validator('amount', mode='before')
    @classmethod
    def clamp_non_negative(cls, v: Any) -> Decimal:
        return clamp_amount(v)

    @field_validator('date')
    @classmethod
    def naive_local_date(cls, v: datetime) -> datetime:
        return to_local_naive(v)

    @property
    def is_income(self) -> bool:
        return self.type == TransactionType.INCOME

    @property
    def is_expense(self) -> bool:
        return self.type == TransactionType.EXPENSE


class CategoryTotal(BaseModel):
    """Sum of current-month expenses for one category."""

    category: str
    total: Decimal


class WidgetTransaction(BaseModel):
    """
    Denormalized transaction written to the widget's shared namespace.

    Only what the widget needs to compute balances: amount, type and date.
    """

    # The widget reads a JSON number, not a decimal string
    amount: Annotated[Decimal, PlainSerializer(float, return_type=float, when_used="json")]
    type: TransactionType
    date: datetime

    @field_validator('amount', mode='before')
    @classmethod
    def clamp_non_negative(cls, v: Any) -> Decimal:
        return clamp_amount(v)

    @field_validator('date')
    @classmethod
    def naive_local_date(cls, v: datetime) -> datetime:
        return to_local_naive(v)

    @classmethod
    def from_transaction(cls, transaction: Transaction) -> "WidgetTransaction":
        return cls(
            amount=transaction.amount,
            type=transaction.type,
            date=transaction.date,
        )


class LedgerSummary(BaseModel):
    """Derived totals for the current month."""

    computed_at: datetime
    total_income: Decimal = ZERO
    total_expense: Decimal = ZERO
    balance: Decimal = ZERO
    category_totals: list[CategoryTotal] = Field(default_factory=list)


# =============================================================================
# REMINDERS
# =============================================================================

class Reminder(BaseModel):
    """
    A bill reminder.

    The id is fixed at creation. Updates locate the reminder by id and
    replace the whole record.
    """
    model_config = ConfigDict(str_strip_whitespace=True)

    id: UUID = Field(
        default_factory=uuid4,
        description="Unique reminder ID"
    )
    title: str = Field(
        ...,
        min_length=1,
        description="Bill title"
    )
    amount: Decimal = Field(
        ...,
        description="Amount due, never negative"
    )
    due_date: datetime = Field(
        ...,
        description="When the bill is due"
    )
    is_completed: bool = Field(
        default=False,
        description="Has the bill been paid?"
    )
    notes: Optional[str] = Field(
        default=None,
        description="User notes"
    )

    @field_validator('amount', mode='before')
    @classmethod
    def clamp_non_negative(cls, v: Any) -> Decimal:
        return clamp_amount(v)

    @field_validator('due_date')
    @classmethod
    def naive_local_due_date(cls, v: datetime) -> datetime:
        return to_local_naive(v)

    @field_validator('notes')
    @classmethod
    def blank_notes_to_none(cls, v: Optional[str]) -> Optional[str]:
        return v or None


# =============================================================================
# BUDGETS
# =============================================================================

class _BudgetMath:
    """Derived values shared by both budget records."""

    @property
    def limit(self) -> Decimal:
        raise NotImplementedError

    @property
    def remaining(self) -> Decimal:
        return max(ZERO, self.limit - self.spent)

    @property
    def percentage_used(self) -> float:
        if self.limit <= 0:
            return 0.0
        return float(self.spent / self.limit * 100)

    @property
    def is_over_budget(self) -> bool:
        return self.spent > self.limit

    @property
    def is_near_limit(self) -> bool:
        return self.percentage_used >= NEAR_LIMIT_PERCENTAGE


class Budget(_BudgetMath, BaseModel):
    """Spending limit for a single category."""
    model_config = ConfigDict(str_strip_whitespace=True, validate_assignment=True)

    id: UUID = Field(default_factory=uuid4)
    monthly_limit: Decimal = Field(
        ...,
        description="Spending limit for the month"
    )
    category: str = Field(default="")
    month: datetime = Field(
        default_factory=datetime.now,
        description="Month this budget applies to (month granularity)"
    )
    spent: Decimal = Field(
        default=ZERO,
        description="Spent so far; derived, overwritten on recalculation"
    )

    @field_validator('monthly_limit', 'spent', mode='before')
    @classmethod
    def clamp_non_negative(cls, v: Any) -> Decimal:
        return clamp_amount(v)

    @field_validator('month')
    @classmethod
    def naive_local_month(cls, v: datetime) -> datetime:
        return to_local_naive(v)

    @property
    def limit(self) -> Decimal:
        return self.monthly_limit


class MonthlyBudget(_BudgetMath, BaseModel):
    """
    The overall budget for a month.

    Only one exists at a time; setting a new one replaces it.
    `spent` is never authoritative: the ledger overwrites it from
    the current month's expenses.
    """
    model_config = ConfigDict(validate_assignment=True)

    id: UUID = Field(default_factory=uuid4)
    total_limit: Decimal = Field(
        ...,
        description="Spending limit for the month"
    )
    month: datetime = Field(
        default_factory=datetime.now,
        description="Month this budget applies to (month granularity)"
    )
    spent: Decimal = Field(
        default=ZERO,
        description="Spent so far; derived, overwritten on recalculation"
    )
    category_budgets: list[Budget] = Field(default_factory=list)

    @field_validator('total_limit', 'spent', mode='before')
    @classmethod
    def clamp_non_negative(cls, v: Any) -> Decimal:
        return clamp_amount(v)

    @field_validator('month')
    @classmethod
    def naive_local_month(cls, v: datetime) -> datetime:
        return to_local_naive(v)

    @property
    def limit(self) -> Decimal:
        return self.total_limit
