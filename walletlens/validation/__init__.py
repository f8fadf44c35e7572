"""Input validation package."""

from walletlens.validation.validator import (
    EXPENSE_CATEGORIES,
    INCOME_CATEGORIES,
    EntryValidationError,
    EntryValidator,
)

__all__ = [
    "EXPENSE_CATEGORIES",
    "INCOME_CATEGORIES",
    "EntryValidationError",
    "EntryValidator",
]
