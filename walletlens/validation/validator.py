"""
Entry Validation

DESIGN DECISION: Validation happens at the input boundary, before a
record is built. The ledger models only normalize (trim, clamp); they
assume values have already been checked here.

Checks:
- Amounts must parse as numbers and be greater than zero
- Titles and categories must not be blank
- A transaction's category must belong to its type's category list

IMPORTANT: Validation never fixes input. It reports issues so the
caller can ask the user again.
"""

from datetime import datetime
from decimal import Decimal, InvalidOperation
from typing import Optional, Sequence

from walletlens.models.ledger import Reminder, Transaction, TransactionType
from walletlens.models.validation import ValidationIssue, ValidationResult


EXPENSE_CATEGORIES: tuple[str, ...] = (
    "Food & Dining",
    "Transportation",
    "Shopping",
    "Entertainment",
    "Utilities",
    "Healthcare",
    "Education",
    "Insurance",
    "Other",
)

INCOME_CATEGORIES: tuple[str, ...] = (
    "Salary",
    "Freelance",
    "Investment",
    "Business",
    "Gift",
    "Refund",
    "Other Income",
)


class EntryValidationError(ValueError):
    """Raised by the build_* helpers when input does not validate."""

    def __init__(self, result: ValidationResult):
        self.result = result
        super().__init__(result.first_error or "Invalid input")


class EntryValidator:
    """Validates user-entered values for transactions, reminders and budgets."""

    def __init__(
        self,
        expense_categories: Sequence[str] = EXPENSE_CATEGORIES,
        income_categories: Sequence[str] = INCOME_CATEGORIES,
    ):
        self._categories = {
            TransactionType.EXPENSE: tuple(expense_categories),
            TransactionType.INCOME: tuple(income_categories),
        }

    def categories_for(self, transaction_type: TransactionType) -> tuple[str, ...]:
        return self._categories[transaction_type]

    def default_category(self, transaction_type: TransactionType) -> str:
        return self._categories[transaction_type][0]

    def _check_amount(
        self,
        raw: str,
        field: str,
        issues: list[ValidationIssue],
    ) -> Optional[Decimal]:
        text = (raw or "").strip()
        if not text:
            issues.append(ValidationIssue(
                field=field,
                issue_type="missing",
                message="Please enter an amount",
                severity="error",
            ))
            return None

        try:
            amount = Decimal(text)
        except InvalidOperation:
            amount = None
        if amount is None or not amount.is_finite():
            issues.append(ValidationIssue(
                field=field,
                issue_type="invalid_format",
                message="Please enter a valid amount",
                severity="error",
                suggested_fix="Use digits with an optional decimal point, e.g. 12.50",
            ))
            return None

        if amount <= 0:
            issues.append(ValidationIssue(
                field=field,
                issue_type="not_positive",
                message="Amount must be greater than zero",
                severity="error",
            ))
        return amount

    @staticmethod
    def _check_required(value: Optional[str], field: str, label: str, issues: list) -> str:
        text = (value or "").strip()
        if not text:
            issues.append(ValidationIssue(
                field=field,
                issue_type="missing",
                message=f"Please enter a {label}",
                severity="error",
            ))
        return text

    @staticmethod
    def _result(issues: list[ValidationIssue], amount: Optional[Decimal]) -> ValidationResult:
        return ValidationResult(
            is_valid=not any(issue.severity == "error" for issue in issues),
            issues=issues,
            parsed_amount=amount,
        )

    def validate_transaction(
        self,
        amount: str,
        category: str,
        transaction_type: TransactionType,
    ) -> ValidationResult:
        issues: list[ValidationIssue] = []
        parsed = self._check_amount(amount, "amount", issues)
        category_text = self._check_required(category, "category", "category", issues)

        if category_text and category_text not in self._categories[transaction_type]:
            issues.append(ValidationIssue(
                field="category",
                issue_type="unknown_category",
                message=(
                    f"'{category_text}' is not a valid "
                    f"{transaction_type.value.lower()} category"
                ),
                severity="error",
                suggested_fix=f"Use '{self.default_category(transaction_type)}'",
            ))
        return self._result(issues, parsed)

    def validate_reminder(self, title: str, amount: str) -> ValidationResult:
        issues: list[ValidationIssue] = []
        self._check_required(title, "title", "bill title", issues)
        parsed = self._check_amount(amount, "amount", issues)
        return self._result(issues, parsed)

    def validate_budget(self, limit: str) -> ValidationResult:
        issues: list[ValidationIssue] = []
        parsed = self._check_amount(limit, "limit", issues)
        return self._result(issues, parsed)

    def build_transaction(
        self,
        amount: str,
        category: str,
        transaction_type: TransactionType,
        description: str = "",
        date: Optional[datetime] = None,
        image_path: Optional[str] = None,
    ) -> Transaction:
        """
        Validate and build a transaction.

        Raises:
            EntryValidationError: If the input does not validate
        """
        result = self.validate_transaction(amount, category, transaction_type)
        if not result.is_valid:
            raise EntryValidationError(result)

        fields = {
            "amount": result.parsed_amount,
            "description": description,
            "category": category,
            "type": transaction_type,
            "image_path": image_path,
        }
        if date is not None:
            fields["date"] = date
        return Transaction(**fields)

    def build_reminder(
        self,
        title: str,
        amount: str,
        due_date: datetime,
        notes: Optional[str] = None,
    ) -> Reminder:
        """
        Validate and build a reminder.

        Raises:
            EntryValidationError: If the input does not validate
        """
        result = self.validate_reminder(title, amount)
        if not result.is_valid:
            raise EntryValidationError(result)
        return Reminder(
            title=title,
            amount=result.parsed_amount,
            due_date=due_date,
            notes=notes,
        )
