"""
JSON codec for ledger collections.

Collections are stored as JSON arrays (or a single JSON object for the
budget) and validated back into models on the way out.
"""

from typing import Optional

from pydantic import TypeAdapter, ValidationError

from walletlens.models.ledger import (
    MonthlyBudget,
    Reminder,
    Transaction,
    WidgetTransaction,
)
from walletlens.services.storage.interface import EncodingError


class LedgerCodec:
    """Encode and decode ledger records to JSON bytes."""

    _transactions = TypeAdapter(list[Transaction])
    _reminders = TypeAdapter(list[Reminder])
    _widget_transactions = TypeAdapter(list[WidgetTransaction])

    @staticmethod
    def _dump(adapter: TypeAdapter, value) -> bytes:
        try:
            return adapter.dump_json(value)
        except (ValueError, TypeError) as e:
            raise EncodingError(f"Failed to encode: {e}")

    @staticmethod
    def _load(adapter: TypeAdapter, data: bytes):
        try:
            return adapter.validate_json(data)
        except ValidationError as e:
            raise EncodingError(f"Failed to decode: {e.error_count()} errors: {e}")

    @classmethod
    def encode_transactions(cls, transactions: list[Transaction]) -> bytes:
        return cls._dump(cls._transactions, transactions)

    @classmethod
    def decode_transactions(cls, data: bytes) -> list[Transaction]:
        return cls._load(cls._transactions, data)

    @classmethod
    def encode_reminders(cls, reminders: list[Reminder]) -> bytes:
        return cls._dump(cls._reminders, reminders)

    @classmethod
    def decode_reminders(cls, data: bytes) -> list[Reminder]:
        return cls._load(cls._reminders, data)

    @classmethod
    def encode_widget_transactions(cls, transactions: list[Transaction]) -> bytes:
        snapshot = [WidgetTransaction.from_transaction(t) for t in transactions]
        return cls._dump(cls._widget_transactions, snapshot)

    @classmethod
    def decode_widget_transactions(cls, data: bytes) -> list[WidgetTransaction]:
        return cls._load(cls._widget_transactions, data)

    @staticmethod
    def encode_budget(budget: MonthlyBudget) -> bytes:
        try:
            return budget.model_dump_json().encode("utf-8")
        except (ValueError, TypeError) as e:
            raise EncodingError(f"Failed to encode budget: {e}")

    @staticmethod
    def decode_budget(data: bytes) -> Optional[MonthlyBudget]:
        try:
            return MonthlyBudget.model_validate_json(data)
        except ValidationError as e:
            raise EncodingError(f"Failed to decode budget: {e}")
