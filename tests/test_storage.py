"""
Tests for key-value stores and the ledger codec.
"""

from datetime import datetime
from decimal import Decimal

import pytest

from conftest import expense, income
from walletlens.models.ledger import MonthlyBudget, Reminder, TransactionType
from walletlens.services.storage import (
    EncodingError,
    FileKeyValueStore,
    InMemoryKeyValueStore,
    LedgerCodec,
    StorageError,
)


class TestInMemoryStore:

    def test_get_missing(self):
        assert InMemoryKeyValueStore().get("transactions") is None

    def test_set_get_remove(self):
        store = InMemoryKeyValueStore()
        store.set("a", b"1")
        assert store.get("a") == b"1"
        assert store.contains("a") is True
        assert store.remove("a") is True
        assert store.remove("a") is False
        assert store.contains("a") is False

    def test_keys(self):
        store = InMemoryKeyValueStore({"b": b"2", "a": b"1"})
        assert store.keys() == ["a", "b"]


class TestFileStore:
    """One file per key under a namespace directory."""

    def test_directory_created_on_first_write(self, tmp_path):
        directory = tmp_path / "group.com.walletlens.widget"
        store = FileKeyValueStore(directory)
        assert store.get("widget_transactions") is None
        assert not directory.exists()

        store.set("widget_transactions", b"[]")
        assert directory.is_dir()
        assert store.get("widget_transactions") == b"[]"

    def test_overwrite(self, tmp_path):
        store = FileKeyValueStore(tmp_path)
        store.set("transactions", b"old")
        store.set("transactions", b"new")
        assert store.get("transactions") == b"new"
        assert [p.name for p in tmp_path.iterdir()] == ["transactions.bin"]

    def test_unsafe_key_characters_are_replaced(self, tmp_path):
        store = FileKeyValueStore(tmp_path)
        store.set("../escape/key", b"x")
        assert store.get("../escape/key") == b"x"
        assert list(tmp_path.iterdir()) == [tmp_path / ".._escape_key.bin"]

    def test_remove(self, tmp_path):
        store = FileKeyValueStore(tmp_path)
        store.set("reminders", b"[]")
        assert store.remove("reminders") is True
        assert store.remove("reminders") is False
        assert store.get("reminders") is None

    def test_empty_key_rejected(self, tmp_path):
        with pytest.raises(StorageError):
            FileKeyValueStore(tmp_path).get("")

    def test_unreadable_key_raises_storage_error(self, tmp_path):
        (tmp_path / "monthlyBudget.bin").mkdir()
        with pytest.raises(StorageError):
            FileKeyValueStore(tmp_path).get("monthlyBudget")

    def test_namespaces_are_separate(self, tmp_path):
        app = FileKeyValueStore(tmp_path / "walletlens")
        widget = FileKeyValueStore(tmp_path / "group.com.walletlens.widget")
        app.set("transactions", b"app")
        assert widget.get("transactions") is None


class TestLedgerCodec:
    """JSON encoding of persisted collections."""

    def test_transactions(self):
        transactions = [income(3000), expense(12.5, "Food & Dining")]
        decoded = LedgerCodec.decode_transactions(LedgerCodec.encode_transactions(transactions))
        assert decoded == transactions

    def test_reminders_keep_optional_fields(self):
        reminder = Reminder(
            title="Rent",
            amount=900,
            due_date=datetime(2025, 4, 1),
            notes="landlord",
        )
        decoded = LedgerCodec.decode_reminders(LedgerCodec.encode_reminders([reminder]))
        assert decoded[0].notes == "landlord"
        assert decoded[0].id == reminder.id

    def test_budget(self):
        budget = MonthlyBudget(total_limit=800, spent=120, month=datetime(2025, 3, 1))
        decoded = LedgerCodec.decode_budget(LedgerCodec.encode_budget(budget))
        assert decoded.total_limit == Decimal("800")
        assert decoded.category_budgets == []

    def test_widget_snapshot_is_denormalized(self):
        data = LedgerCodec.encode_widget_transactions([expense(20, "Food & Dining")])
        assert b"Food" not in data
        assert b'"amount":20.0' in data
        decoded = LedgerCodec.decode_widget_transactions(data)
        assert decoded[0].type == TransactionType.EXPENSE
        assert decoded[0].amount == Decimal("20")

    def test_empty_list(self):
        assert LedgerCodec.decode_transactions(LedgerCodec.encode_transactions([])) == []

    @pytest.mark.parametrize("data", [b"", b"not json", b'{"id": 1}', b'[{"amount": 1}]'])
    def test_bad_transactions_data(self, data):
        with pytest.raises(EncodingError):
            LedgerCodec.decode_transactions(data)

    def test_bad_budget_data(self):
        with pytest.raises(EncodingError):
            LedgerCodec.decode_budget(b'{"spent": 3}')

    def test_encoding_error_is_storage_error(self):
        assert issubclass(EncodingError, StorageError)
