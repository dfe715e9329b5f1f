"""Tests for AppState and StatePersister."""

import datetime as dt
import json
import random
from decimal import Decimal

import pytest

from expense_tracker.models.audit import AuditEventType
from expense_tracker.models.expense import Category, ExpenseRecord
from expense_tracker.services.records import RecordNotFoundError, RecordStore
from expense_tracker.services.storage import InMemoryKeyValueStore, StorageError
from expense_tracker.services.wallet import InvalidAmountError, Wallet
from expense_tracker.state import AppState, StatePersister


def make_record(title="Coffee", price="10", category=Category.FOOD):
    return ExpenseRecord(
        title=title,
        price=Decimal(price),
        category=category,
        date=dt.date(2024, 1, 1),
    )


class TestAppState:
    """Tests for the mutation methods and the change hook."""

    @pytest.fixture
    def changes(self):
        return []

    @pytest.fixture
    def app_state(self, changes):
        return AppState(
            wallet=Wallet(Decimal("5000")),
            records=RecordStore(),
            on_change=changes.append,
        )

    def test_add_income(self, app_state, changes):
        assert app_state.add_income("500") == Decimal("5500")
        assert changes == [app_state]

    def test_add_income_rejects_bad_amount_without_commit(self, app_state, changes):
        with pytest.raises(InvalidAmountError):
            app_state.add_income("")
        assert app_state.balance == Decimal("5000")
        assert changes == []

    def test_add_expense_debits_wallet(self, app_state, changes):
        index = app_state.add_expense(make_record(price="10"))
        assert index == 0
        assert app_state.balance == Decimal("4990")
        assert len(app_state.records) == 1
        assert len(changes) == 1

    def test_replace_expense_moves_balance_by_difference(self, app_state):
        """Editing P1 -> P2 changes the balance by exactly P1 - P2."""
        app_state.add_expense(make_record(price="10"))
        before = app_state.balance

        previous = app_state.replace_expense(0, make_record(price="25"))

        assert previous.price == Decimal("10")
        assert app_state.balance == before + Decimal("10") - Decimal("25")
        assert len(app_state.records) == 1

    def test_replace_missing_expense_changes_nothing(self, app_state, changes):
        """Record and balance commit together or not at all."""
        app_state.add_expense(make_record(price="10"))
        changes.clear()

        with pytest.raises(RecordNotFoundError):
            app_state.replace_expense(3, make_record(price="25"))

        assert app_state.balance == Decimal("4990")
        assert app_state.records[0].price == Decimal("10")
        assert changes == []

    def test_delete_expense_refunds_price(self, app_state):
        """Deleting refunds exactly the record's price and removes one entry."""
        app_state.add_expense(make_record("A", price="10"))
        app_state.add_expense(make_record("B", price="30"))
        balance = app_state.balance

        removed = app_state.delete_expense(0)

        assert removed.title == "A"
        assert app_state.balance == balance + Decimal("10")
        assert [r.title for r in app_state.records] == ["B"]

    def test_delete_missing_expense_changes_nothing(self, app_state, changes):
        with pytest.raises(RecordNotFoundError):
            app_state.delete_expense(0)
        assert app_state.balance == Decimal("5000")
        assert changes == []

    def test_summary_reflects_records(self, app_state):
        app_state.add_expense(make_record(price="10"))
        app_state.add_expense(make_record(price="5", category=Category.TRAVEL))
        assert [(r.category, r.total) for r in app_state.summary()] == [
            (Category.FOOD, Decimal("10")),
            (Category.TRAVEL, Decimal("5")),
        ]

    def test_works_without_hook(self):
        app_state = AppState(wallet=Wallet(Decimal("1")), records=RecordStore())
        app_state.add_income("1")
        assert app_state.balance == Decimal("2")

    def test_balance_invariant_over_random_operations(self, app_state):
        """balance == initial + incomes - sum of stored prices, always."""
        rng = random.Random(1234)
        initial = app_state.balance
        incomes = Decimal("0")

        for _ in range(300):
            op = rng.choice(["income", "add", "edit", "delete"])
            if op == "income":
                amount = Decimal(rng.randint(1, 300))
                app_state.add_income(amount)
                incomes += amount
            elif op == "add":
                price = Decimal(rng.randint(1, 200)) / 4
                if price <= app_state.balance:
                    app_state.add_expense(make_record(price=str(price)))
            elif op == "edit" and app_state.records:
                index = rng.randrange(len(app_state.records))
                app_state.replace_expense(index, make_record(price=str(rng.randint(1, 100))))
            elif op == "delete" and app_state.records:
                app_state.delete_expense(rng.randrange(len(app_state.records)))

            assert app_state.balance == initial + incomes - app_state.record_store.total()


class TestStatePersister:
    """Tests for loading and saving through the key-value store."""

    def test_fresh_store_uses_defaults(self, persister, memory_store):
        state = persister.load()
        assert state.balance == Decimal("5000")
        assert state.records == ()
        assert memory_store.keys() == []

    def test_every_mutation_is_saved(self, state, memory_store):
        state.add_expense(make_record(price="10"))

        assert memory_store.get("wallet") == "4990"
        assert json.loads(memory_store.get("expenses")) == [
            {"title": "Coffee", "price": "10", "category": "Food", "date": "2024-01-01"},
        ]

    def test_round_trip(self, persister, memory_store):
        """Saving then loading yields an equal state."""
        state = persister.load()
        state.add_income("123.45")
        state.add_expense(make_record("Coffee", price="10.5"))
        state.add_expense(make_record("Bus", price="2", category=Category.TRAVEL))

        restored = StatePersister(store=memory_store).load()

        assert restored.balance == state.balance
        assert restored.records == state.records

    def test_precise_prices_survive_reload(self, persister, memory_store):
        """Reloaded balance plus stored prices still adds up to the start."""
        state = persister.load()
        state.add_expense(make_record(price="1234.123456789012345678"))

        restored = StatePersister(store=memory_store).load()

        assert restored.records[0].price == Decimal("1234.123456789012345678")
        assert restored.balance + restored.record_store.total() == Decimal("5000")

    def test_huge_amounts_survive_reload(self, persister, memory_store):
        state = persister.load()
        state.add_income("1e400")
        state.add_expense(make_record(price="1e399"))
        state.add_expense(make_record(price="10"))

        restored = StatePersister(store=memory_store).load()

        assert len(restored.records) == 2
        assert restored.records[0].price == Decimal("1e399")
        assert restored.balance == state.balance

    def test_save_writes_both_slots_at_once(self, state, memory_store, monkeypatch):
        calls = []
        monkeypatch.setattr(memory_store, "set", lambda *args: calls.append(args))
        state.add_income("1")
        assert calls == []
        assert memory_store.get("wallet") == "5001"
        assert memory_store.get("expenses") == "[]"

    def test_malformed_slots_fall_back_and_are_audited(self, audit_logger):
        store = InMemoryKeyValueStore({"wallet": "oops", "expenses": "{]"})
        state = StatePersister(
            store=store,
            default_balance=Decimal("5000"),
            audit_logger=audit_logger,
        ).load()

        assert state.balance == Decimal("5000")
        assert state.records == ()

        types = [e.event_type for e in audit_logger.history]
        assert types == [
            AuditEventType.STATE_DEFAULTED,
            AuditEventType.STATE_DEFAULTED,
            AuditEventType.STATE_RESTORED,
        ]

    def test_custom_keys(self):
        store = InMemoryKeyValueStore()
        state = StatePersister(store=store, wallet_key="w", expenses_key="e").load()
        state.add_income("1")
        assert sorted(store.keys()) == ["e", "w"]

    def test_mutations_are_audited(self, state, audit_logger):
        state.add_income("500")
        state.add_expense(make_record(price="10"))
        state.replace_expense(0, make_record(price="20"))
        state.delete_expense(0)

        types = [e.event_type for e in audit_logger.history][-4:]
        assert types == [
            AuditEventType.INCOME_ADDED,
            AuditEventType.EXPENSE_ADDED,
            AuditEventType.EXPENSE_UPDATED,
            AuditEventType.EXPENSE_DELETED,
        ]


class TestSaveFailure:
    """A mutation whose save fails leaves memory and disk unchanged."""

    @pytest.fixture
    def failing_state(self, unreliable_store, audit_logger):
        state = StatePersister(store=unreliable_store, audit_logger=audit_logger).load()
        state.add_expense(make_record("Coffee", price="10"))
        unreliable_store.failing = True
        return state

    def test_add_expense_is_rolled_back(self, failing_state, unreliable_store):
        with pytest.raises(StorageError):
            failing_state.add_expense(make_record("Bus", price="2"))

        assert failing_state.balance == Decimal("4990")
        assert [r.title for r in failing_state.records] == ["Coffee"]
        assert unreliable_store.get("wallet") == "4990"

    def test_income_is_rolled_back(self, failing_state):
        with pytest.raises(StorageError):
            failing_state.add_income("500")
        assert failing_state.balance == Decimal("4990")

    def test_replace_is_rolled_back(self, failing_state):
        with pytest.raises(StorageError):
            failing_state.replace_expense(0, make_record("Tea", price="3"))

        assert failing_state.balance == Decimal("4990")
        assert failing_state.records[0].title == "Coffee"

    def test_delete_is_rolled_back(self, failing_state):
        with pytest.raises(StorageError):
            failing_state.delete_expense(0)

        assert failing_state.balance == Decimal("4990")
        assert len(failing_state.records) == 1

    def test_failure_is_audited(self, failing_state, audit_logger):
        with pytest.raises(StorageError):
            failing_state.add_income("500")

        event = audit_logger.history[-1]
        assert event.event_type == AuditEventType.SAVE_FAILED
        assert event.details["operation"] == "add_income"

    def test_retry_after_recovery_applies_once(self, failing_state, unreliable_store):
        with pytest.raises(StorageError):
            failing_state.add_expense(make_record("Bus", price="2"))

        unreliable_store.failing = False
        failing_state.add_expense(make_record("Bus", price="2"))

        assert failing_state.balance == Decimal("4988")
        assert len(failing_state.records) == 2
        restored = StatePersister(store=unreliable_store).load()
        assert restored.balance == Decimal("4988")
        assert len(restored.records) == 2


if __name__ == "__main__":
    pytest.main([__file__, "-v"])
