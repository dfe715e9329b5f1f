"""Shared fixtures: everything runs against the in-memory store."""

import datetime as dt
from decimal import Decimal

import pytest

from expense_tracker.audit import AuditLogger
from expense_tracker.controller import FormController
from expense_tracker.models.expense import Category, ExpenseRecord
from expense_tracker.services.storage import InMemoryKeyValueStore, StorageWriteError
from expense_tracker.state import StatePersister


class UnreliableStore(InMemoryKeyValueStore):
    """In-memory store whose writes fail while ``failing`` is set."""

    def __init__(self, initial=None):
        super().__init__(initial)
        self.failing = False

    def set(self, key, value):
        if self.failing:
            raise StorageWriteError("disk full")
        super().set(key, value)

    def set_many(self, items):
        if self.failing:
            raise StorageWriteError("disk full")
        super().set_many(items)


@pytest.fixture
def memory_store():
    return InMemoryKeyValueStore()


@pytest.fixture
def unreliable_store():
    return UnreliableStore()


@pytest.fixture
def audit_logger():
    return AuditLogger()


@pytest.fixture
def persister(memory_store, audit_logger):
    return StatePersister(
        store=memory_store,
        wallet_key="wallet",
        expenses_key="expenses",
        default_balance=Decimal("5000"),
        audit_logger=audit_logger,
    )


@pytest.fixture
def state(persister):
    return persister.load()


@pytest.fixture
def controller(state, audit_logger):
    return FormController(state=state, audit_logger=audit_logger)


@pytest.fixture
def coffee():
    return ExpenseRecord(
        title="Coffee",
        price=Decimal("10"),
        category=Category.FOOD,
        date=dt.date(2024, 1, 1),
    )

