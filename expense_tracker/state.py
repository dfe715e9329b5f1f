"""
Application State

DESIGN DECISION: Wallet and record store live in one explicit object that
is handed to whoever needs it, instead of module-level globals.

Persistence is an explicit post-mutation hook: every successful mutation
calls ``on_change(state)`` exactly once, after both the wallet and the
record store have been updated. StatePersister.save is that hook in the
running app; tests may pass anything, or nothing.

A mutation only stands once the hook returns. If the hook raises
StorageError the wallet and records are put back as they were before the
call and the error propagates, so memory never runs ahead of disk.
"""

from decimal import Decimal
from typing import Callable, Optional

from expense_tracker.audit import AuditLogger
from expense_tracker.config import Settings
from expense_tracker.models.expense import CategoryTotal, ExpenseRecord
from expense_tracker.queries import summarize_by_category
from expense_tracker.services.records import RecordStore
from expense_tracker.services.storage import (
    JsonFileKeyValueStore,
    KeyValueStoreInterface,
    StorageError,
)
from expense_tracker.services.wallet import Wallet


_Snapshot = tuple[Decimal, tuple[ExpenseRecord, ...]]


class AppState:
    """
    Wallet plus record store, mutated only through the methods below.

    Each mutation validates its preconditions before touching anything,
    so a failing call leaves both wallet and records unchanged.
    """

    def __init__(
        self,
        wallet: Wallet,
        records: RecordStore,
        on_change: Optional[Callable[["AppState"], None]] = None,
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._wallet = wallet
        self._records = records
        self._on_change = on_change
        self._audit_logger = audit_logger

    @property
    def balance(self) -> Decimal:
        return self._wallet.balance

    @property
    def wallet(self) -> Wallet:
        return self._wallet

    @property
    def record_store(self) -> RecordStore:
        return self._records

    @property
    def records(self) -> tuple[ExpenseRecord, ...]:
        return self._records.records

    def summary(self) -> list[CategoryTotal]:
        """Per-category totals of the current records."""
        return summarize_by_category(self._records)

    def _snapshot(self) -> _Snapshot:
        return self._wallet.balance, self._records.records

    def _committed(self, operation: str, before: _Snapshot) -> None:
        if not self._on_change:
            return
        try:
            self._on_change(self)
        except StorageError as e:
            balance, records = before
            self._wallet = Wallet(balance)
            self._records = RecordStore(records)
            if self._audit_logger:
                self._audit_logger.log_save_failed(operation=operation, error=str(e))
            raise

    # -------------------------------------------------------------------------
    # Mutations
    # -------------------------------------------------------------------------

    def add_income(self, amount) -> Decimal:
        """
        Credit the wallet.

        Raises:
            InvalidAmountError: For a missing, unparseable or non-positive amount
            StorageError: If the change could not be saved (nothing changes)
        """
        before = self._snapshot()
        balance = self._wallet.credit(amount)
        self._committed("add_income", before)
        if self._audit_logger:
            self._audit_logger.log_income_added(amount=balance - before[0], balance=balance)
        return balance

    def add_expense(self, record: ExpenseRecord) -> int:
        """Append a record and debit its price. Returns the record's position."""
        before = self._snapshot()
        self._wallet.debit(record.price)
        index = self._records.add(record)
        self._committed("add_expense", before)
        if self._audit_logger:
            self._audit_logger.log_expense_added(
                index=index,
                title=record.title,
                price=record.price,
                balance=self._wallet.balance,
            )
        return index

    def replace_expense(self, index: int, record: ExpenseRecord) -> ExpenseRecord:
        """
        Replace the record at ``index``.

        The wallet moves by old price minus new price: the old charge is
        refunded and the new one applied in a single adjustment.

        Raises:
            RecordNotFoundError: If there is no record at ``index``
        """
        before = self._snapshot()
        previous = self._records.get(index)
        self._records.update(index, record)
        self._wallet.adjust(previous.price - record.price)
        self._committed("replace_expense", before)
        if self._audit_logger:
            self._audit_logger.log_expense_updated(
                index=index,
                old_price=previous.price,
                new_price=record.price,
                balance=self._wallet.balance,
            )
        return previous

    def delete_expense(self, index: int) -> ExpenseRecord:
        """
        Remove the record at ``index`` and refund its price.

        Raises:
            RecordNotFoundError: If there is no record at ``index``
        """
        before = self._snapshot()
        removed = self._records.remove(index)
        self._wallet.adjust(removed.price)
        self._committed("delete_expense", before)
        if self._audit_logger:
            self._audit_logger.log_expense_deleted(
                index=index,
                title=removed.title,
                price=removed.price,
                balance=self._wallet.balance,
            )
        return removed


class StatePersister:
    """
    Loads and saves AppState through a key-value store.

    The wallet and the records occupy two separate slots, always written
    together.
    """

    def __init__(
        self,
        store: KeyValueStoreInterface,
        wallet_key: str = "wallet",
        expenses_key: str = "expenses",
        default_balance: Decimal = Decimal("5000"),
        audit_logger: Optional[AuditLogger] = None,
    ):
        self._store = store
        self._wallet_key = wallet_key
        self._expenses_key = expenses_key
        self._default_balance = default_balance
        self._audit_logger = audit_logger

    @classmethod
    def from_settings(
        cls,
        settings: Settings,
        store: Optional[KeyValueStoreInterface] = None,
        audit_logger: Optional[AuditLogger] = None,
    ) -> "StatePersister":
        """Build a persister from configuration; defaults to the JSON file store."""
        storage = settings.storage
        return cls(
            store=store or JsonFileKeyValueStore(storage.data_file),
            wallet_key=storage.wallet_key,
            expenses_key=storage.expenses_key,
            default_balance=settings.app.default_wallet_balance,
            audit_logger=audit_logger,
        )

    @property
    def store(self) -> KeyValueStoreInterface:
        return self._store

    def _fallback(self, key: str, reason: str) -> None:
        if self._audit_logger:
            self._audit_logger.log_state_defaulted(key=key, reason=reason)

    def load(self) -> AppState:
        """
        Restore state at startup.

        Malformed slots are silently replaced with defaults; the returned
        state saves itself through this persister after every mutation.
        """
        wallet = Wallet.load(
            self._store,
            self._wallet_key,
            default=self._default_balance,
            on_fallback=self._fallback,
        )
        records = RecordStore.load(
            self._store,
            self._expenses_key,
            on_fallback=self._fallback,
        )
        if self._audit_logger:
            self._audit_logger.log_state_restored(
                balance=wallet.balance,
                record_count=len(records),
            )
        return AppState(
            wallet=wallet,
            records=records,
            on_change=self.save,
            audit_logger=self._audit_logger,
        )

    def save(self, state: AppState) -> None:
        """Write both slots in a single store write."""
        self._store.set_many({
            self._wallet_key: state.wallet.dump(),
            self._expenses_key: state.record_store.dump(),
        })
