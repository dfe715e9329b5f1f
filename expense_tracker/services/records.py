"""
Record Store

Ordered, in-memory sequence of expense records. Position in the sequence
is insertion order and display order; the index of a record is its
identity for edit and delete.
"""

from decimal import Decimal
from typing import Callable, Iterable, Iterator, Optional

from pydantic import TypeAdapter, ValidationError

from expense_tracker.models.expense import ExpenseRecord
from expense_tracker.services.storage import KeyValueStoreInterface


_RECORD_LIST = TypeAdapter(list[ExpenseRecord])


class RecordStoreError(Exception):
    """Base exception for record store operations."""
    pass


class RecordNotFoundError(RecordStoreError):
    """No record at the requested position."""
    pass


class RecordStore:
    """The list of stored expense records."""

    def __init__(self, records: Optional[Iterable[ExpenseRecord]] = None):
        self._records: list[ExpenseRecord] = list(records or [])

    def _check_index(self, index: int) -> None:
        if not 0 <= index < len(self._records):
            raise RecordNotFoundError(
                f"No record at position {index} (store holds {len(self._records)})"
            )

    def add(self, record: ExpenseRecord) -> int:
        """Append a record and return its position."""
        self._records.append(record)
        return len(self._records) - 1

    def get(self, index: int) -> ExpenseRecord:
        self._check_index(index)
        return self._records[index]

    def update(self, index: int, record: ExpenseRecord) -> ExpenseRecord:
        """Replace the record at ``index`` and return the one it replaced."""
        self._check_index(index)
        previous = self._records[index]
        self._records[index] = record
        return previous

    def remove(self, index: int) -> ExpenseRecord:
        """Delete the record at ``index``; later records move up by one."""
        self._check_index(index)
        return self._records.pop(index)

    def total(self) -> Decimal:
        return sum((r.price for r in self._records), Decimal("0"))

    @property
    def records(self) -> tuple[ExpenseRecord, ...]:
        return tuple(self._records)

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[ExpenseRecord]:
        return iter(tuple(self._records))

    # -------------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------------

    def dump(self) -> str:
        """The whole sequence as a JSON array."""
        return _RECORD_LIST.dump_json(self._records).decode("utf-8")

    def save(self, store: KeyValueStoreInterface, key: str) -> None:
        store.set(key, self.dump())

    @classmethod
    def load(
        cls,
        store: KeyValueStoreInterface,
        key: str,
        on_fallback: Optional[Callable[[str, str], None]] = None,
    ) -> "RecordStore":
        """
        Restore the sequence from ``store``.

        An absent slot, invalid JSON, a non-array, or any invalid record
        yields an empty store.
        """
        raw = store.get(key)
        if raw is None:
            return cls()
        try:
            return cls(_RECORD_LIST.validate_json(raw))
        except ValidationError as e:
            if on_fallback:
                on_fallback(key, f"{e.error_count()} validation errors")
            return cls()
