"""Services package."""

from expense_tracker.services.records import (
    RecordNotFoundError,
    RecordStore,
    RecordStoreError,
)
from expense_tracker.services.storage import (
    InMemoryKeyValueStore,
    JsonFileKeyValueStore,
    KeyValueStoreInterface,
    StorageError,
    StorageWriteError,
)
from expense_tracker.services.wallet import (
    InvalidAmountError,
    Wallet,
    WalletError,
    parse_amount,
)

__all__ = [
    # Wallet
    "InvalidAmountError",
    "Wallet",
    "WalletError",
    "parse_amount",
    # Records
    "RecordNotFoundError",
    "RecordStore",
    "RecordStoreError",
    # Storage services
    "InMemoryKeyValueStore",
    "JsonFileKeyValueStore",
    "KeyValueStoreInterface",
    "StorageError",
    "StorageWriteError",
]
