"""
Wallet Balance

The single running balance of available funds.

DESIGN DECISION: The wallet does not check for overdrafts. Whether an
expense fits the balance is a form rule, enforced by the controller before
it ever calls debit().
"""

from decimal import Decimal, InvalidOperation
from typing import Callable, Optional

from expense_tracker.services.storage import KeyValueStoreInterface


FallbackCallback = Callable[[str, str], None]


class WalletError(Exception):
    """Base exception for wallet operations."""
    pass


class InvalidAmountError(WalletError):
    """Amount is missing, unparseable or not positive."""
    pass


def parse_amount(raw) -> Decimal:
    """
    Parse a user- or storage-supplied amount.

    Accepts Decimal, int, float or a number-like string.

    Raises:
        InvalidAmountError: If the value is empty, not a number, or not finite
    """
    if raw is None:
        raise InvalidAmountError("Amount is missing")
    if isinstance(raw, bool):
        raise InvalidAmountError(f"Not a number: {raw!r}")
    if isinstance(raw, str):
        raw = raw.strip()
        if not raw:
            raise InvalidAmountError("Amount is missing")
    try:
        value = raw if isinstance(raw, Decimal) else Decimal(str(raw))
    except (InvalidOperation, ValueError) as e:
        raise InvalidAmountError(f"Not a number: {raw!r}") from e
    if not value.is_finite():
        raise InvalidAmountError(f"Not a finite number: {raw!r}")
    return value


class Wallet:
    """Mutable wallet balance."""

    def __init__(self, balance: Decimal = Decimal("0")):
        self._balance = parse_amount(balance)

    @property
    def balance(self) -> Decimal:
        return self._balance

    def credit(self, amount) -> Decimal:
        """
        Add income to the wallet.

        Raises:
            InvalidAmountError: If amount is absent, unparseable or not positive
        """
        value = parse_amount(amount)
        if value <= 0:
            raise InvalidAmountError("Income must be greater than zero")
        self._balance += value
        return self._balance

    def debit(self, amount) -> Decimal:
        """Take an expense out of the wallet."""
        value = parse_amount(amount)
        if value <= 0:
            raise InvalidAmountError("Expense must be greater than zero")
        self._balance -= value
        return self._balance

    def adjust(self, delta: Decimal) -> Decimal:
        """Apply a signed correction (refunds on edit and delete)."""
        self._balance += parse_amount(delta)
        return self._balance

    # -------------------------------------------------------------------------
    # Persistence
    # -------------------------------------------------------------------------

    def dump(self) -> str:
        """The balance as a number-like string, exact to the last digit."""
        return str(self._balance)

    def save(self, store: KeyValueStoreInterface, key: str) -> None:
        store.set(key, self.dump())

    @classmethod
    def load(
        cls,
        store: KeyValueStoreInterface,
        key: str,
        default: Decimal,
        on_fallback: Optional[FallbackCallback] = None,
    ) -> "Wallet":
        """
        Restore the wallet from ``store``.

        An absent or malformed slot yields a wallet holding ``default``.
        ``on_fallback`` is told about malformed slots only.
        """
        raw = store.get(key)
        if raw is None:
            return cls(default)
        try:
            return cls(parse_amount(raw))
        except InvalidAmountError as e:
            if on_fallback:
                on_fallback(key, str(e))
            return cls(default)

    def __repr__(self) -> str:
        return f"Wallet(balance={self._balance!r})"
