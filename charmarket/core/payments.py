"""Payment-credit capability used to settle purchases.

The hosting environment owns value transfer.  The ledger only asks it to
"credit address X with amount Y" inside the purchase transition; if the
credit raises, the purchase is aborted with no state change.
"""

from __future__ import annotations

import logging
from typing import Protocol, runtime_checkable

from charmarket.core.errors import PaymentCreditError
from charmarket.models.assets import is_zero_address, normalize_address

logger = logging.getLogger(__name__)


@runtime_checkable
class PaymentCredit(Protocol):
    """Protocol for value-transfer backends.

    Any object with a ``credit(address, amount)`` method satisfies this
    protocol.  Implementations raise (preferably ``PaymentCreditError``) when
    the credit cannot complete.
    """

    def credit(self, address: str, amount: int) -> None:
        ...


class BalanceBook:
    """In-process ``PaymentCredit`` that accumulates proceeds per address."""

    def __init__(self) -> None:
        self._balances: dict[str, int] = {}

    def credit(self, address: str, amount: int) -> None:
        if amount <= 0:
            raise PaymentCreditError(f"Credit amount must be positive, got {amount}.")
        if is_zero_address(address):
            raise PaymentCreditError(f"Cannot credit invalid address {address!r}.")
        key = normalize_address(address)
        self._balances[key] = self._balances.get(key, 0) + amount
        logger.debug("Credited %d wei to %s.", amount, key)

    def balance_of(self, address: str) -> int:
        return self._balances.get(normalize_address(address), 0)

    def balances(self) -> dict[str, int]:
        """Return a snapshot of every non-zero balance."""
        return dict(self._balances)
