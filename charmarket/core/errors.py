"""Marketplace error taxonomy.

Every guard failure raises one of the ``MarketplaceError`` subclasses below
before any state is touched.  The ``kind`` attribute lets callers branch on
the failure without importing each class.
"""

from __future__ import annotations

from enum import Enum


class ErrorKind(str, Enum):
    NOT_FOUND = "not_found"
    UNAUTHORIZED = "unauthorized"
    INVALID_PRICE = "invalid_price"
    WRONG_PAYMENT = "wrong_payment"
    NOT_FOR_SALE = "not_for_sale"
    SELF_PURCHASE = "self_purchase"
    SELF_TRANSFER = "self_transfer"
    INVALID_ADDRESS = "invalid_address"


class MarketplaceError(RuntimeError):
    """Base class for guard failures.  No state changed when this is raised."""

    kind: ErrorKind

    def __init__(self, message: str, *, asset_id: int | None = None) -> None:
        super().__init__(message)
        self.asset_id = asset_id


class AssetNotFoundError(MarketplaceError):
    kind = ErrorKind.NOT_FOUND


class UnauthorizedError(MarketplaceError):
    kind = ErrorKind.UNAUTHORIZED


class InvalidPriceError(MarketplaceError):
    kind = ErrorKind.INVALID_PRICE


class WrongPaymentError(MarketplaceError):
    kind = ErrorKind.WRONG_PAYMENT


class NotForSaleError(MarketplaceError):
    kind = ErrorKind.NOT_FOR_SALE


class SelfPurchaseError(MarketplaceError):
    kind = ErrorKind.SELF_PURCHASE


class SelfTransferError(MarketplaceError):
    kind = ErrorKind.SELF_TRANSFER


class InvalidAddressError(MarketplaceError):
    kind = ErrorKind.INVALID_ADDRESS


class PaymentCreditError(RuntimeError):
    """Raised by a payment capability that cannot complete a credit."""


class StaleLedgerError(RuntimeError):
    """Raised when the journal has moved past the ledger's last event.

    Another writer appended to the same journal; rebuild the ledger with
    ``MarketplaceLedger.from_journal`` and retry.
    """
