"""Ledger core: registry, guards, journal, payments and the marketplace."""

from charmarket.core.errors import (
    AssetNotFoundError,
    ErrorKind,
    InvalidAddressError,
    InvalidPriceError,
    MarketplaceError,
    NotForSaleError,
    PaymentCreditError,
    SelfPurchaseError,
    SelfTransferError,
    StaleLedgerError,
    UnauthorizedError,
    WrongPaymentError,
)
from charmarket.core.journal import EventJournal, JournalIntegrityError
from charmarket.core.marketplace import MarketplaceLedger
from charmarket.core.payments import BalanceBook, PaymentCredit
from charmarket.core.registry import TokenRegistry

__all__ = [
    "MarketplaceLedger",
    "TokenRegistry",
    "EventJournal",
    "JournalIntegrityError",
    "BalanceBook",
    "PaymentCredit",
    "ErrorKind",
    "MarketplaceError",
    "AssetNotFoundError",
    "UnauthorizedError",
    "InvalidPriceError",
    "WrongPaymentError",
    "NotForSaleError",
    "SelfPurchaseError",
    "SelfTransferError",
    "InvalidAddressError",
    "PaymentCreditError",
    "StaleLedgerError",
]
