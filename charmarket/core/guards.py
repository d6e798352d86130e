"""Precondition checks shared by every ledger transition.

Each guard either returns quietly or raises the specific
``MarketplaceError``.  None of them mutates anything, so a transition can
run all of its guards before its first write.
"""

from __future__ import annotations

from charmarket.core.errors import (
    InvalidAddressError,
    InvalidPriceError,
    NotForSaleError,
    SelfPurchaseError,
    SelfTransferError,
    UnauthorizedError,
    WrongPaymentError,
)
from charmarket.core.registry import TokenRegistry
from charmarket.models.assets import (
    VALID_SALE_TRANSITIONS,
    AssetRecord,
    SaleOperation,
    is_zero_address,
)


def require_exists(registry: TokenRegistry, asset_id: int) -> AssetRecord:
    """Return the record for *asset_id*; raises ``AssetNotFoundError``."""
    return registry.get(asset_id)


def require_owner(record: AssetRecord, caller: str) -> None:
    if caller != record.owner:
        raise UnauthorizedError(
            f"{caller} is not the owner of asset {record.asset_id}.",
            asset_id=record.asset_id,
        )


def require_positive_price(record: AssetRecord, price: int) -> None:
    if price <= 0:
        raise InvalidPriceError(
            f"Price must be greater than zero, got {price}.",
            asset_id=record.asset_id,
        )


def require_for_sale(record: AssetRecord) -> None:
    if SaleOperation.BUY not in VALID_SALE_TRANSITIONS[record.sale_state]:
        raise NotForSaleError(
            f"Asset {record.asset_id} is not for sale.", asset_id=record.asset_id
        )


def require_not_owner(record: AssetRecord, caller: str) -> None:
    if caller == record.owner:
        raise SelfPurchaseError(
            f"{caller} already owns asset {record.asset_id}.",
            asset_id=record.asset_id,
        )


def require_exact_payment(record: AssetRecord, paid_amount: int) -> None:
    # Over- and under-payment are both rejected; there is no change to refund.
    if paid_amount != record.price:
        raise WrongPaymentError(
            f"Asset {record.asset_id} costs {record.price} wei, "
            f"got {paid_amount}.",
            asset_id=record.asset_id,
        )


def require_valid_address(address: str, asset_id: int | None = None) -> None:
    if is_zero_address(address):
        raise InvalidAddressError(
            f"Invalid address: {address!r}.", asset_id=asset_id
        )


def require_different_owner(record: AssetRecord, to_address: str) -> None:
    if to_address == record.owner:
        raise SelfTransferError(
            f"Asset {record.asset_id} is already owned by {to_address}.",
            asset_id=record.asset_id,
        )
