"""Asset, attribute and sale-state models.

Records are frozen.  Ownership and listing changes never mutate a record in
place; the registry swaps in a ``model_copy`` with the updated fields.
"""

from __future__ import annotations

from enum import Enum

from pydantic import BaseModel, ConfigDict

ZERO_ADDRESS = "0x" + "0" * 40


def normalize_address(address: str) -> str:
    """Return the comparable form of *address* (stripped, lower case)."""
    return address.strip().lower()


def is_zero_address(address: str) -> bool:
    """An empty address counts as the zero address."""
    normalized = normalize_address(address)
    return normalized in ("", ZERO_ADDRESS)


class SaleState(str, Enum):
    """Per-asset listing state.  There is no terminal state."""

    NOT_FOR_SALE = "not_for_sale"
    FOR_SALE = "for_sale"


class SaleOperation(str, Enum):
    LIST = "list"
    REPRICE = "reprice"
    BUY = "buy"
    TRANSFER = "transfer"


# Operations legal from each state.  Ownership changes (BUY, TRANSFER) always
# land in NOT_FOR_SALE; LIST and REPRICE always land in FOR_SALE.
VALID_SALE_TRANSITIONS: dict[SaleState, set[SaleOperation]] = {
    SaleState.NOT_FOR_SALE: {
        SaleOperation.LIST,
        SaleOperation.REPRICE,
        SaleOperation.TRANSFER,
    },
    SaleState.FOR_SALE: {
        SaleOperation.LIST,
        SaleOperation.REPRICE,
        SaleOperation.BUY,
        SaleOperation.TRANSFER,
    },
}


class CharacterAttributes(BaseModel):
    """Game attributes fixed at mint time.  Stored verbatim, never validated."""

    model_config = ConfigDict(frozen=True)

    classe: str
    nivel: int
    poder: int


class AssetRecord(BaseModel):
    """The persisted per-asset record.

    ``price`` is only meaningful while ``for_sale`` is true; a cleared
    listing always carries ``price == 0``.
    """

    model_config = ConfigDict(frozen=True)

    asset_id: int
    owner: str
    uri: str
    attributes: CharacterAttributes
    for_sale: bool = False
    price: int = 0  # wei

    @property
    def sale_state(self) -> SaleState:
        return SaleState.FOR_SALE if self.for_sale else SaleState.NOT_FOR_SALE
