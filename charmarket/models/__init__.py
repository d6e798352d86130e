"""charmarket data models: all Pydantic v2, all frozen (immutable)."""

from charmarket.models.assets import (
    VALID_SALE_TRANSITIONS,
    ZERO_ADDRESS,
    AssetRecord,
    CharacterAttributes,
    SaleOperation,
    SaleState,
    is_zero_address,
    normalize_address,
)
from charmarket.models.events import EventKind, MarketEvent
from charmarket.models.metadata import StoredObject

__all__ = [
    # assets
    "AssetRecord",
    "CharacterAttributes",
    "SaleOperation",
    "SaleState",
    "VALID_SALE_TRANSITIONS",
    "ZERO_ADDRESS",
    "is_zero_address",
    "normalize_address",
    # events
    "EventKind",
    "MarketEvent",
    # metadata
    "StoredObject",
]
