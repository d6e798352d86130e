"""Local stand-in for the off-chain metadata store.

The ledger never reads these documents; it only keeps their locators.
"""

from charmarket.metadata.documents import build_character_metadata
from charmarket.metadata.store import MetadataIntegrityError, MetadataStore

__all__ = ["MetadataStore", "MetadataIntegrityError", "build_character_metadata"]
