"""charmarket: ownership and sale-listing ledger for collectible characters.

  - Sequential minting with verbatim character metadata (classe, nivel, poder, uri)
  - Owner-only listing, repricing and transfer
  - Exact-price purchases settled through an injectable payment capability
  - Append-only, hash-chained SQLite event journal; state rebuilt by replay
  - Local content-addressed metadata store
"""

__version__ = "0.1.0"
__description__ = "Ownership and marketplace ledger for unique collectible characters"

from charmarket.core.marketplace import MarketplaceLedger

__all__ = ["MarketplaceLedger", "__version__"]
