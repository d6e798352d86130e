"""Token Registry: the keyed asset store the marketplace ledger builds on.

Provides existence checks, owner lookup, sequential id issuance, per-id
metadata storage, and ownership reassignment.  It enforces no authorization;
the ledger runs every guard before calling a mutating method here, and each
mutating method is a single dict assignment.
"""

from __future__ import annotations

from collections.abc import Iterator

from charmarket.core.errors import AssetNotFoundError
from charmarket.models.assets import AssetRecord, CharacterAttributes


class TokenRegistry:
    """In-memory ``asset_id -> AssetRecord`` store plus the next-id counter.

    Ids are issued from 0, monotonically, and never reused (there is no
    delete).
    """

    def __init__(self) -> None:
        self._records: dict[int, AssetRecord] = {}
        self._next_id = 0

    # ------------------------------------------------------------------
    # Reads
    # ------------------------------------------------------------------

    @property
    def next_id(self) -> int:
        return self._next_id

    def __len__(self) -> int:
        return len(self._records)

    def __iter__(self) -> Iterator[AssetRecord]:
        return iter(self._records[i] for i in sorted(self._records))

    def exists(self, asset_id: int) -> bool:
        return asset_id in self._records

    def get(self, asset_id: int) -> AssetRecord:
        """Return the record for *asset_id* or raise ``AssetNotFoundError``."""
        record = self._records.get(asset_id)
        if record is None:
            raise AssetNotFoundError(
                f"Asset {asset_id} does not exist.", asset_id=asset_id
            )
        return record

    def owner_of(self, asset_id: int) -> str:
        return self.get(asset_id).owner

    # ------------------------------------------------------------------
    # Writes
    # ------------------------------------------------------------------

    def issue(
        self, owner: str, uri: str, attributes: CharacterAttributes
    ) -> AssetRecord:
        """Create a record under the next sequential id, not for sale."""
        record = AssetRecord(
            asset_id=self._next_id,
            owner=owner,
            uri=uri,
            attributes=attributes,
        )
        self._records[record.asset_id] = record
        self._next_id += 1
        return record

    def set_listing(self, asset_id: int, price: int) -> AssetRecord:
        record = self.get(asset_id).model_copy(
            update={"for_sale": True, "price": price}
        )
        self._records[asset_id] = record
        return record

    def reassign(self, asset_id: int, new_owner: str) -> AssetRecord:
        """Move ownership and clear any listing in one assignment."""
        record = self.get(asset_id).model_copy(
            update={"owner": new_owner, "for_sale": False, "price": 0}
        )
        self._records[asset_id] = record
        return record
