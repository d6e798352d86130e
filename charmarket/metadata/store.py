"""Local content-addressed metadata store.

Stands in for the off-chain content store: images and JSON metadata
documents go in, an opaque ``sha256:<hex>`` locator comes out, and the
ledger keeps that locator verbatim as the asset's ``uri``.

Storage layout: {base_path}/{sha256[0:2]}/{sha256[2:4]}/{sha256}.dat
No delete method; objects are immutable once stored.
"""

from __future__ import annotations

import json
import logging
from pathlib import Path
from typing import Any

from charmarket.core.hasher import canonical_json_bytes, sha256_hex
from charmarket.models.metadata import StoredObject

logger = logging.getLogger(__name__)


class MetadataIntegrityError(RuntimeError):
    """Raised when a stored object's hash does not match its locator."""


class MetadataStore:
    """SHA-256 keyed, immutable object store.

    Storing the same content twice is a no-op (idempotent). There is no
    update or delete.

    Parameters
    ----------
    base_path:
        Root directory for object storage.
    """

    def __init__(self, base_path: Path) -> None:
        self._base = Path(base_path)
        self._base.mkdir(parents=True, exist_ok=True)

    @staticmethod
    def _extract_digest(locator: str) -> str:
        """Strip the ``sha256:`` prefix from a locator, if present."""
        return locator.removeprefix("sha256:")

    def _object_path(self, sha256_digest: str) -> Path:
        return self._base / sha256_digest[:2] / sha256_digest[2:4] / f"{sha256_digest}.dat"

    # ------------------------------------------------------------------
    # Store
    # ------------------------------------------------------------------

    def store_bytes(
        self,
        data: bytes,
        *,
        name: str = "",
        media_type: str = "application/octet-stream",
    ) -> StoredObject:
        """Store raw bytes (an image, say) and return their locator.

        If the content already exists, verifies integrity and returns the
        existing object without overwriting.
        """
        digest = sha256_hex(data)
        path = self._object_path(digest)

        if path.exists():
            if not self.verify(digest):
                raise MetadataIntegrityError(
                    f"Existing object at {digest} failed integrity check"
                )
        else:
            path.parent.mkdir(parents=True, exist_ok=True)
            path.write_bytes(data)
            logger.info("Stored %d byte(s) as sha256:%s.", len(data), digest[:16])

        return StoredObject(
            locator=f"sha256:{digest}",
            name=name or digest[:16],
            media_type=media_type,
            size_bytes=len(data),
        )

    def store_json(self, document: dict[str, Any], *, name: str = "") -> StoredObject:
        """Store a JSON document in canonical form."""
        return self.store_bytes(
            canonical_json_bytes(document),
            name=name,
            media_type="application/json",
        )

    # ------------------------------------------------------------------
    # Retrieve
    # ------------------------------------------------------------------

    def retrieve(self, locator: str) -> bytes:
        """Retrieve bytes by locator ("sha256:<hex>" or the bare digest)."""
        path = self._object_path(self._extract_digest(locator))
        if not path.exists():
            raise FileNotFoundError(f"Object not found: {locator}")
        return path.read_bytes()

    def retrieve_json(self, locator: str) -> dict[str, Any]:
        return json.loads(self.retrieve(locator).decode("utf-8"))

    # ------------------------------------------------------------------
    # Check and verify
    # ------------------------------------------------------------------

    def exists(self, locator: str) -> bool:
        return self._object_path(self._extract_digest(locator)).exists()

    def verify(self, locator: str) -> bool:
        """Re-hash stored data and compare against the locator."""
        digest = self._extract_digest(locator)
        path = self._object_path(digest)
        if not path.exists():
            return False
        return sha256_hex(path.read_bytes()) == digest
