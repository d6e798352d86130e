"""Metadata store object models."""

from __future__ import annotations

from datetime import datetime, timezone

from pydantic import BaseModel, ConfigDict, Field


class StoredObject(BaseModel):
    """Describes bytes held by the metadata store.

    The ``locator`` is both the identity and the integrity check.  The ledger
    keeps it verbatim as an asset's ``uri``.
    """

    model_config = ConfigDict(frozen=True)

    locator: str  # "sha256:<hex>"
    name: str
    media_type: str = "application/octet-stream"
    size_bytes: int
    created_at: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )
