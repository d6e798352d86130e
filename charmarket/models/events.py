"""Journal event model (append-only, hash-chained).

One event per successful ledger transition.  Replaying the events in
sequence order reproduces the registry exactly.
"""

from __future__ import annotations

import uuid
from datetime import datetime, timezone
from enum import Enum
from typing import Any

from pydantic import BaseModel, ConfigDict, Field


class EventKind(str, Enum):
    MINTED = "minted"
    LISTED = "listed"
    REPRICED = "repriced"
    PURCHASED = "purchased"
    TRANSFERRED = "transferred"


class MarketEvent(BaseModel):
    """A single entry in the event journal.

    ``sequence``, ``previous_entry_hash`` and ``entry_hash`` are assigned by
    the journal when the event is appended.
    """

    model_config = ConfigDict(frozen=True)

    entry_id: str = Field(default_factory=lambda: str(uuid.uuid4()))
    sequence: int = 0
    kind: EventKind
    asset_id: int
    actor: str  # the caller
    counterparty: str = ""  # seller for purchases, recipient for transfers
    amount: int = 0  # wei: listing price or settled payment
    payload: dict[str, Any] = {}  # mint metadata (uri, classe, nivel, poder)
    timestamp_utc: datetime = Field(
        default_factory=lambda: datetime.now(timezone.utc)
    )
    previous_entry_hash: str = ""
    entry_hash: str = ""  # computed on append, seals this entry
