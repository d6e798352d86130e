"""Canonical hashing for journal entries and stored metadata."""

from __future__ import annotations

import hashlib
import json
from typing import Any


def canonical_json_bytes(obj: Any) -> bytes:
    """Serialize *obj* so equal documents always give equal bytes.

    Keys are sorted, separators carry no whitespace and non-ASCII text is
    escaped, so a metadata document or a journal entry hashes the same on
    every machine.
    """
    return json.dumps(
        obj, sort_keys=True, separators=(",", ":"), ensure_ascii=True
    ).encode("utf-8")


def sha256_hex(data: bytes) -> str:
    return hashlib.sha256(data).hexdigest()


def compute_entry_hash(entry_dict: dict[str, Any]) -> str:
    """Hash a journal entry as dumped by ``MarketEvent.model_dump(mode="json")``.

    The ``entry_hash`` key is left out; it is the value being computed.
    ``previous_entry_hash`` is included, which is what links the chain.
    """
    unsealed = {key: value for key, value in entry_dict.items() if key != "entry_hash"}
    return sha256_hex(canonical_json_bytes(unsealed))
