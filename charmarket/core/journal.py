"""Append-only, hash-chained event journal backed by SQLite.

The journal is the persisted form of the marketplace: every successful
transition appends exactly one ``MarketEvent``, and replaying the journal
rebuilds the registry.

Design:
- Append-only: writes only happen inside ``transaction()``; no update, no delete.
- Hash-chained: each entry includes SHA-256 of the previous entry.
- Transactional: entries appended in a ``transaction()`` block are committed
  only if the block exits normally.  Any exception rolls them back, which is
  how a failed payment credit leaves no trace.
- WAL journal mode for concurrent readers.
"""

from __future__ import annotations

import json
import logging
import sqlite3
from collections.abc import Iterator
from contextlib import contextmanager
from datetime import datetime
from pathlib import Path

from charmarket.core.hasher import compute_entry_hash
from charmarket.models.events import MarketEvent

logger = logging.getLogger(__name__)


# ---------------------------------------------------------------------------
# DDL
# ---------------------------------------------------------------------------

_CREATE_JOURNAL = """
CREATE TABLE IF NOT EXISTS market_journal (
    sequence              INTEGER PRIMARY KEY,
    entry_id              TEXT NOT NULL UNIQUE,
    kind                  TEXT NOT NULL,
    asset_id              INTEGER NOT NULL,
    actor                 TEXT NOT NULL,
    counterparty          TEXT NOT NULL DEFAULT '',
    amount                TEXT NOT NULL DEFAULT '0',
    payload_json          TEXT NOT NULL DEFAULT '{}',
    timestamp_utc         TEXT NOT NULL,
    previous_entry_hash   TEXT NOT NULL DEFAULT '',
    entry_hash            TEXT NOT NULL UNIQUE
);
"""

_CREATE_IDX_ASSET = """
CREATE INDEX IF NOT EXISTS idx_asset_id ON market_journal(asset_id, sequence);
"""

_SELECT_COLUMNS = (
    "sequence, entry_id, kind, asset_id, actor, counterparty, amount, "
    "payload_json, timestamp_utc, previous_entry_hash, entry_hash"
)


class JournalIntegrityError(RuntimeError):
    """Raised when the hash chain is broken."""


class JournalTransaction:
    """Stages appends on one open connection until the scope commits."""

    def __init__(self, conn: sqlite3.Connection) -> None:
        self._conn = conn
        row = conn.execute(
            "SELECT sequence, entry_hash FROM market_journal "
            "ORDER BY sequence DESC LIMIT 1"
        ).fetchone()
        self._last_sequence = row[0] if row else 0
        self._last_hash = row[1] if row else ""

    @property
    def head_hash(self) -> str:
        """Hash of the newest entry visible to this transaction ("" if empty)."""
        return self._last_hash

    def append(self, event: MarketEvent) -> MarketEvent:
        """Seal *event* onto the chain and insert it (uncommitted)."""
        sequence = self._last_sequence + 1
        entry_dict = event.model_dump(mode="json")
        entry_dict["sequence"] = sequence
        entry_dict["previous_entry_hash"] = self._last_hash
        entry_dict["entry_hash"] = ""
        entry_hash = compute_entry_hash(entry_dict)

        sealed = event.model_copy(
            update={
                "sequence": sequence,
                "previous_entry_hash": self._last_hash,
                "entry_hash": entry_hash,
            }
        )
        self._insert(sealed)
        self._last_sequence = sequence
        self._last_hash = entry_hash
        return sealed

    def _insert(self, event: MarketEvent) -> None:
        self._conn.execute(
            f"INSERT INTO market_journal ({_SELECT_COLUMNS}) "
            "VALUES (?, ?, ?, ?, ?, ?, ?, ?, ?, ?, ?)",
            (
                event.sequence,
                event.entry_id,
                event.kind.value,
                event.asset_id,
                event.actor,
                event.counterparty,
                # wei amounts overflow SQLite's 64-bit INTEGER
                str(event.amount),
                json.dumps(event.payload, sort_keys=True),
                event.timestamp_utc.isoformat(),
                event.previous_entry_hash,
                event.entry_hash,
            ),
        )


class EventJournal:
    """Append-only, hash-chained marketplace journal.

    Parameters
    ----------
    db_path:
        Path to the SQLite database file. Created if it does not exist.
    """

    def __init__(self, db_path: Path) -> None:
        self._db_path = Path(db_path)
        self._db_path.parent.mkdir(parents=True, exist_ok=True)
        self._init_schema()

    @property
    def db_path(self) -> Path:
        return self._db_path

    def _connect(self) -> sqlite3.Connection:
        conn = sqlite3.connect(str(self._db_path), check_same_thread=False)
        conn.execute("PRAGMA journal_mode=WAL")
        return conn

    def _init_schema(self) -> None:
        with self._connect() as conn:
            conn.execute(_CREATE_JOURNAL)
            conn.execute(_CREATE_IDX_ASSET)
            conn.commit()

    # ------------------------------------------------------------------
    # Core: transactional append
    # ------------------------------------------------------------------

    @contextmanager
    def transaction(self) -> Iterator[JournalTransaction]:
        """Open a write scope.  Commits on normal exit, rolls back on error."""
        conn = self._connect()
        try:
            # Take the write lock before reading the head so no other writer
            # can append between the read and our insert.
            conn.execute("BEGIN IMMEDIATE")
            yield JournalTransaction(conn)
            conn.commit()
        except BaseException:
            conn.rollback()
            logger.debug("Rolled back journal transaction on %s.", self._db_path)
            raise
        finally:
            conn.close()

    def append(self, event: MarketEvent) -> MarketEvent:
        """Append a single event in its own transaction."""
        with self.transaction() as txn:
            return txn.append(event)

    # ------------------------------------------------------------------
    # Query methods (read-only)
    # ------------------------------------------------------------------

    def get_entries(self) -> list[MarketEvent]:
        """Return every event, in sequence order."""
        with self._connect() as conn:
            rows = conn.execute(
                f"SELECT {_SELECT_COLUMNS} FROM market_journal ORDER BY sequence ASC"
            ).fetchall()
        return [self._row_to_event(row) for row in rows]

    def get_asset_history(self, asset_id: int) -> list[MarketEvent]:
        """Return every event touching *asset_id*, oldest first."""
        with self._connect() as conn:
            rows = conn.execute(
                f"SELECT {_SELECT_COLUMNS} FROM market_journal "
                "WHERE asset_id = ? ORDER BY sequence ASC",
                (asset_id,),
            ).fetchall()
        return [self._row_to_event(row) for row in rows]

    def get_latest(self) -> MarketEvent | None:
        """Return the most recent event, or None."""
        with self._connect() as conn:
            row = conn.execute(
                f"SELECT {_SELECT_COLUMNS} FROM market_journal "
                "ORDER BY sequence DESC LIMIT 1"
            ).fetchone()
        return self._row_to_event(row) if row else None

    def count(self) -> int:
        with self._connect() as conn:
            (n,) = conn.execute("SELECT COUNT(*) FROM market_journal").fetchone()
        return n

    # ------------------------------------------------------------------
    # Chain verification
    # ------------------------------------------------------------------

    def verify_chain(self) -> bool:
        """Verify the hash chain integrity of the whole journal.

        Walks all entries in order, recomputes each entry_hash, and
        verifies that previous_entry_hash links and sequence numbers match.

        Returns True if the chain is valid, raises JournalIntegrityError otherwise.
        """
        prev_hash = ""
        expected_sequence = 1
        for event in self.get_entries():
            if event.sequence != expected_sequence:
                raise JournalIntegrityError(
                    f"Chain broken at entry {event.entry_id}: "
                    f"expected sequence {expected_sequence}, got {event.sequence}"
                )
            if event.previous_entry_hash != prev_hash:
                raise JournalIntegrityError(
                    f"Chain broken at entry {event.entry_id}: "
                    f"expected previous_hash={prev_hash!r}, "
                    f"got {event.previous_entry_hash!r}"
                )

            expected_hash = compute_entry_hash(event.model_dump(mode="json"))
            if event.entry_hash != expected_hash:
                raise JournalIntegrityError(
                    f"Tampered entry {event.entry_id}: "
                    f"expected hash={expected_hash!r}, "
                    f"got {event.entry_hash!r}"
                )

            prev_hash = event.entry_hash
            expected_sequence += 1

        return True

    # ------------------------------------------------------------------
    # Internal helpers
    # ------------------------------------------------------------------

    @staticmethod
    def _row_to_event(row: tuple) -> MarketEvent:
        """Convert a SQLite row tuple to a MarketEvent."""
        (
            sequence,
            entry_id,
            kind,
            asset_id,
            actor,
            counterparty,
            amount,
            payload_json,
            timestamp_utc,
            previous_entry_hash,
            entry_hash,
        ) = row
        return MarketEvent(
            sequence=sequence,
            entry_id=entry_id,
            kind=kind,
            asset_id=asset_id,
            actor=actor,
            counterparty=counterparty,
            amount=int(amount),
            payload=json.loads(payload_json),
            timestamp_utc=datetime.fromisoformat(timestamp_utc),
            previous_entry_hash=previous_entry_hash,
            entry_hash=entry_hash,
        )
