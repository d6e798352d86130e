"""Marketplace ledger: ownership and sale-listing state machine.

Enforces:
- Owner-only list, reprice and transfer
- Exact-price purchase settlement, payment credited to the seller
- Listing cleared on every ownership change
- Every guard checked before the first write; failures change nothing
- Every successful transition recorded in the event journal (when one is
  attached), in the same commit scope as the payment credit
"""

from __future__ import annotations

import logging
from collections.abc import Callable, Iterator
from contextlib import contextmanager

from charmarket.core import guards
from charmarket.core.errors import MarketplaceError, StaleLedgerError
from charmarket.core.journal import (
    EventJournal,
    JournalIntegrityError,
    JournalTransaction,
)
from charmarket.core.payments import BalanceBook, PaymentCredit
from charmarket.core.registry import TokenRegistry
from charmarket.models.assets import (
    AssetRecord,
    CharacterAttributes,
    normalize_address,
)
from charmarket.models.events import EventKind, MarketEvent

logger = logging.getLogger(__name__)


class MarketplaceLedger:
    """Ledger of unique characters, their owners and their sale listings.

    The caller is an explicit argument of every mutating operation.  The
    host serializes calls; the ledger takes no locks.

    Parameters
    ----------
    payments:
        Capability used to credit the seller during ``buy``.  Defaults to an
        in-process ``BalanceBook``.
    journal:
        Optional ``EventJournal``.  When given, each transition is appended
        to it and the journal write commits together with the payment credit.
    registry:
        The keyed asset store.  A fresh ``TokenRegistry`` by default.

    Examples
    --------
    >>> ledger = MarketplaceLedger()
    >>> ledger.mint("0xa", "ipfs://a", "Mago", 1, 100)
    0
    >>> ledger.is_for_sale(0)
    False
    """

    def __init__(
        self,
        payments: PaymentCredit | None = None,
        journal: EventJournal | None = None,
        registry: TokenRegistry | None = None,
    ) -> None:
        self._payments = payments if payments is not None else BalanceBook()
        self._journal = journal
        self._registry = registry if registry is not None else TokenRegistry()
        self._proceeds = BalanceBook()
        self._last_event: MarketEvent | None = None

    @classmethod
    def from_journal(
        cls,
        journal: EventJournal,
        payments: PaymentCredit | None = None,
    ) -> MarketplaceLedger:
        """Rebuild a ledger by replaying every event in *journal*.

        The chain is verified first.  Past purchases are tallied in
        ``proceeds``; *payments* is only used by later ``buy`` calls and
        is never credited during replay.
        """
        journal.verify_chain()
        ledger = cls(payments=payments, journal=journal)
        events = journal.get_entries()
        for event in events:
            ledger._apply(event)
        ledger._last_event = events[-1] if events else None
        logger.debug(
            "Replayed %d event(s); %d asset(s) in registry.",
            len(events),
            len(ledger._registry),
        )
        return ledger

    @property
    def payments(self) -> PaymentCredit:
        return self._payments

    @property
    def proceeds(self) -> BalanceBook:
        """Sale proceeds per seller, as recorded by this ledger's purchases."""
        return self._proceeds

    @property
    def journal(self) -> EventJournal | None:
        return self._journal

    @property
    def last_event(self) -> MarketEvent | None:
        """Receipt of the most recent successful transition."""
        return self._last_event

    # ------------------------------------------------------------------
    # Identity & metadata
    # ------------------------------------------------------------------

    def mint(
        self, caller: str, uri: str, classe: str, nivel: int, poder: int
    ) -> int:
        """Mint a new character owned by *caller* and return its id.

        Metadata is stored verbatim.  The asset starts not for sale.
        """
        caller = normalize_address(caller)
        attributes = CharacterAttributes(classe=classe, nivel=nivel, poder=poder)
        with self._guarded("mint"):
            guards.require_valid_address(caller)

        asset_id = self._registry.next_id
        event = MarketEvent(
            kind=EventKind.MINTED,
            asset_id=asset_id,
            actor=caller,
            payload={"uri": uri, **attributes.model_dump()},
        )
        self._commit(event)
        logger.info("Minted asset %d (%s) for %s.", asset_id, classe, caller)
        return asset_id

    def get_asset(self, asset_id: int) -> AssetRecord:
        return self._registry.get(asset_id)

    def owner_of(self, asset_id: int) -> str:
        return self._registry.owner_of(asset_id)

    def uri_of(self, asset_id: int) -> str:
        return self._registry.get(asset_id).uri

    def attributes_of(self, asset_id: int) -> CharacterAttributes:
        return self._registry.get(asset_id).attributes

    def price_of(self, asset_id: int) -> int:
        """Listing price in wei; 0 when the asset is not for sale."""
        return self._registry.get(asset_id).price

    def is_for_sale(self, asset_id: int) -> bool:
        return self._registry.get(asset_id).for_sale

    def total_supply(self) -> int:
        return self._registry.next_id

    # ------------------------------------------------------------------
    # Sale lifecycle
    # ------------------------------------------------------------------

    def list_for_sale(self, caller: str, asset_id: int, price: int) -> MarketEvent:
        """Put *asset_id* up for sale at *price* wei (or change its price)."""
        return self._set_price(caller, asset_id, price, EventKind.LISTED)

    def reprice(self, caller: str, asset_id: int, new_price: int) -> MarketEvent:
        """Change the asking price.  Shares the list transition and guards."""
        return self._set_price(caller, asset_id, new_price, EventKind.REPRICED)

    def buy(self, caller: str, asset_id: int, paid_amount: int) -> MarketEvent:
        """Settle a purchase of *asset_id* paying exactly the listed price.

        The seller is credited *paid_amount* before ownership moves.  If the
        credit raises, the purchase is aborted and nothing changes.
        """
        caller = normalize_address(caller)
        with self._guarded("buy", asset_id):
            record = guards.require_exists(self._registry, asset_id)
            guards.require_for_sale(record)
            guards.require_not_owner(record, caller)
            guards.require_exact_payment(record, paid_amount)

        seller = record.owner
        event = MarketEvent(
            kind=EventKind.PURCHASED,
            asset_id=asset_id,
            actor=caller,
            counterparty=seller,
            amount=paid_amount,
        )
        sealed = self._commit(
            event, settle=lambda: self._payments.credit(seller, paid_amount)
        )
        logger.info(
            "Asset %d sold by %s to %s for %d wei.",
            asset_id,
            seller,
            caller,
            paid_amount,
        )
        return sealed

    def transfer(self, caller: str, to_address: str, asset_id: int) -> MarketEvent:
        """Give *asset_id* to *to_address*.  Any listing is cleared."""
        caller = normalize_address(caller)
        to_address = normalize_address(to_address)
        with self._guarded("transfer", asset_id):
            record = guards.require_exists(self._registry, asset_id)
            guards.require_owner(record, caller)
            guards.require_valid_address(to_address, asset_id)
            guards.require_different_owner(record, to_address)

        event = MarketEvent(
            kind=EventKind.TRANSFERRED,
            asset_id=asset_id,
            actor=caller,
            counterparty=to_address,
        )
        sealed = self._commit(event)
        logger.info("Asset %d transferred from %s to %s.", asset_id, caller, to_address)
        return sealed

    def _set_price(
        self, caller: str, asset_id: int, price: int, kind: EventKind
    ) -> MarketEvent:
        caller = normalize_address(caller)
        with self._guarded(kind.value, asset_id):
            record = guards.require_exists(self._registry, asset_id)
            guards.require_owner(record, caller)
            guards.require_positive_price(record, price)

        event = MarketEvent(kind=kind, asset_id=asset_id, actor=caller, amount=price)
        sealed = self._commit(event)
        logger.info("Asset %d %s at %d wei by %s.", asset_id, kind.value, price, caller)
        return sealed

    # ------------------------------------------------------------------
    # Commit machinery
    # ------------------------------------------------------------------

    @contextmanager
    def _guarded(self, operation: str, asset_id: int | None = None) -> Iterator[None]:
        """Log rejected transitions; the error itself propagates unchanged."""
        try:
            yield
        except MarketplaceError as exc:
            logger.warning(
                "Rejected %s on asset %s: %s (%s).",
                operation,
                asset_id,
                exc,
                exc.kind.value,
            )
            raise

    @contextmanager
    def _scope(self) -> Iterator[JournalTransaction | None]:
        if self._journal is None:
            yield None
        else:
            with self._journal.transaction() as txn:
                yield txn

    def _commit(
        self, event: MarketEvent, settle: Callable[[], None] | None = None
    ) -> MarketEvent:
        """Journal *event*, run *settle*, then apply the event in memory.

        The journal append and the settlement share one commit scope, so a
        failed credit leaves no journal entry.  The in-memory writes run only
        after the scope has committed and cannot fail.

        Raises ``StaleLedgerError`` (nothing written, nothing credited) when
        the journal head is not this ledger's last event.
        """
        with self._scope() as txn:
            if txn is not None:
                expected = self._last_event.entry_hash if self._last_event else ""
                if txn.head_hash != expected:
                    logger.warning(
                        "Journal %s moved past this ledger; %s rejected.",
                        self._journal.db_path,
                        event.kind.value,
                    )
                    raise StaleLedgerError(
                        f"Journal head {txn.head_hash[:16]!r} does not match "
                        f"ledger head {expected[:16]!r}; rebuild from the journal"
                    )
            sealed = txn.append(event) if txn is not None else event
            if settle is not None:
                settle()
        self._apply(sealed)
        self._last_event = sealed
        return sealed

    def _apply(self, event: MarketEvent) -> None:
        """Write an already-validated event into the registry."""
        if event.kind is EventKind.MINTED:
            if event.asset_id != self._registry.next_id:
                raise JournalIntegrityError(
                    f"Mint of asset {event.asset_id} out of order: "
                    f"next id is {self._registry.next_id}"
                )
            payload = event.payload
            self._registry.issue(
                owner=event.actor,
                uri=payload["uri"],
                attributes=CharacterAttributes(
                    classe=payload["classe"],
                    nivel=payload["nivel"],
                    poder=payload["poder"],
                ),
            )
        elif event.kind in (EventKind.LISTED, EventKind.REPRICED):
            self._registry.set_listing(event.asset_id, event.amount)
        elif event.kind is EventKind.PURCHASED:
            self._registry.reassign(event.asset_id, event.actor)
            self._proceeds.credit(event.counterparty, event.amount)
        elif event.kind is EventKind.TRANSFERRED:
            self._registry.reassign(event.asset_id, event.counterparty)
