"""Shared test fixtures for charmarket."""

from __future__ import annotations

from pathlib import Path

import pytest

from charmarket.core.journal import EventJournal
from charmarket.core.marketplace import MarketplaceLedger
from charmarket.core.payments import BalanceBook
from charmarket.core.units import WEI_PER_ETHER
from charmarket.metadata.store import MetadataStore

# Hardhat's first three default accounts.
ALICE = "0xf39fd6e51aad88f6f4ce6ab8827279cfffb92266"
BOB = "0x70997970c51812dc3a010c7d01b50e0d17dc79c8"
CAROL = "0x3c44cdddb6a900fa2b585dd299e03d12fa4293bc"

ONE_ETH = WEI_PER_ETHER


@pytest.fixture
def alice() -> str:
    return ALICE


@pytest.fixture
def bob() -> str:
    return BOB


@pytest.fixture
def carol() -> str:
    return CAROL


@pytest.fixture
def one_eth() -> int:
    return ONE_ETH


@pytest.fixture
def tmp_dir(tmp_path: Path) -> Path:
    """Provide a temporary directory for test artifacts."""
    return tmp_path


@pytest.fixture
def journal(tmp_dir: Path) -> EventJournal:
    """Provide a fresh EventJournal backed by a temp SQLite database."""
    return EventJournal(tmp_dir / "test_journal.db")


@pytest.fixture
def metadata_store(tmp_dir: Path) -> MetadataStore:
    """Provide a fresh MetadataStore in a temp directory."""
    return MetadataStore(tmp_dir / "metadata")


@pytest.fixture
def balances() -> BalanceBook:
    return BalanceBook()


@pytest.fixture
def market(balances: BalanceBook) -> MarketplaceLedger:
    """An in-memory ledger (no journal) crediting into ``balances``."""
    return MarketplaceLedger(payments=balances)


@pytest.fixture
def minted(market: MarketplaceLedger) -> int:
    """Alice mints ("ipfs://a", "Mago", 1, 100) -> id 0."""
    return market.mint(ALICE, "ipfs://a", "Mago", 1, 100)


@pytest.fixture
def listed(market: MarketplaceLedger, minted: int) -> int:
    """Alice's asset 0, listed at 1 ETH."""
    market.list_for_sale(ALICE, minted, ONE_ETH)
    return minted
