"""Tests for MarketplaceLedger: minting, accessors and the sale lifecycle."""

from __future__ import annotations

import pytest

from charmarket.core.errors import (
    AssetNotFoundError,
    ErrorKind,
    InvalidAddressError,
    InvalidPriceError,
    MarketplaceError,
    NotForSaleError,
    SelfPurchaseError,
    SelfTransferError,
    UnauthorizedError,
    WrongPaymentError,
)
from charmarket.core.marketplace import MarketplaceLedger
from charmarket.core.payments import BalanceBook
from charmarket.models.assets import ZERO_ADDRESS, CharacterAttributes
from charmarket.models.events import EventKind


class TestMint:
    def test_first_id_is_zero(self, market: MarketplaceLedger, alice: str):
        assert market.mint(alice, "ipfs://a", "Mago", 1, 100) == 0

    def test_ids_strictly_increasing(self, market: MarketplaceLedger, alice: str, bob: str):
        ids = [
            market.mint(alice, "ipfs://a", "Mago", 1, 100),
            market.mint(bob, "ipfs://b", "Orc", 2, 80),
            market.mint(alice, "ipfs://c", "Curandeiro", 3, 70),
        ]
        assert ids == [0, 1, 2]
        assert market.total_supply() == 3

    def test_caller_becomes_owner(self, market: MarketplaceLedger, bob: str):
        asset_id = market.mint(bob, "ipfs://b", "Guerreiro", 5, 120)
        assert market.owner_of(asset_id) == bob

    def test_not_for_sale_after_mint(self, market: MarketplaceLedger, minted: int):
        assert market.is_for_sale(minted) is False
        assert market.price_of(minted) == 0

    def test_metadata_stored_verbatim(self, market: MarketplaceLedger, alice: str):
        asset_id = market.mint(alice, "  not even a url ", "", -3, 0)
        assert market.uri_of(asset_id) == "  not even a url "
        assert market.attributes_of(asset_id) == CharacterAttributes(
            classe="", nivel=-3, poder=0
        )

    def test_zero_address_cannot_mint(self, market: MarketplaceLedger):
        with pytest.raises(InvalidAddressError):
            market.mint(ZERO_ADDRESS, "ipfs://a", "Mago", 1, 100)
        assert market.total_supply() == 0

    def test_mint_records_receipt(self, market: MarketplaceLedger, minted: int, alice: str):
        receipt = market.last_event
        assert receipt is not None
        assert receipt.kind == EventKind.MINTED
        assert receipt.asset_id == minted
        assert receipt.actor == alice
        assert receipt.payload["uri"] == "ipfs://a"


class TestAccessors:
    @pytest.mark.parametrize(
        "accessor", ["owner_of", "uri_of", "attributes_of", "price_of", "is_for_sale", "get_asset"]
    )
    def test_unknown_id_raises_not_found(self, market: MarketplaceLedger, accessor: str):
        with pytest.raises(AssetNotFoundError) as excinfo:
            getattr(market, accessor)(999)
        assert excinfo.value.kind == ErrorKind.NOT_FOUND
        assert excinfo.value.asset_id == 999

    def test_attributes(self, market: MarketplaceLedger, minted: int):
        attrs = market.attributes_of(minted)
        assert (attrs.classe, attrs.nivel, attrs.poder) == ("Mago", 1, 100)

    def test_addresses_compared_case_insensitively(self, market: MarketplaceLedger, alice: str, one_eth: int):
        asset_id = market.mint(alice.upper().replace("0X", "0x"), "ipfs://a", "Mago", 1, 100)
        assert market.owner_of(asset_id) == alice
        market.list_for_sale(f"  {alice}  ", asset_id, one_eth)
        assert market.is_for_sale(asset_id) is True


class TestListing:
    def test_owner_can_list(self, market: MarketplaceLedger, minted: int, alice: str, one_eth: int):
        receipt = market.list_for_sale(alice, minted, one_eth)
        assert market.is_for_sale(minted) is True
        assert market.price_of(minted) == one_eth
        assert receipt.kind == EventKind.LISTED
        assert receipt.amount == one_eth

    def test_non_owner_cannot_list(self, market: MarketplaceLedger, minted: int, alice: str, bob: str, one_eth: int):
        with pytest.raises(UnauthorizedError):
            market.list_for_sale(bob, minted, one_eth)
        assert market.owner_of(minted) == alice
        assert market.is_for_sale(minted) is False

    @pytest.mark.parametrize("price", [0, -1])
    def test_non_positive_price_rejected(self, market: MarketplaceLedger, minted: int, alice: str, price: int):
        with pytest.raises(InvalidPriceError):
            market.list_for_sale(alice, minted, price)
        assert market.is_for_sale(minted) is False

    def test_owner_check_precedes_price_check(self, market: MarketplaceLedger, minted: int, bob: str):
        with pytest.raises(UnauthorizedError):
            market.list_for_sale(bob, minted, 0)

    def test_list_unknown_asset(self, market: MarketplaceLedger, alice: str, one_eth: int):
        with pytest.raises(AssetNotFoundError):
            market.list_for_sale(alice, 999, one_eth)

    def test_relisting_replaces_price(self, market: MarketplaceLedger, listed: int, alice: str, one_eth: int):
        market.list_for_sale(alice, listed, 3 * one_eth)
        assert market.price_of(listed) == 3 * one_eth
        assert market.is_for_sale(listed) is True


class TestReprice:
    def test_owner_can_reprice(self, market: MarketplaceLedger, listed: int, alice: str, one_eth: int):
        receipt = market.reprice(alice, listed, 2 * one_eth)
        assert market.price_of(listed) == 2 * one_eth
        assert market.is_for_sale(listed) is True
        assert market.owner_of(listed) == alice
        assert receipt.kind == EventKind.REPRICED

    def test_non_owner_cannot_reprice(self, market: MarketplaceLedger, listed: int, bob: str, one_eth: int):
        with pytest.raises(UnauthorizedError):
            market.reprice(bob, listed, 2 * one_eth)
        assert market.price_of(listed) == one_eth

    def test_reprice_to_zero_rejected(self, market: MarketplaceLedger, listed: int, alice: str, one_eth: int):
        with pytest.raises(InvalidPriceError):
            market.reprice(alice, listed, 0)
        assert market.price_of(listed) == one_eth

    def test_reprice_on_unlisted_asset_lists_it(self, market: MarketplaceLedger, minted: int, alice: str, one_eth: int):
        market.reprice(alice, minted, one_eth)
        assert market.is_for_sale(minted) is True
        assert market.price_of(minted) == one_eth


class TestBuy:
    def test_buy_moves_ownership(self, market: MarketplaceLedger, listed: int, bob: str, one_eth: int):
        receipt = market.buy(bob, listed, one_eth)
        assert market.owner_of(listed) == bob
        assert market.is_for_sale(listed) is False
        assert market.price_of(listed) == 0
        assert receipt.kind == EventKind.PURCHASED

    def test_seller_is_credited(
        self, market: MarketplaceLedger, balances: BalanceBook, listed: int, alice: str, bob: str, one_eth: int
    ):
        market.buy(bob, listed, one_eth)
        assert balances.balance_of(alice) == one_eth
        assert balances.balance_of(bob) == 0

    def test_receipt_names_seller(self, market: MarketplaceLedger, listed: int, alice: str, bob: str, one_eth: int):
        receipt = market.buy(bob, listed, one_eth)
        assert receipt.actor == bob
        assert receipt.counterparty == alice
        assert receipt.amount == one_eth

    def test_owner_cannot_buy_own_asset(self, market: MarketplaceLedger, listed: int, alice: str, one_eth: int):
        with pytest.raises(SelfPurchaseError):
            market.buy(alice, listed, one_eth)

    @pytest.mark.parametrize("factor", [0.5, 2])
    def test_wrong_payment_rejected(
        self, market: MarketplaceLedger, balances: BalanceBook, listed: int, alice: str, bob: str, one_eth: int, factor: float
    ):
        with pytest.raises(WrongPaymentError):
            market.buy(bob, listed, int(one_eth * factor))
        assert market.owner_of(listed) == alice
        assert market.is_for_sale(listed) is True
        assert balances.balance_of(alice) == 0

    def test_unlisted_asset_cannot_be_bought(self, market: MarketplaceLedger, minted: int, alice: str, bob: str, one_eth: int):
        other = market.mint(alice, "ipfs://nao-venda.json", "Orc", 2, 80)
        with pytest.raises(NotForSaleError):
            market.buy(bob, other, one_eth)

    def test_not_for_sale_checked_before_self_purchase(self, market: MarketplaceLedger, minted: int, alice: str):
        with pytest.raises(NotForSaleError):
            market.buy(alice, minted, 0)

    def test_buy_unknown_asset(self, market: MarketplaceLedger, bob: str, one_eth: int):
        with pytest.raises(AssetNotFoundError):
            market.buy(bob, 42, one_eth)

    def test_new_owner_can_relist(self, market: MarketplaceLedger, listed: int, bob: str, carol: str, one_eth: int):
        market.buy(bob, listed, one_eth)
        market.list_for_sale(bob, listed, 5 * one_eth)
        market.buy(carol, listed, 5 * one_eth)
        assert market.owner_of(listed) == carol


class TestTransfer:
    def test_owner_can_transfer(self, market: MarketplaceLedger, minted: int, alice: str, bob: str):
        receipt = market.transfer(alice, bob, minted)
        assert market.owner_of(minted) == bob
        assert market.is_for_sale(minted) is False
        assert receipt.counterparty == bob

    def test_transfer_clears_listing(self, market: MarketplaceLedger, listed: int, alice: str, bob: str):
        market.transfer(alice, bob, listed)
        assert market.is_for_sale(listed) is False
        assert market.price_of(listed) == 0

    def test_stale_listing_cannot_be_bought_after_transfer(
        self, market: MarketplaceLedger, listed: int, alice: str, bob: str, carol: str, one_eth: int
    ):
        market.transfer(alice, bob, listed)
        with pytest.raises(NotForSaleError):
            market.buy(carol, listed, one_eth)

    def test_non_owner_cannot_transfer(self, market: MarketplaceLedger, minted: int, alice: str, bob: str, carol: str):
        with pytest.raises(UnauthorizedError):
            market.transfer(bob, carol, minted)
        assert market.owner_of(minted) == alice

    @pytest.mark.parametrize("target", [ZERO_ADDRESS, "", "   "])
    def test_zero_address_rejected(self, market: MarketplaceLedger, minted: int, alice: str, target: str):
        with pytest.raises(InvalidAddressError):
            market.transfer(alice, target, minted)
        assert market.owner_of(minted) == alice

    def test_self_transfer_rejected(self, market: MarketplaceLedger, minted: int, alice: str):
        with pytest.raises(SelfTransferError):
            market.transfer(alice, alice, minted)

    def test_transfer_unknown_asset(self, market: MarketplaceLedger, alice: str, bob: str):
        with pytest.raises(AssetNotFoundError) as excinfo:
            market.transfer(alice, bob, 999)
        assert excinfo.value.asset_id == 999

    def test_not_found_checked_first(self, market: MarketplaceLedger, bob: str):
        # Even with a zero recipient and a stranger as caller, NotFound wins.
        with pytest.raises(AssetNotFoundError):
            market.transfer(bob, ZERO_ADDRESS, 999)

    def test_unauthorized_checked_before_address(self, market: MarketplaceLedger, minted: int, bob: str):
        with pytest.raises(UnauthorizedError):
            market.transfer(bob, ZERO_ADDRESS, minted)


class TestScenarios:
    def test_mint_list_buy(self, market: MarketplaceLedger, alice: str, bob: str, one_eth: int):
        asset_id = market.mint(alice, "ipfs://a", "Mago", 1, 100)
        assert asset_id == 0
        market.list_for_sale(alice, 0, one_eth)
        assert market.is_for_sale(0) is True
        assert market.price_of(0) == one_eth
        market.buy(bob, 0, one_eth)
        assert market.owner_of(0) == bob
        assert market.is_for_sale(0) is False

    def test_every_failure_is_a_marketplace_error(self, market: MarketplaceLedger, listed: int, alice: str, bob: str):
        attempts = [
            lambda: market.list_for_sale(bob, listed, 1),
            lambda: market.reprice(alice, listed, 0),
            lambda: market.buy(alice, listed, 1),
            lambda: market.buy(bob, listed, 1),
            lambda: market.transfer(alice, alice, listed),
            lambda: market.transfer(alice, ZERO_ADDRESS, listed),
            lambda: market.owner_of(7),
        ]
        kinds = set()
        for attempt in attempts:
            with pytest.raises(MarketplaceError) as excinfo:
                attempt()
            kinds.add(excinfo.value.kind)
        assert len(kinds) == len(attempts)
