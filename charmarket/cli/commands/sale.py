"""``charmarket list`` / ``reprice`` / ``buy``: the sale lifecycle."""

from __future__ import annotations

import typer

from charmarket.cli._context import (
    JOURNAL_OPTION_HELP,
    fail,
    open_ledger,
    parse_price,
    print_receipt,
    resolve_caller,
)
from charmarket.config import config
from charmarket.core.errors import (
    MarketplaceError,
    PaymentCreditError,
    StaleLedgerError,
)

_WEI_HELP = "Interpret amounts as integer wei instead of ether."


def list_cmd(
    asset_id: int = typer.Argument(..., help="Character id."),
    price: str = typer.Argument(..., help="Asking price in ether."),
    wei: bool = typer.Option(False, "--wei", help=_WEI_HELP),
    caller: str = typer.Option("", "--caller", "-c", help="Owner address."),
    journal_path: str = typer.Option(
        str(config.journal_path), "--journal", "-j", help=JOURNAL_OPTION_HELP
    ),
) -> None:
    """Put a character up for sale."""
    caller = resolve_caller(caller)
    amount = parse_price(price, wei)
    ledger = open_ledger(journal_path)
    try:
        print_receipt(ledger.list_for_sale(caller, asset_id, amount))
    except (MarketplaceError, StaleLedgerError) as exc:
        fail(exc)


def reprice_cmd(
    asset_id: int = typer.Argument(..., help="Character id."),
    price: str = typer.Argument(..., help="New asking price in ether."),
    wei: bool = typer.Option(False, "--wei", help=_WEI_HELP),
    caller: str = typer.Option("", "--caller", "-c", help="Owner address."),
    journal_path: str = typer.Option(
        str(config.journal_path), "--journal", "-j", help=JOURNAL_OPTION_HELP
    ),
) -> None:
    """Change the asking price of a listed character."""
    caller = resolve_caller(caller)
    amount = parse_price(price, wei)
    ledger = open_ledger(journal_path)
    try:
        print_receipt(ledger.reprice(caller, asset_id, amount))
    except (MarketplaceError, StaleLedgerError) as exc:
        fail(exc)


def buy_cmd(
    asset_id: int = typer.Argument(..., help="Character id."),
    value: str = typer.Option(..., "--value", "-v", help="Amount paid, in ether."),
    wei: bool = typer.Option(False, "--wei", help=_WEI_HELP),
    caller: str = typer.Option("", "--caller", "-c", help="Buyer address."),
    journal_path: str = typer.Option(
        str(config.journal_path), "--journal", "-j", help=JOURNAL_OPTION_HELP
    ),
) -> None:
    """Buy a listed character, paying exactly its price."""
    caller = resolve_caller(caller)
    amount = parse_price(value, wei)
    ledger = open_ledger(journal_path)
    try:
        print_receipt(ledger.buy(caller, asset_id, amount))
    except (MarketplaceError, PaymentCreditError, StaleLedgerError) as exc:
        fail(exc)
