"""``charmarket transfer TO ID``: hand a character to another address."""

from __future__ import annotations

import typer

from charmarket.cli._context import (
    JOURNAL_OPTION_HELP,
    fail,
    open_ledger,
    print_receipt,
    resolve_caller,
)
from charmarket.config import config
from charmarket.core.errors import MarketplaceError, StaleLedgerError


def transfer_cmd(
    to_address: str = typer.Argument(..., help="Recipient address."),
    asset_id: int = typer.Argument(..., help="Character id."),
    caller: str = typer.Option("", "--caller", "-c", help="Owner address."),
    journal_path: str = typer.Option(
        str(config.journal_path), "--journal", "-j", help=JOURNAL_OPTION_HELP
    ),
) -> None:
    """Transfer a character.  Any open listing is cancelled."""
    caller = resolve_caller(caller)
    ledger = open_ledger(journal_path)
    try:
        print_receipt(ledger.transfer(caller, to_address, asset_id))
    except (MarketplaceError, StaleLedgerError) as exc:
        fail(exc)
