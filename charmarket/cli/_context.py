"""Shared plumbing for CLI commands: ledger loading, prices, errors, output."""

from __future__ import annotations

from pathlib import Path
from typing import NoReturn

import typer
from rich.console import Console
from rich.table import Table

from charmarket.config import config
from charmarket.core.errors import (
    MarketplaceError,
    PaymentCreditError,
    StaleLedgerError,
)
from charmarket.core.journal import EventJournal, JournalIntegrityError
from charmarket.core.marketplace import MarketplaceLedger
from charmarket.core.units import format_ether, parse_ether
from charmarket.models.assets import AssetRecord
from charmarket.models.events import MarketEvent

console = Console()

JOURNAL_OPTION_HELP = "Path to the journal SQLite database."


def open_ledger(journal_path: str) -> MarketplaceLedger:
    """Rebuild the ledger from the journal at *journal_path*."""
    journal = EventJournal(Path(journal_path))
    try:
        return MarketplaceLedger.from_journal(journal)
    except JournalIntegrityError as exc:
        console.print(f"[bold red]Journal integrity check failed:[/bold red] {exc}")
        raise typer.Exit(code=1)


def resolve_caller(caller: str) -> str:
    resolved = caller or config.caller
    if not resolved:
        console.print(
            "[bold red]No caller given.[/bold red] "
            "Pass --caller or set CHARMARKET_CALLER."
        )
        raise typer.Exit(code=1)
    return resolved


def parse_price(text: str, wei: bool) -> int:
    try:
        return int(text) if wei else parse_ether(text)
    except ValueError as exc:
        console.print(f"[bold red]Invalid amount:[/bold red] {exc}")
        raise typer.Exit(code=1)


def fail(exc: MarketplaceError | PaymentCreditError | StaleLedgerError) -> NoReturn:
    """Report a rejected operation and exit with status 1."""
    if isinstance(exc, MarketplaceError):
        kind = exc.kind.value
    elif isinstance(exc, StaleLedgerError):
        kind = "stale_ledger"
    else:
        kind = "payment_failed"
    console.print(f"[bold red]Rejected ({kind}):[/bold red] {exc}")
    raise typer.Exit(code=1)


def asset_table(record: AssetRecord) -> Table:
    table = Table(title=f"Character #{record.asset_id}", show_header=False)
    table.add_column("Field", style="bold")
    table.add_column("Value")
    table.add_row("Owner", f"[cyan]{record.owner}[/cyan]")
    table.add_row("URI", record.uri)
    table.add_row("Classe", record.attributes.classe)
    table.add_row("Nivel", str(record.attributes.nivel))
    table.add_row("Poder", str(record.attributes.poder))
    if record.for_sale:
        table.add_row("For sale", "[green]Yes[/green]")
        table.add_row("Price", f"{format_ether(record.price)} ETH ({record.price} wei)")
    else:
        table.add_row("For sale", "[dim]No[/dim]")
    return table


def print_receipt(event: MarketEvent) -> None:
    console.print(
        f"[green]{event.kind.value}[/green] asset [bold]{event.asset_id}[/bold] "
        f"[dim](entry {event.sequence}, {event.entry_hash[:16]}...)[/dim]"
    )
