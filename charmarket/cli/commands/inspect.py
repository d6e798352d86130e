"""Read-only commands: ``show``, ``history``, ``balance``, ``verify``.

None of these write to the journal.  ``history`` and ``verify`` read it
directly; ``show`` and ``balance`` read the ledger rebuilt from it.
"""

from __future__ import annotations

from pathlib import Path

import typer
from rich.table import Table

from charmarket.cli._context import (
    JOURNAL_OPTION_HELP,
    asset_table,
    console,
    fail,
    open_ledger,
)
from charmarket.config import config
from charmarket.core.errors import MarketplaceError
from charmarket.core.journal import EventJournal, JournalIntegrityError
from charmarket.core.units import format_ether

_KIND_STYLES: dict[str, str] = {
    "minted": "bold cyan",
    "listed": "green",
    "repriced": "yellow",
    "purchased": "bold magenta",
    "transferred": "blue",
}


def _short(address: str) -> str:
    return f"{address[:6]}...{address[-4:]}" if len(address) > 13 else address


def show_cmd(
    asset_id: int = typer.Argument(..., help="Character id."),
    journal_path: str = typer.Option(
        str(config.journal_path), "--journal", "-j", help=JOURNAL_OPTION_HELP
    ),
) -> None:
    """Show owner, metadata and listing of a character."""
    ledger = open_ledger(journal_path)
    try:
        record = ledger.get_asset(asset_id)
    except MarketplaceError as exc:
        fail(exc)
    console.print(asset_table(record))


def history_cmd(
    asset_id: int = typer.Option(
        None, "--asset", "-a", help="Only show events for this character."
    ),
    journal_path: str = typer.Option(
        str(config.journal_path), "--journal", "-j", help=JOURNAL_OPTION_HELP
    ),
) -> None:
    """Show journal events, oldest first."""
    journal = EventJournal(Path(journal_path))
    events = (
        journal.get_entries() if asset_id is None else journal.get_asset_history(asset_id)
    )
    if not events:
        console.print("[dim]No events recorded.[/dim]")
        return

    table = Table(title="Marketplace Journal")
    table.add_column("#", justify="right")
    table.add_column("Event", no_wrap=True)
    table.add_column("Asset", justify="right")
    table.add_column("Actor", style="cyan")
    table.add_column("Counterparty", style="cyan")
    table.add_column("Amount (ETH)", justify="right")
    table.add_column("Time (UTC)", style="dim")

    for event in events:
        style = _KIND_STYLES.get(event.kind.value, "")
        table.add_row(
            str(event.sequence),
            f"[{style}]{event.kind.value}[/{style}]" if style else event.kind.value,
            str(event.asset_id),
            _short(event.actor),
            _short(event.counterparty) if event.counterparty else "-",
            format_ether(event.amount) if event.amount else "-",
            event.timestamp_utc.strftime("%Y-%m-%d %H:%M:%S"),
        )
    console.print(table)


def balance_cmd(
    address: str = typer.Argument(..., help="Address to inspect."),
    journal_path: str = typer.Option(
        str(config.journal_path), "--journal", "-j", help=JOURNAL_OPTION_HELP
    ),
) -> None:
    """Show the sale proceeds credited to an address."""
    wei = open_ledger(journal_path).proceeds.balance_of(address)
    console.print(f"[bold]{format_ether(wei)} ETH[/bold] ({wei} wei) credited to {address}")


def verify_cmd(
    journal_path: str = typer.Option(
        str(config.journal_path), "--journal", "-j", help=JOURNAL_OPTION_HELP
    ),
) -> None:
    """Verify the journal hash chain."""
    journal = EventJournal(Path(journal_path))
    try:
        journal.verify_chain()
    except JournalIntegrityError as exc:
        console.print(f"[bold red]Chain INVALID:[/bold red] {exc}")
        raise typer.Exit(code=1)
    console.print(f"[green]Chain valid[/green] ({journal.count()} entries).")
