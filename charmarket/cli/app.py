"""Main Typer application: imports and registers all CLI commands.

Entry point: ``charmarket`` (configured via pyproject.toml scripts).
"""

from __future__ import annotations

import logging

import typer
from rich.console import Console
from rich.logging import RichHandler

from charmarket.cli.commands.inspect import (
    balance_cmd,
    history_cmd,
    show_cmd,
    verify_cmd,
)
from charmarket.cli.commands.mint import mint_cmd
from charmarket.cli.commands.sale import buy_cmd, list_cmd, reprice_cmd
from charmarket.cli.commands.transfer import transfer_cmd
from charmarket.config import config

app = typer.Typer(
    name="charmarket",
    help="charmarket: ownership and marketplace ledger for collectible characters.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)


@app.callback()
def configure_logging(
    verbose: bool = typer.Option(False, "--verbose", help="Log at DEBUG level."),
) -> None:
    """Set up Rich logging once per invocation."""
    logging.basicConfig(
        level=logging.DEBUG if verbose or config.debug else config.log_level,
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


# Register subcommands
app.command(name="mint", help="Mint a new character.")(mint_cmd)
app.command(name="list", help="Put a character up for sale.")(list_cmd)
app.command(name="reprice", help="Change a listed character's price.")(reprice_cmd)
app.command(name="buy", help="Buy a listed character.")(buy_cmd)
app.command(name="transfer", help="Transfer a character to another address.")(transfer_cmd)
app.command(name="show", help="Show a character.")(show_cmd)
app.command(name="history", help="Show the journal.")(history_cmd)
app.command(name="balance", help="Show sale proceeds credited to an address.")(balance_cmd)
app.command(name="verify", help="Verify the journal hash chain.")(verify_cmd)


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
