"""``charmarket mint``: mint a new character.

Pass exactly one of ``--uri`` or ``--image``.  With an image, the
image and a generated metadata document are written to the local metadata
store and the document's locator becomes the character's uri.
"""

from __future__ import annotations

from pathlib import Path

import typer

from charmarket.cli._context import (
    JOURNAL_OPTION_HELP,
    asset_table,
    console,
    fail,
    open_ledger,
    resolve_caller,
)
from charmarket.config import config
from charmarket.core.errors import MarketplaceError, StaleLedgerError
from charmarket.metadata import MetadataStore, build_character_metadata
from charmarket.metadata.documents import character_name


def mint_cmd(
    classe: str = typer.Option(..., "--classe", help="Character class, e.g. Mago."),
    nivel: int = typer.Option(..., "--nivel", help="Character level."),
    poder: int = typer.Option(..., "--poder", help="Character power."),
    uri: str = typer.Option("", "--uri", "-u", help="Existing metadata locator."),
    image: Path = typer.Option(
        None, "--image", "-i", help="Image file to store with generated metadata."
    ),
    caller: str = typer.Option("", "--caller", "-c", help="Minting address."),
    journal_path: str = typer.Option(
        str(config.journal_path), "--journal", "-j", help=JOURNAL_OPTION_HELP
    ),
    metadata_dir: str = typer.Option(
        str(config.metadata_store_path),
        "--metadata-dir",
        help="Path to the local metadata store.",
    ),
) -> None:
    """Mint a character owned by the caller and print its id."""
    caller = resolve_caller(caller)
    if not uri and image is None:
        console.print("[bold red]Provide --uri or --image.[/bold red]")
        raise typer.Exit(code=1)
    if uri and image is not None:
        console.print("[bold red]Pass either --uri or --image, not both.[/bold red]")
        raise typer.Exit(code=1)

    if image is not None:
        if not image.is_file():
            console.print(f"[bold red]Image not found:[/bold red] {image}")
            raise typer.Exit(code=1)
        store = MetadataStore(Path(metadata_dir))
        stored_image = store.store_bytes(image.read_bytes(), name=image.name)
        document = build_character_metadata(classe, nivel, poder, stored_image.locator)
        uri = store.store_json(document, name=character_name(classe, nivel)).locator

    ledger = open_ledger(journal_path)
    try:
        asset_id = ledger.mint(caller, uri, classe, nivel, poder)
    except (MarketplaceError, StaleLedgerError) as exc:
        fail(exc)

    console.print(asset_table(ledger.get_asset(asset_id)))
    # Print the id plainly for scripting
    console.print(f"[bold]{asset_id}[/bold]")
