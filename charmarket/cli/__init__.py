"""charmarket CLI: Typer-based command-line interface.

Provides the ``charmarket`` command with subcommands for minting, listing,
buying and transferring characters, and for inspecting the journal.

All output uses Rich for formatted terminal display.
"""
