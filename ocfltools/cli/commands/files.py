"""``ocfltools files OBJECT_ROOT``: list the logical files of a version."""

from __future__ import annotations

from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from ocfltools.config import config as default_config
from ocfltools.core.errors import InventoryParseError, NotFoundError
from ocfltools.core.inventory_io import load_inventory

console = Console()


def files_cmd(
    object_root: Path = typer.Argument(
        ...,
        help="Path to the OCFL object root (or an inventory.json file).",
    ),
    version: int = typer.Option(
        None,
        "--version",
        "-v",
        help="Version number to list. Defaults to head.",
    ),
) -> None:
    """Show logical paths and where their content lives in the object."""
    try:
        inventory = load_inventory(object_root, config=default_config)
    except InventoryParseError as exc:
        console.print(f"[bold red]Cannot load inventory:[/bold red] {exc}")
        raise typer.Exit(code=1)

    number = version if version is not None else inventory.head
    try:
        files = inventory.get_files(number)
    except NotFoundError as exc:
        console.print(f"[bold red]{exc}[/bold red]")
        raise typer.Exit(code=1)

    table = Table(title=f"{inventory.id} @ {inventory.version_format.format(number)}")
    table.add_column("Logical path", style="cyan")
    table.add_column("Content path")
    table.add_column("Digest", style="dim")
    for logical, physical in sorted(files.items()):
        digest = inventory.get_digest(logical, number)
        table.add_row(logical, physical, digest[:16])
    console.print(table)
