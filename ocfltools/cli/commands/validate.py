"""``ocfltools validate OBJECT_ROOT``: structural and checksum validation.

Prints every finding in a table (or as JSON) and exits non-zero when any
error was recorded.
"""

from __future__ import annotations

import json
from pathlib import Path

import typer
from rich.console import Console
from rich.table import Table

from ocfltools.config import config as default_config
from ocfltools.core.errors import FormatInferenceError
from ocfltools.core.validator import OcflValidator
from ocfltools.models.reports import Severity

console = Console()

_SEVERITY_STYLE = {
    Severity.ERROR: "[bold red]error[/bold red]",
    Severity.WARNING: "[yellow]warning[/yellow]",
    Severity.OK: "[green]ok[/green]",
}


def validate_cmd(
    object_root: Path = typer.Argument(
        ...,
        help="Path to the OCFL object root directory.",
    ),
    checksums: bool = typer.Option(
        True,
        "--checksums/--no-checksums",
        help="Also recompute content digests and compare them to the manifest.",
    ),
    digest: str = typer.Option(
        None,
        "--digest",
        "-d",
        help="Verify content with this fixity algorithm instead of digestAlgorithm.",
    ),
    as_json: bool = typer.Option(
        False,
        "--json",
        help="Print the results as JSON.",
    ),
) -> None:
    """Validate an OCFL object root."""
    if not object_root.is_dir():
        console.print(f"[bold red]Object root not found:[/bold red] {object_root}")
        raise typer.Exit(code=1)

    validator = OcflValidator(object_root, config=default_config)
    try:
        results = validator.validate(checksums=checksums, digest=digest)
    except FormatInferenceError as exc:
        console.print(f"[bold red]Cannot determine version format:[/bold red] {exc}")
        raise typer.Exit(code=1)

    if as_json:
        typer.echo(json.dumps(results.to_dict(), indent=2))
    else:
        table = Table(title=f"OCFL validation: {object_root}")
        table.add_column("Severity")
        table.add_column("Code", style="cyan")
        table.add_column("Check")
        table.add_column("Message")
        for finding in results.findings:
            table.add_row(
                _SEVERITY_STYLE[finding.severity],
                finding.code,
                finding.check,
                finding.message,
            )
        console.print(table)
        console.print(
            f"[bold]{results.error_count}[/bold] errors, "
            f"[bold]{results.warning_count}[/bold] warnings"
        )

    if results.has_errors:
        raise typer.Exit(code=1)
