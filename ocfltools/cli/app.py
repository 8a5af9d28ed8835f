"""Main Typer application: imports and registers all CLI commands.

Entry point: ``ocfltools`` (configured via pyproject.toml scripts).
"""

from __future__ import annotations

import logging

import typer
from rich.console import Console
from rich.logging import RichHandler

from ocfltools.cli.commands.files import files_cmd
from ocfltools.cli.commands.validate import validate_cmd
from ocfltools.config import config

app = typer.Typer(
    name="ocfltools",
    help="ocfltools: inspect and validate OCFL objects.",
    no_args_is_help=True,
    rich_markup_mode="rich",
    add_completion=False,
)


@app.callback()
def main_callback(
    log_level: str = typer.Option(
        None, "--log-level", help="Logging level (defaults to OCFLTOOLS_LOG_LEVEL)."
    ),
) -> None:
    """Configure logging once for every command."""
    logging.basicConfig(
        level=(log_level or config.log_level).upper(),
        format="%(message)s",
        handlers=[RichHandler(console=Console(stderr=True), show_path=False)],
        force=True,
    )


# Register subcommands
app.command(name="validate", help="Validate an OCFL object root.")(validate_cmd)
app.command(name="files", help="List the logical files of an object version.")(files_cmd)


def main() -> None:
    """CLI entry point."""
    app()


if __name__ == "__main__":
    main()
