"""ocfltools CLI: Typer-based command-line interface.

Provides the ``ocfltools`` command with subcommands for validating object
roots and listing the files of an object version.

All output uses Rich for formatted terminal display.
"""
