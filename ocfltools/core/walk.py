"""Filesystem traversal with cancellation checkpoints.

Every directory listing and every file visit checks the caller's cancel
event first, so long walks over large objects stay interruptible.
"""

from __future__ import annotations

import threading
from collections.abc import Iterator
from pathlib import Path

from ocfltools.core.errors import ValidationCancelledError


def check_cancelled(cancel_event: threading.Event | None) -> None:
    if cancel_event is not None and cancel_event.is_set():
        raise ValidationCancelledError("Validation cancelled")


def list_entries(
    directory: Path, cancel_event: threading.Event | None = None
) -> tuple[list[str], list[str]]:
    """Return (file names, directory names) directly under ``directory``, sorted.

    Symbolic links are never followed: a link to a directory is listed
    with the files.
    """
    check_cancelled(cancel_event)
    files: list[str] = []
    dirs: list[str] = []
    for entry in Path(directory).iterdir():
        if entry.is_dir() and not entry.is_symlink():
            dirs.append(entry.name)
        else:
            files.append(entry.name)
    return sorted(files), sorted(dirs)


def iter_files(
    directory: Path, cancel_event: threading.Event | None = None
) -> Iterator[Path]:
    """Yield every non-directory entry below ``directory``, depth first, in name order."""
    files, dirs = list_entries(directory, cancel_event)
    for name in files:
        check_cancelled(cancel_event)
        yield Path(directory) / name
    for name in dirs:
        yield from iter_files(Path(directory) / name, cancel_event)
