"""Staged inventory actions, for delta reports and for building a new version.

An ActionLog never touches an OcflObject. It only remembers what a caller
intends to do, keyed by digest. There is no rollback: start a new log to
reset.
"""

from __future__ import annotations

from enum import Enum

from ocfltools.core.pathset import PathSet


class ActionKind(str, Enum):
    """File-level operations that can be staged."""

    ADD = "add"
    UPDATE = "update"
    COPY = "copy"
    MOVE = "move"
    DELETE = "delete"


class ActionLog:
    """Accumulates add/update/copy/move/delete and fixity records."""

    def __init__(self) -> None:
        self._actions: dict[ActionKind, dict[str, PathSet]] = {
            kind: {} for kind in ActionKind
        }
        # Created on first record_fixity(): algorithm -> digest -> alt digest
        self._fixity: dict[str, dict[str, str]] | None = None

    def record(self, kind: ActionKind | str, digest: str, filepath: str) -> list[str]:
        """Stage ``filepath`` under ``digest`` for ``kind``.

        Recording the same pair twice is a no-op. Returns the paths now
        staged for that kind and digest.
        """
        paths = self._actions[ActionKind(kind)].setdefault(digest, PathSet())
        paths.add(filepath)
        return paths.to_list()

    def add(self, digest: str, filepath: str) -> list[str]:
        return self.record(ActionKind.ADD, digest, filepath)

    def update(self, digest: str, filepath: str) -> list[str]:
        return self.record(ActionKind.UPDATE, digest, filepath)

    def copy(self, digest: str, filepath: str) -> list[str]:
        return self.record(ActionKind.COPY, digest, filepath)

    def move(self, digest: str, filepath: str) -> list[str]:
        return self.record(ActionKind.MOVE, digest, filepath)

    def delete(self, digest: str, filepath: str) -> list[str]:
        return self.record(ActionKind.DELETE, digest, filepath)

    def record_fixity(self, algorithm: str, digest: str, alt_digest: str) -> str:
        """Stage an alternate-algorithm digest. The first value recorded wins."""
        if self._fixity is None:
            self._fixity = {}
        return self._fixity.setdefault(algorithm, {}).setdefault(digest, alt_digest)

    @property
    def actions(self) -> dict[str, dict]:
        """Everything recorded so far.

        One key per action kind (digest -> paths); a ``fixity`` key only
        once a fixity value has been recorded.
        """
        result: dict[str, dict] = {
            kind.value: {digest: paths.to_list() for digest, paths in by_digest.items()}
            for kind, by_digest in self._actions.items()
        }
        if self._fixity is not None:
            result["fixity"] = {alg: dict(block) for alg, block in self._fixity.items()}
        return result

    def all(self) -> dict[str, dict]:
        return self.actions

    def for_kind(self, kind: ActionKind | str) -> dict[str, list[str]]:
        return self.actions[ActionKind(kind).value]

    @property
    def is_empty(self) -> bool:
        return self._fixity is None and not any(self._actions.values())
