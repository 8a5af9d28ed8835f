"""Ordered, duplicate-free path sequences.

Manifest, state, fixity and action blocks all map a digest to a list of
paths. Those lists keep first-insertion order and never hold the same
path twice.
"""

from __future__ import annotations

from collections.abc import Iterable, Iterator, MutableSet


class PathSet(MutableSet):
    """An insertion-ordered set of path strings.

    Backed by a dict so membership is O(1) and iteration follows the order
    paths were first added. Re-adding a path is a no-op and keeps its
    original position.
    """

    __slots__ = ("_items",)

    def __init__(self, paths: Iterable[str] = ()) -> None:
        self._items: dict[str, None] = dict.fromkeys(paths)

    def __contains__(self, path: object) -> bool:
        return path in self._items

    def __iter__(self) -> Iterator[str]:
        return iter(self._items)

    def __len__(self) -> int:
        return len(self._items)

    def __getitem__(self, index: int) -> str:
        return list(self._items)[index]

    def __eq__(self, other: object) -> bool:
        if isinstance(other, PathSet):
            return list(self) == list(other)
        if isinstance(other, list):
            return list(self) == other
        return super().__eq__(other)

    __hash__ = None  # mutable

    def __repr__(self) -> str:
        return f"PathSet({list(self._items)!r})"

    def add(self, path: str) -> None:
        self._items.setdefault(path, None)

    def discard(self, path: str) -> None:
        self._items.pop(path, None)

    def first(self) -> str:
        """Return the earliest path added."""
        return next(iter(self._items))

    def copy(self) -> PathSet:
        return PathSet(self._items)

    def to_list(self) -> list[str]:
        return list(self._items)
