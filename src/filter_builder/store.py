"""FilterTreeStore — the single authoritative holder of the current tree."""

from __future__ import annotations

from .tree import FilterTree


class FilterTreeStore:
    """Holds the current tree; replaced wholesale, never mutated.

    No validation happens here — trees are checked lazily when they are
    translated.
    """

    def __init__(self, tree: FilterTree | None = None) -> None:
        self._current = tree if tree is not None else FilterTree.empty()
        self._previous: FilterTree | None = None
        self._version = 0

    def get_current(self) -> FilterTree:
        return self._current

    def replace(self, tree: FilterTree) -> None:
        self._previous = self._current
        self._current = tree
        self._version += 1

    @property
    def previous(self) -> FilterTree | None:
        """The tree replaced by the last ``replace`` call."""
        return self._previous

    @property
    def version(self) -> int:
        return self._version
