"""Search-engine bool-query wire format."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ...schema import validate_tree
from ..base import OutputMode, WireFormat
from .clauses import MATCH_ALL, is_match_all
from .compiler import compile_tree
from .parser import parse_filter

if TYPE_CHECKING:
    from ...schema import SchemaConfig
    from ...tree import FilterTree


class SearchFilterFormat(WireFormat):
    """Translates trees to ``bool.must/should/must_not`` clauses and back.

    The persisted value wraps the clause as ``{"query": <clause>}``.
    """

    @property
    def mode(self) -> OutputMode:
        return OutputMode.SEARCH_DSL

    def to_wire(self, tree: FilterTree, schema: SchemaConfig) -> dict[str, Any]:
        validate_tree(tree, schema)
        return compile_tree(tree)

    def from_wire(self, data: dict[str, Any], schema: SchemaConfig) -> FilterTree:
        tree = parse_filter(data, schema)
        validate_tree(tree, schema)
        return tree

    def wrap(self, data: dict[str, Any]) -> dict[str, Any]:
        return {"query": data}

    def unwrap(self, data: dict[str, Any]) -> dict[str, Any]:
        if set(data) == {"query"}:
            return data["query"] if isinstance(data["query"], dict) else data
        return data


__all__ = [
    "MATCH_ALL",
    "SearchFilterFormat",
    "compile_tree",
    "is_match_all",
    "parse_filter",
]
