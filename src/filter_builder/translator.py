"""
FormatTranslator — the four pure mappings between trees and wire formats.

All functions are deterministic and side-effect free. Forward mappings
validate the tree against the schema before translating; reverse mappings
validate the rebuilt tree. Neither coerces: a field absent from the schema
raises :class:`~filter_builder.exceptions.SchemaMismatchError`, an
unsupported operator or clause raises
:class:`~filter_builder.exceptions.TranslationError`.
"""

from __future__ import annotations

import logging
from typing import TYPE_CHECKING, Any

from .exceptions import FilterBuilderError
from .formats import OutputMode, get_format

if TYPE_CHECKING:
    from .schema import SchemaConfig
    from .tree import FilterTree

logger = logging.getLogger("filter_builder.translator")

_search = get_format(OutputMode.SEARCH_DSL)
_logic = get_format(OutputMode.LOGIC_EXPRESSION)


def to_search_filter(tree: FilterTree, schema: SchemaConfig) -> dict[str, Any]:
    return _search.to_wire(tree, schema)


def from_search_filter(data: dict[str, Any], schema: SchemaConfig) -> FilterTree:
    try:
        return _search.from_wire(data, schema)
    except FilterBuilderError as exc:
        logger.debug("Rejected search filter: %s", exc)
        raise


def to_logic_expression(tree: FilterTree, schema: SchemaConfig) -> dict[str, Any]:
    return _logic.to_wire(tree, schema)


def from_logic_expression(data: dict[str, Any], schema: SchemaConfig) -> FilterTree:
    try:
        return _logic.from_wire(data, schema)
    except FilterBuilderError as exc:
        logger.debug("Rejected logic expression: %s", exc)
        raise
