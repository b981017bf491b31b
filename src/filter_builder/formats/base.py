"""WireFormat — the forward/reverse strategy every output format implements."""

from __future__ import annotations

import json
from abc import ABC, abstractmethod
from enum import Enum
from typing import TYPE_CHECKING, Any

from pydantic import ValidationError

from ..exceptions import LoadFailedError

if TYPE_CHECKING:
    from ..schema import SchemaConfig
    from ..tree import FilterTree


class OutputMode(str, Enum):
    """Which wire format an editor instance produces and consumes."""

    SEARCH_DSL = "elasticsearch"
    LOGIC_EXPRESSION = "jsonlogic"


def dumps(data: Any) -> str:
    """Compact, key-order-preserving JSON used for every persisted value."""
    return json.dumps(data, separators=(",", ":"), ensure_ascii=False)


class WireFormat(ABC):
    """
    Strategy interface for one wire format.

    ``to_wire`` / ``from_wire`` work on JSON-shaped dicts; ``serialize`` /
    ``deserialize`` add the envelope and the string encoding of the
    persisted value.
    """

    @property
    @abstractmethod
    def mode(self) -> OutputMode:
        """The output mode this strategy serves."""
        ...

    @abstractmethod
    def to_wire(self, tree: FilterTree, schema: SchemaConfig) -> dict[str, Any]:
        """Translate a tree; raises SchemaMismatchError or TranslationError."""
        ...

    @abstractmethod
    def from_wire(self, data: dict[str, Any], schema: SchemaConfig) -> FilterTree:
        """Rebuild a tree; raises SchemaMismatchError or TranslationError."""
        ...

    # -- envelope ------------------------------------------------------------

    def wrap(self, data: dict[str, Any]) -> dict[str, Any]:
        return data

    def unwrap(self, data: dict[str, Any]) -> dict[str, Any]:
        return data

    # -- persisted value -----------------------------------------------------

    def serialize(self, tree: FilterTree, schema: SchemaConfig) -> str:
        return dumps(self.wrap(self.to_wire(tree, schema)))

    def deserialize(self, value: str, schema: SchemaConfig) -> FilterTree:
        try:
            data = json.loads(value)
        except json.JSONDecodeError as exc:
            raise LoadFailedError(f"Invalid JSON: {exc}") from exc
        if not isinstance(data, dict):
            raise LoadFailedError("Top-level JSON value must be an object")
        try:
            return self.from_wire(self.unwrap(data), schema)
        except ValidationError as exc:
            raise LoadFailedError(f"Invalid filter node: {exc}") from exc
