"""
Filter builder exception hierarchy with fuzzy-match suggestions.

All exceptions inherit from ``FilterBuilderError`` and provide
``to_dict()`` so the hosting editor can render them without parsing
messages.
"""

from __future__ import annotations

from difflib import get_close_matches
from typing import Any


class FilterBuilderError(Exception):
    """Base exception for all filter builder errors."""

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": self.__class__.__name__,
            "message": str(self),
        }


class SchemaMismatchError(FilterBuilderError):
    """
    A rule does not fit the schema: unknown field, operator not allowed
    for the field, or a value that does not match the operator's shape.

    Example error message::

        Field 'ownr' is not in the schema (at root.children[0])
        Did you mean one of these?
          • owner
        Available fields: owner, tier, updatedAt
    """

    def __init__(
        self,
        message: str,
        *,
        field: str | None = None,
        operator: str | None = None,
        path: str | None = None,
        available_fields: list[str] | None = None,
    ) -> None:
        self.message = message
        self.field = field
        self.operator = operator
        self.path = path
        self.available_fields = sorted(available_fields or [])
        self.suggestions = (
            get_close_matches(field, self.available_fields, n=3, cutoff=0.6)
            if field and available_fields
            else []
        )
        super().__init__(self._build_message())

    def _build_message(self) -> str:
        head = self.message if self.path is None else f"{self.message} (at {self.path})"
        lines = [head]
        if self.suggestions:
            lines.append("Did you mean one of these?")
            for s in self.suggestions:
                lines.append(f"  • {s}")
        if self.available_fields:
            preview = ", ".join(self.available_fields[:15])
            if len(self.available_fields) > 15:
                preview += ", ..."
            lines.append(f"Available fields: {preview}")
        return "\n".join(lines)

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "SCHEMA_MISMATCH",
            "message": self.message,
            "field": self.field,
            "operator": self.operator,
            "path": self.path,
            "suggestions": self.suggestions,
        }


class TranslationError(FilterBuilderError):
    """An operator or clause shape has no mapping in the target format."""

    def __init__(
        self,
        message: str,
        *,
        operator: str | None = None,
        path: str | None = None,
    ) -> None:
        self.message = message
        self.operator = operator
        self.path = path
        super().__init__(message if path is None else f"{message} (at {path})")

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "TRANSLATION_ERROR",
            "message": self.message,
            "operator": self.operator,
            "path": self.path,
        }


class LoadFailedError(FilterBuilderError):
    """A persisted value could not be parsed at all (e.g. malformed JSON)."""

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "LOAD_FAILED",
            "message": str(self),
        }


class CountFetchError(FilterBuilderError):
    """The count service failed or returned an unusable result."""

    def to_dict(self) -> dict[str, Any]:
        return {
            "error": "COUNT_FETCH_FAILED",
            "message": str(self),
        }
