"""
Field/operator catalog supplied by the hosting form, and tree validation
against it.

Usage::

    schema = SchemaConfig.from_dict({
        "owner": {"type": "text", "operators": ["equal", "not_equal"]},
        "tier": {"type": "select", "operators": ["in"], "widget": "select"},
    })
    validate_tree(tree, schema)      # raises SchemaMismatchError
    collect_errors(tree, schema)     # -> list[str], never raises
"""

from __future__ import annotations

from enum import Enum
from typing import TYPE_CHECKING, Any

from pydantic import BaseModel, ConfigDict

from .exceptions import SchemaMismatchError
from .operators import OperandArity, RuleOperator, arity_of
from .tree import Rule

if TYPE_CHECKING:
    from .tree import FilterTree


class FieldType(str, Enum):
    TEXT = "text"
    NUMBER = "number"
    DATE = "date"
    BOOLEAN = "boolean"
    SELECT = "select"
    MULTISELECT = "multiselect"


class FieldSchema(BaseModel):
    """What the editor may do with one field."""

    model_config = ConfigDict(frozen=True)

    type: FieldType = FieldType.TEXT
    operators: frozenset[RuleOperator]
    widget: str = "text"
    label: str | None = None


class SchemaConfig(BaseModel):
    """Mapping of field identifier to :class:`FieldSchema`.

    Owned by the host and treated as immutable for one editing session.
    """

    model_config = ConfigDict(frozen=True)

    fields: dict[str, FieldSchema]

    @classmethod
    def from_dict(cls, data: dict[str, dict[str, Any]]) -> SchemaConfig:
        return cls.model_validate({"fields": data})

    def has_field(self, name: str) -> bool:
        return name in self.fields

    def get(self, name: str) -> FieldSchema | None:
        return self.fields.get(name)

    @property
    def field_names(self) -> list[str]:
        return sorted(self.fields)


# ---------------------------------------------------------------------------
# Validation
# ---------------------------------------------------------------------------


def validate_tree(tree: FilterTree, schema: SchemaConfig) -> None:
    """Raise :class:`SchemaMismatchError` for the first rule that does not fit."""
    for path, node in tree.walk():
        if isinstance(node, Rule):
            problem = _check_rule(node, schema, path)
            if problem is not None:
                raise problem


def collect_errors(tree: FilterTree, schema: SchemaConfig) -> list[str]:
    """Return every schema problem in *tree* (empty when the tree is valid)."""
    errors: list[str] = []
    for path, node in tree.walk():
        if isinstance(node, Rule):
            problem = _check_rule(node, schema, path)
            if problem is not None:
                errors.append(f"{path}: {problem.message}")
    return errors


def _check_rule(
    rule: Rule, schema: SchemaConfig, path: str
) -> SchemaMismatchError | None:
    field_schema = schema.get(rule.field)
    if field_schema is None:
        return SchemaMismatchError(
            f"Field '{rule.field}' is not in the schema",
            field=rule.field,
            operator=rule.operator.value,
            path=path,
            available_fields=schema.field_names,
        )
    if rule.operator not in field_schema.operators:
        allowed = ", ".join(sorted(op.value for op in field_schema.operators))
        return SchemaMismatchError(
            f"Operator '{rule.operator.value}' is not allowed for field "
            f"'{rule.field}' (allowed: {allowed})",
            field=rule.field,
            operator=rule.operator.value,
            path=path,
        )
    shape_error = _check_value_shape(rule)
    if shape_error is not None:
        return SchemaMismatchError(
            shape_error,
            field=rule.field,
            operator=rule.operator.value,
            path=path,
        )
    return None


def _check_value_shape(rule: Rule) -> str | None:
    arity = arity_of(rule.operator)
    value = rule.value
    op = rule.operator.value
    if arity is OperandArity.NONE:
        if value is not None:
            return f"Operator '{op}' takes no value"
        return None
    if arity is OperandArity.SINGLE:
        if value is None or isinstance(value, tuple):
            return f"Operator '{op}' requires a single value"
        return None
    if arity is OperandArity.PAIR:
        if not isinstance(value, tuple) or len(value) != 2 or None in value:
            return f"Operator '{op}' requires a list of two values"
        return None
    if not isinstance(value, tuple) or not value:
        return f"Operator '{op}' requires a non-empty list of values"
    return None
