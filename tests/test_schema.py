"""Tests for schema validation and the exception hierarchy."""

from __future__ import annotations

import pytest

from filter_builder import (
    FieldType,
    FilterTree,
    Group,
    Rule,
    RuleOperator,
    SchemaConfig,
    SchemaMismatchError,
    TranslationError,
    collect_errors,
    validate_tree,
)
from filter_builder.exceptions import CountFetchError, LoadFailedError


def test_from_dict(schema: SchemaConfig):
    assert schema.has_field("owner")
    assert not schema.has_field("nope")
    size = schema.get("size")
    assert size is not None
    assert size.type is FieldType.NUMBER
    assert RuleOperator.BETWEEN in size.operators
    assert schema.field_names == ["description", "owner", "size", "tier"]


def test_valid_tree_passes(schema: SchemaConfig, alice: Rule):
    validate_tree(FilterTree.of(alice), schema)
    assert collect_errors(FilterTree.of(alice), schema) == []


def test_unknown_field_with_suggestion(schema: SchemaConfig):
    tree = FilterTree.of(Rule(field="ownr", operator="equal", value="alice"))
    with pytest.raises(SchemaMismatchError) as exc_info:
        validate_tree(tree, schema)
    err = exc_info.value
    assert err.field == "ownr"
    assert err.path == "root.children[0]"
    assert "owner" in err.suggestions
    assert "Did you mean" in str(err)
    d = err.to_dict()
    assert d["error"] == "SCHEMA_MISMATCH"
    assert d["field"] == "ownr"


def test_operator_not_allowed_for_field(schema: SchemaConfig):
    tree = FilterTree.of(Rule(field="tier", operator="greater", value="gold"))
    with pytest.raises(SchemaMismatchError, match="not allowed"):
        validate_tree(tree, schema)


@pytest.mark.parametrize(
    ("operator", "value"),
    [
        ("equal", None),
        ("equal", ["a", "b"]),
        ("between", [1]),
        ("between", [1, None]),
        ("in", []),
        ("in", "gold"),
        ("is_empty", "x"),
    ],
)
def test_value_shape_mismatch(schema: SchemaConfig, operator: str, value: object):
    field = {
        "equal": "owner",
        "between": "size",
        "in": "tier",
        "is_empty": "owner",
    }[operator]
    tree = FilterTree.of(Rule(field=field, operator=operator, value=value))
    with pytest.raises(SchemaMismatchError):
        validate_tree(tree, schema)


def test_collect_errors_reports_every_problem(schema: SchemaConfig, alice: Rule):
    tree = FilterTree.of(
        alice,
        Group(
            children=(
                Rule(field="colour", operator="equal", value="red"),
                Rule(field="size", operator="in", value=[1]),
            )
        ),
    )
    errors = collect_errors(tree, schema)
    assert len(errors) == 2
    assert errors[0].startswith("root.children[1].children[0]: Field 'colour'")
    assert errors[1].startswith("root.children[1].children[1]: Operator 'in'")


# -- Exceptions --------------------------------------------------------------


def test_translation_error_to_dict():
    err = TranslationError("nope", operator="like", path="root")
    assert str(err) == "nope (at root)"
    assert err.to_dict() == {
        "error": "TRANSLATION_ERROR",
        "message": "nope",
        "operator": "like",
        "path": "root",
    }


def test_other_error_codes():
    assert LoadFailedError("bad").to_dict()["error"] == "LOAD_FAILED"
    assert CountFetchError("down").to_dict()["error"] == "COUNT_FETCH_FAILED"
