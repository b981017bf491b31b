"""Tests for the portable logic expression wire format."""

from __future__ import annotations

import json

import pytest

from filter_builder import (
    Combinator,
    FilterTree,
    Group,
    OutputMode,
    Rule,
    RuleOperator,
    SchemaConfig,
    SchemaMismatchError,
    TranslationError,
    from_logic_expression,
    get_format,
    to_logic_expression,
)


def test_single_rule_scenario(schema: SchemaConfig, alice: Rule):
    expected = {
        "operator": "and",
        "operands": [{"operator": "equal", "operands": ["owner", "alice"]}],
    }
    assert to_logic_expression(FilterTree.of(alice), schema) == expected

    value = get_format(OutputMode.LOGIC_EXPRESSION).serialize(
        FilterTree.of(alice), schema
    )
    assert json.loads(value) == expected


@pytest.mark.parametrize(
    ("rule", "operands"),
    [
        (Rule(field="owner", operator="is_empty"), ["owner"]),
        (Rule(field="size", operator="greater", value=3), ["size", 3]),
        (Rule(field="size", operator="between", value=[1, 9]), ["size", 1, 9]),
        (Rule(field="tier", operator="in", value=["gold"]), ["tier", ["gold"]]),
        (Rule(field="owner", operator="like", value="ali%"), ["owner", "ali%"]),
        (Rule(field="owner", operator="not_like", value="b%"), ["owner", "b%"]),
    ],
)
def test_rule_operands(schema: SchemaConfig, rule: Rule, operands: list):
    (compiled,) = to_logic_expression(FilterTree.of(rule), schema)["operands"]
    assert compiled == {"operator": rule.operator.value, "operands": operands}


def test_nested_groups(schema: SchemaConfig, alice: Rule):
    tree = FilterTree.of(
        alice,
        Group(
            combinator=Combinator.NOT,
            children=(Rule(field="tier", operator="equal", value="gold"),),
        ),
        Group(),
        combinator=Combinator.OR,
    )
    assert to_logic_expression(tree, schema) == {
        "operator": "or",
        "operands": [
            {"operator": "equal", "operands": ["owner", "alice"]},
            {
                "operator": "!",
                "operands": [{"operator": "equal", "operands": ["tier", "gold"]}],
            },
        ],
    }


def test_empty_tree(schema: SchemaConfig):
    assert to_logic_expression(FilterTree.empty(), schema) == {
        "operator": "and",
        "operands": [],
    }


def test_not_group_with_two_children(schema: SchemaConfig, alice: Rule):
    tree = FilterTree.of(
        alice, alice.model_copy(update={"id": "x"}), combinator=Combinator.NOT
    )
    with pytest.raises(TranslationError):
        to_logic_expression(tree, schema)


def test_schema_rejection(schema: SchemaConfig):
    tree = FilterTree.of(Rule(field="size", operator="like", value="1%"))
    with pytest.raises(SchemaMismatchError, match="not allowed"):
        to_logic_expression(tree, schema)


# -- Reverse -----------------------------------------------------------------


def test_reverse_bare_rule_is_wrapped(schema: SchemaConfig):
    tree = from_logic_expression(
        {"operator": "between", "operands": ["size", 1, 9]}, schema
    )
    assert tree.root.combinator is Combinator.AND
    (rule,) = tree.rules()
    assert rule.operator is RuleOperator.BETWEEN
    assert rule.value == (1, 9)


@pytest.mark.parametrize(
    ("expr", "message"),
    [
        ({"operator": "sounds_like", "operands": ["owner", "x"]}, "Unknown operator"),
        ({"operator": "equal", "operands": ["owner"]}, "expects 2"),
        ({"operator": "between", "operands": ["size", 1]}, "expects 3"),
        ({"operator": "equal", "operands": [3, "x"]}, "field identifier"),
        ({"operator": "and", "operands": {}}, "must be a list"),
        ({"operator": "and"}, "'operator' and 'operands'"),
        ({"operator": [], "operands": []}, "must be a string"),
        (
            {
                "operator": "!",
                "operands": [
                    {"operator": "is_empty", "operands": ["owner"]},
                    {"operator": "is_empty", "operands": ["tier"]},
                ],
            },
            "exactly one",
        ),
    ],
)
def test_reverse_errors(schema: SchemaConfig, expr: dict, message: str):
    with pytest.raises(TranslationError, match=message):
        from_logic_expression(expr, schema)


def test_reverse_unknown_field(schema: SchemaConfig):
    with pytest.raises(SchemaMismatchError):
        from_logic_expression(
            {"operator": "equal", "operands": ["colour", "red"]}, schema
        )


def test_round_trip(schema: SchemaConfig, alice: Rule):
    tree = FilterTree.of(
        alice,
        Group(
            combinator=Combinator.OR,
            children=(
                Rule(field="size", operator="not_between", value=[2, 4]),
                Rule(field="tier", operator="not_in", value=["gold", "silver"]),
                Group(
                    combinator=Combinator.NOT,
                    children=(Rule(field="description", operator="is_not_empty"),),
                ),
            ),
        ),
    )
    expr = to_logic_expression(tree, schema)
    restored = from_logic_expression(expr, schema)
    assert to_logic_expression(restored, schema) == expr
    assert [(r.field, r.operator, r.value) for r in restored.rules()] == [
        (r.field, r.operator, r.value) for r in tree.rules()
    ]
