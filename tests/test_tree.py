"""Tests for the immutable filter tree and its store."""

from __future__ import annotations

import pytest
from pydantic import ValidationError

from filter_builder import (
    Combinator,
    FilterTree,
    FilterTreeStore,
    Group,
    Rule,
    RuleOperator,
)


@pytest.fixture
def nested() -> FilterTree:
    left = Group(children=(Rule(field="owner", operator="equal", value="alice"),))
    right = Group(
        combinator=Combinator.OR,
        children=(
            Rule(field="size", operator="greater", value=3),
            Rule(field="tier", operator="in", value=["gold"]),
        ),
    )
    return FilterTree.of(left, right)


# -- Construction ------------------------------------------------------------


def test_empty_tree_has_no_rules():
    tree = FilterTree.empty()
    assert tree.is_empty
    assert list(tree.rules()) == []
    assert tree.root.combinator is Combinator.AND


def test_nested_empty_groups_are_still_empty():
    tree = FilterTree.of(Group(children=(Group(),)), Group(combinator="or"))
    assert tree.is_empty


def test_rule_coerces_operator_and_freezes_list_values():
    rule = Rule(field="tier", operator="in", value=["gold", ["x", "y"]])
    assert rule.operator is RuleOperator.IN
    assert rule.value == ("gold", ("x", "y"))


def test_nodes_are_frozen(alice: Rule):
    with pytest.raises(ValidationError):
        alice.value = "bob"  # type: ignore[misc]


def test_walk_yields_paths(nested: FilterTree):
    paths = [path for path, _ in nested.walk()]
    assert paths == [
        "root",
        "root.children[0]",
        "root.children[0].children[0]",
        "root.children[1]",
        "root.children[1].children[0]",
        "root.children[1].children[1]",
    ]


def test_json_round_trip_keeps_ids(nested: FilterTree):
    restored = FilterTree.model_validate_json(nested.model_dump_json())
    assert restored == nested


# -- Edits -------------------------------------------------------------------


def test_add_returns_new_tree_and_keeps_previous(alice: Rule):
    before = FilterTree.empty()
    after = before.add(alice)
    assert before.is_empty
    assert list(after.rules()) == [alice]


def test_add_into_nested_group(nested: FilterTree, alice: Rule):
    target = nested.root.children[1]
    after = nested.add(alice, parent_id=target.id)
    assert after.find(target.id).children[-1] == alice  # type: ignore[union-attr]
    assert len(list(nested.rules())) == 3
    assert len(list(after.rules())) == 4


def test_add_into_rule_is_rejected(nested: FilterTree, alice: Rule):
    rule_id = nested.root.children[0].children[0].id  # type: ignore[union-attr]
    with pytest.raises(TypeError):
        nested.add(alice, parent_id=rule_id)


def test_update_shares_untouched_subtrees(nested: FilterTree):
    left, right = nested.root.children
    size_rule = right.children[0]  # type: ignore[union-attr]
    after = nested.update(size_rule.id, value=7)

    assert after.root.children[0] is left
    assert after.root.children[1] is not right
    assert after.find(size_rule.id).value == 7  # type: ignore[union-attr]
    assert nested.find(size_rule.id).value == 3  # type: ignore[union-attr]


def test_update_validates_changes(nested: FilterTree):
    rule_id = nested.root.children[0].children[0].id  # type: ignore[union-attr]
    with pytest.raises(ValidationError):
        nested.update(rule_id, operator="sounds_like")


def test_update_root_combinator(nested: FilterTree):
    after = nested.update(nested.root.id, combinator="or")
    assert after.root.combinator is Combinator.OR
    assert after.root.children == nested.root.children


def test_remove(nested: FilterTree):
    left = nested.root.children[0]
    after = nested.remove(left.id)
    assert after.find(left.id) is None
    assert nested.find(left.id) is left


def test_remove_root_is_rejected(nested: FilterTree):
    with pytest.raises(ValueError):
        nested.remove(nested.root.id)


def test_unknown_node_id(nested: FilterTree):
    with pytest.raises(KeyError):
        nested.remove("missing")
    with pytest.raises(KeyError):
        nested.update("missing", value=1)


# -- Store -------------------------------------------------------------------


def test_store_replace_tracks_previous_and_version(alice: Rule):
    store = FilterTreeStore()
    first = store.get_current()
    assert store.version == 0
    assert store.previous is None

    second = first.add(alice)
    store.replace(second)

    assert store.get_current() is second
    assert store.previous is first
    assert store.version == 1
