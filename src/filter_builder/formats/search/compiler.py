"""Search filter compiler: FilterTree -> bool-query clause."""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ...exceptions import TranslationError
from ...operators import Combinator
from ...tree import Group, Rule, thaw
from .clauses import MATCH_ALL, must_not
from .operators import compile_null, compile_range, compile_set, compile_standard

if TYPE_CHECKING:
    from ...tree import FilterTree

_COMPILERS = [
    compile_standard,
    compile_range,
    compile_set,
    compile_null,
]

_GROUP_KEYS: dict[Combinator, str] = {
    Combinator.AND: "must",
    Combinator.OR: "should",
}


def _compile_rule(rule: Rule, path: str) -> dict[str, Any]:
    value = thaw(rule.value)
    for compiler in _COMPILERS:
        result = compiler(rule.field, rule.operator, value)
        if result is not None:
            return result
    # Unknown operators never fall back to equality.
    raise TranslationError(
        f"Operator '{rule.operator.value}' cannot be expressed as a search filter",
        operator=rule.operator.value,
        path=path,
    )


def _compile_node(node: Rule | Group, path: str) -> dict[str, Any]:
    if isinstance(node, Rule):
        return _compile_rule(node, path)

    # Groups without any rule below them carry no condition.
    children = [
        (idx, child)
        for idx, child in enumerate(node.children)
        if not (isinstance(child, Group) and child.is_vacuous)
    ]
    if not children:
        return dict(MATCH_ALL)

    if node.combinator is Combinator.NOT:
        if len(children) != 1:
            raise TranslationError(
                "NOT group must contain exactly one condition",
                operator=Combinator.NOT.value,
                path=path,
            )
        idx, child = children[0]
        return must_not(_compile_node(child, f"{path}.children[{idx}]"))

    compiled = [
        _compile_node(child, f"{path}.children[{idx}]") for idx, child in children
    ]
    return {"bool": {_GROUP_KEYS[node.combinator]: compiled}}


def compile_tree(tree: FilterTree) -> dict[str, Any]:
    """Compile the whole tree; an empty tree yields ``{"match_all": {}}``."""
    return _compile_node(tree.root, "root")
