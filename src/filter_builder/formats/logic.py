"""
Portable boolean-logic wire format.

Every node is ``{"operator": <name>, "operands": [...]}``. Groups use
``and`` / ``or`` / ``!`` over their children; rules use the rule operator
name with the field identifier as first operand::

    {"operator": "and", "operands": [
        {"operator": "equal", "operands": ["owner", "alice"]},
        {"operator": "between", "operands": ["size", 1, 10]},
        {"operator": "in", "operands": ["tier", ["gold", "silver"]]},
        {"operator": "is_empty", "operands": ["description"]},
    ]}
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ..exceptions import TranslationError
from ..operators import Combinator, OperandArity, RuleOperator, arity_of
from ..schema import validate_tree
from ..tree import FilterTree, Group, Rule, thaw
from .base import OutputMode, WireFormat

if TYPE_CHECKING:
    from ..schema import SchemaConfig

_COMBINATORS: dict[str, Combinator] = {c.value: c for c in Combinator}
_RULE_OPERATORS: dict[str, RuleOperator] = {op.value: op for op in RuleOperator}

# Operand count per arity, field operand included.
_OPERAND_COUNTS: dict[OperandArity, int] = {
    OperandArity.NONE: 1,
    OperandArity.SINGLE: 2,
    OperandArity.PAIR: 3,
    OperandArity.LIST: 2,
}


# ---------------------------------------------------------------------------
# Forward
# ---------------------------------------------------------------------------


def _compile_rule(rule: Rule) -> dict[str, Any]:
    arity = arity_of(rule.operator)
    value = thaw(rule.value)
    operands: list[Any] = [rule.field]
    if arity is OperandArity.SINGLE or arity is OperandArity.LIST:
        operands.append(value)
    elif arity is OperandArity.PAIR:
        operands.extend(value)
    return {"operator": rule.operator.value, "operands": operands}


def _compile_node(node: Rule | Group, path: str) -> dict[str, Any]:
    if isinstance(node, Rule):
        return _compile_rule(node)
    children = [
        (idx, child)
        for idx, child in enumerate(node.children)
        if not (isinstance(child, Group) and child.is_vacuous)
    ]
    if node.combinator is Combinator.NOT and len(children) > 1:
        raise TranslationError(
            "NOT group must contain exactly one condition",
            operator=Combinator.NOT.value,
            path=path,
        )
    return {
        "operator": node.combinator.value,
        "operands": [
            _compile_node(child, f"{path}.children[{idx}]") for idx, child in children
        ],
    }


def compile_expression(tree: FilterTree) -> dict[str, Any]:
    return _compile_node(tree.root, "root")


# ---------------------------------------------------------------------------
# Reverse
# ---------------------------------------------------------------------------


def _parse_rule(op: RuleOperator, operands: list[Any], path: str) -> Rule:
    arity = arity_of(op)
    expected = _OPERAND_COUNTS[arity]
    if len(operands) != expected:
        raise TranslationError(
            f"Operator '{op.value}' expects {expected} operand(s), "
            f"got {len(operands)}",
            operator=op.value,
            path=path,
        )
    field = operands[0]
    if not isinstance(field, str):
        raise TranslationError(
            "First operand of a rule must be a field identifier",
            operator=op.value,
            path=path,
        )
    if arity is OperandArity.NONE:
        value = None
    elif arity is OperandArity.PAIR:
        value = operands[1:]
    else:
        value = operands[1]
    return Rule(field=field, operator=op, value=value)


def _parse_node(expr: Any, path: str) -> Rule | Group:
    if not isinstance(expr, dict) or set(expr) != {"operator", "operands"}:
        raise TranslationError(
            "Expected an object with 'operator' and 'operands'", path=path
        )
    name, operands = expr["operator"], expr["operands"]
    if not isinstance(name, str):
        raise TranslationError("'operator' must be a string", path=path)
    if not isinstance(operands, list):
        raise TranslationError("'operands' must be a list", path=path)

    combinator = _COMBINATORS.get(name)
    if combinator is not None:
        if combinator is Combinator.NOT and len(operands) > 1:
            raise TranslationError(
                "'!' takes exactly one operand", operator=name, path=path
            )
        return Group(
            combinator=combinator,
            children=tuple(
                _parse_node(child, f"{path}.operands[{idx}]")
                for idx, child in enumerate(operands)
            ),
        )

    op = _RULE_OPERATORS.get(name)
    if op is None:
        raise TranslationError(
            f"Unknown operator '{name}'", operator=name, path=path
        )
    return _parse_rule(op, operands, path)


def parse_expression(expr: dict[str, Any]) -> FilterTree:
    node = _parse_node(expr, "expression")
    if isinstance(node, Rule):
        return FilterTree.of(node)
    return FilterTree(root=node)


class LogicExpressionFormat(WireFormat):
    """Translates trees to ``{operator, operands}`` expressions and back."""

    @property
    def mode(self) -> OutputMode:
        return OutputMode.LOGIC_EXPRESSION

    def to_wire(self, tree: FilterTree, schema: SchemaConfig) -> dict[str, Any]:
        validate_tree(tree, schema)
        return compile_expression(tree)

    def from_wire(self, data: dict[str, Any], schema: SchemaConfig) -> FilterTree:
        tree = parse_expression(data)
        validate_tree(tree, schema)
        return tree
