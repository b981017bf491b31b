"""Comparison and between operators -> range clauses."""

from __future__ import annotations

from typing import Any

from ....exceptions import TranslationError
from ....operators import RuleOperator
from ..clauses import must_not

RANGE_BOUNDS: dict[RuleOperator, str] = {
    RuleOperator.LESS: "lt",
    RuleOperator.LESS_OR_EQUAL: "lte",
    RuleOperator.GREATER: "gt",
    RuleOperator.GREATER_OR_EQUAL: "gte",
}


def compile_range(field: str, op: RuleOperator, val: Any) -> dict[str, Any] | None:
    """Compile comparison/between operators. Returns None if not a range op."""
    bound = RANGE_BOUNDS.get(op)
    if bound is not None:
        return {"range": {field: {bound: val}}}

    if op is RuleOperator.BETWEEN:
        lo, hi = _validate_range_operand(val, op_name="between")
        return {"range": {field: {"gte": lo, "lte": hi}}}

    if op is RuleOperator.NOT_BETWEEN:
        lo, hi = _validate_range_operand(val, op_name="not_between")
        return must_not({"range": {field: {"gte": lo, "lte": hi}}})

    return None


def _validate_range_operand(val: Any, *, op_name: str) -> tuple[Any, Any]:
    if not isinstance(val, list | tuple) or len(val) != 2:
        raise TranslationError(
            f"{op_name} requires a list of two values", operator=op_name
        )
    return val[0], val[1]
