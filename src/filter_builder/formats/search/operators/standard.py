"""Equality operators -> term clauses."""

from __future__ import annotations

from typing import Any

from ....operators import RuleOperator
from ..clauses import must_not


def compile_standard(field: str, op: RuleOperator, val: Any) -> dict[str, Any] | None:
    """Compile equality operators. Returns None if not an equality op."""
    if op is RuleOperator.EQUAL:
        return {"term": {field: val}}
    if op is RuleOperator.NOT_EQUAL:
        return must_not({"term": {field: val}})
    return None
