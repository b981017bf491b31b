"""Empty / not-empty checks -> exists clauses."""

from __future__ import annotations

from typing import Any

from ....operators import RuleOperator
from ..clauses import must_not


def compile_null(field: str, op: RuleOperator, _val: Any) -> dict[str, Any] | None:
    """Compile existence operators. Returns None if not an existence op."""
    if op is RuleOperator.IS_NOT_EMPTY:
        return {"exists": {"field": field}}
    if op is RuleOperator.IS_EMPTY:
        return must_not({"exists": {"field": field}})
    return None
