"""Set membership -> terms clauses."""

from __future__ import annotations

from typing import Any

from ....operators import RuleOperator
from ..clauses import must_not


def compile_set(field: str, op: RuleOperator, val: Any) -> dict[str, Any] | None:
    """Compile set operators. Returns None if not a set op."""
    if op not in {RuleOperator.IN, RuleOperator.NOT_IN}:
        return None
    normalized = list(val) if isinstance(val, list | tuple) else [val]
    clause = {"terms": {field: normalized}}
    return clause if op is RuleOperator.IN else must_not(clause)
