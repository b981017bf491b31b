"""Small constructors for bool-query clauses."""

from __future__ import annotations

from typing import Any

MATCH_ALL: dict[str, Any] = {"match_all": {}}


def must_not(clause: dict[str, Any]) -> dict[str, Any]:
    return {"bool": {"must_not": [clause]}}


def is_match_all(clause: Any) -> bool:
    return clause == {} or clause == MATCH_ALL
