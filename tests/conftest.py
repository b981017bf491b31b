"""Shared fixtures for filter builder tests."""

from __future__ import annotations

from typing import Any

import pytest

from filter_builder import Rule, SchemaConfig


@pytest.fixture
def schema() -> SchemaConfig:
    """Catalog covering every operator family."""
    return SchemaConfig.from_dict(
        {
            "owner": {
                "type": "text",
                "operators": [
                    "equal",
                    "not_equal",
                    "in",
                    "not_in",
                    "is_empty",
                    "is_not_empty",
                    "like",
                    "not_like",
                ],
            },
            "tier": {
                "type": "select",
                "operators": ["equal", "not_equal", "in", "not_in"],
                "widget": "select",
            },
            "size": {
                "type": "number",
                "operators": [
                    "equal",
                    "less",
                    "less_or_equal",
                    "greater",
                    "greater_or_equal",
                    "between",
                    "not_between",
                ],
                "widget": "number",
            },
            "description": {
                "type": "text",
                "operators": ["is_empty", "is_not_empty", "like"],
            },
        }
    )


@pytest.fixture
def alice() -> Rule:
    return Rule(field="owner", operator="equal", value="alice")


DOCUMENTS: list[dict[str, Any]] = [
    {"owner": "alice", "tier": "gold", "size": 5, "description": "orders"},
    {"owner": "bob", "tier": "silver", "size": 12},
    {"owner": "carol", "tier": ["gold", "bronze"], "size": 1, "description": ""},
    {"tier": "bronze", "size": 30, "description": "customers"},
    {"owner": "alice", "size": 10},
]


def _values(doc: dict[str, Any], field: str) -> list[Any]:
    value = doc.get(field)
    if value is None:
        return []
    return value if isinstance(value, list) else [value]


_BOUNDS = {
    "lt": lambda a, b: a < b,
    "lte": lambda a, b: a <= b,
    "gt": lambda a, b: a > b,
    "gte": lambda a, b: a >= b,
}


def search_matches(clause: dict[str, Any], doc: dict[str, Any]) -> bool:
    """Minimal bool-query evaluator, enough to compare matching document sets."""
    ((kind, body),) = clause.items()
    if kind == "match_all":
        return True
    if kind == "bool":
        must = body.get("must", []) + body.get("filter", [])
        ok = all(search_matches(c, doc) for c in must)
        ok = ok and not any(search_matches(c, doc) for c in body.get("must_not", []))
        if body.get("should"):
            ok = ok and any(search_matches(c, doc) for c in body["should"])
        return ok
    if kind == "exists":
        return any(v != "" for v in _values(doc, body["field"]))
    ((field, spec),) = body.items()
    values = _values(doc, field)
    if kind == "term":
        return spec in values
    if kind == "terms":
        return any(v in values for v in spec)
    if kind == "range":
        return any(
            all(_BOUNDS[b](v, limit) for b, limit in spec.items()) for v in values
        )
    raise AssertionError(f"unsupported clause {kind}")


@pytest.fixture
def documents() -> list[dict[str, Any]]:
    return DOCUMENTS


@pytest.fixture
def matches():
    """The in-memory bool-query evaluator."""
    return search_matches
