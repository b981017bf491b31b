"""Search filter parser: bool-query clause -> FilterTree.

When a schema is given, the dedicated negated and between operators are only
produced for fields that allow them; otherwise the equivalent NOT group or
AND of bounds is built, so anything the compiler emits loads back.
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Any

from ...exceptions import TranslationError
from ...operators import Combinator, RuleOperator
from ...tree import FilterTree, Group, Rule
from .clauses import is_match_all
from .operators.range import RANGE_BOUNDS

if TYPE_CHECKING:
    from collections.abc import Callable

    from ...schema import SchemaConfig

_BOUND_OPERATORS: dict[str, RuleOperator] = {v: k for k, v in RANGE_BOUNDS.items()}

# Rule operators whose must_not form has a dedicated negated operator.
_NEGATIONS: dict[RuleOperator, RuleOperator] = {
    RuleOperator.EQUAL: RuleOperator.NOT_EQUAL,
    RuleOperator.NOT_EQUAL: RuleOperator.EQUAL,
    RuleOperator.IN: RuleOperator.NOT_IN,
    RuleOperator.NOT_IN: RuleOperator.IN,
    RuleOperator.BETWEEN: RuleOperator.NOT_BETWEEN,
    RuleOperator.NOT_BETWEEN: RuleOperator.BETWEEN,
    RuleOperator.IS_NOT_EMPTY: RuleOperator.IS_EMPTY,
    RuleOperator.IS_EMPTY: RuleOperator.IS_NOT_EMPTY,
}

_BOOL_KEYS = frozenset({"must", "filter", "should", "must_not", "minimum_should_match"})


def _allows(schema: SchemaConfig | None, field: str, op: RuleOperator) -> bool:
    # Unknown fields are left for schema validation to report.
    if schema is None:
        return True
    field_schema = schema.get(field)
    return field_schema is None or op in field_schema.operators


# ---------------------------------------------------------------------------
# Leaf clauses
# ---------------------------------------------------------------------------


def _single_field(body: Any, kind: str, path: str) -> tuple[str, Any]:
    if not isinstance(body, dict) or len(body) != 1:
        raise TranslationError(
            f"'{kind}' clause must name exactly one field", path=path
        )
    ((field, spec),) = body.items()
    return field, spec


def _parse_term(body: Any, path: str, schema: SchemaConfig | None) -> Rule | Group:
    field, spec = _single_field(body, "term", path)
    if isinstance(spec, dict):
        if set(spec) != {"value"}:
            raise TranslationError(
                f"Unsupported 'term' options: {sorted(spec)}", path=path
            )
        spec = spec["value"]
    return Rule(field=field, operator=RuleOperator.EQUAL, value=spec)


def _parse_terms(body: Any, path: str, schema: SchemaConfig | None) -> Rule | Group:
    field, spec = _single_field(body, "terms", path)
    if not isinstance(spec, list):
        raise TranslationError("'terms' clause requires a list of values", path=path)
    return Rule(field=field, operator=RuleOperator.IN, value=spec)


def _parse_range(body: Any, path: str, schema: SchemaConfig | None) -> Rule | Group:
    field, spec = _single_field(body, "range", path)
    if not isinstance(spec, dict) or not spec:
        raise TranslationError("'range' clause requires bounds", path=path)
    unknown = set(spec) - set(_BOUND_OPERATORS)
    if unknown:
        raise TranslationError(
            f"Unknown range bound(s): {', '.join(sorted(unknown))}", path=path
        )
    if set(spec) == {"gte", "lte"} and _allows(schema, field, RuleOperator.BETWEEN):
        return Rule(
            field=field,
            operator=RuleOperator.BETWEEN,
            value=[spec["gte"], spec["lte"]],
        )
    rules = [
        Rule(field=field, operator=_BOUND_OPERATORS[bound], value=spec[bound])
        for bound in ("gt", "gte", "lt", "lte")
        if bound in spec
    ]
    if len(rules) == 1:
        return rules[0]
    return Group(combinator=Combinator.AND, children=tuple(rules))


def _parse_exists(body: Any, path: str, schema: SchemaConfig | None) -> Rule | Group:
    if not isinstance(body, dict) or set(body) != {"field"}:
        raise TranslationError("'exists' clause requires only 'field'", path=path)
    if not isinstance(body["field"], str):
        raise TranslationError("'exists' field must be a string", path=path)
    return Rule(field=body["field"], operator=RuleOperator.IS_NOT_EMPTY)


_LEAF_PARSERS: dict[
    str, Callable[[Any, str, SchemaConfig | None], Rule | Group]
] = {
    "term": _parse_term,
    "terms": _parse_terms,
    "range": _parse_range,
    "exists": _parse_exists,
}


# ---------------------------------------------------------------------------
# Compound clauses
# ---------------------------------------------------------------------------


def _as_list(value: Any) -> list[Any]:
    if value is None:
        return []
    return value if isinstance(value, list) else [value]


def _negated_rule(node: Rule | Group, schema: SchemaConfig | None) -> Rule | None:
    if not isinstance(node, Rule) or node.operator not in _NEGATIONS:
        return None
    negated = _NEGATIONS[node.operator]
    if not _allows(schema, node.field, negated):
        return None
    return node.model_copy(update={"operator": negated})


def _parse_negated(clause: Any, path: str, schema: SchemaConfig | None) -> Rule | Group:
    """Parse one ``must_not`` entry into a negated rule or a NOT group."""
    if (
        isinstance(clause, dict)
        and len(clause) == 1
        and next(iter(clause)) in _LEAF_PARSERS
    ):
        # A between range reads back as not_between even where plain
        # between is not allowed.
        rule = _negated_rule(_parse_clause(clause, path, None), schema)
        if rule is not None:
            return rule
    node = _parse_clause(clause, path, schema)
    rule = _negated_rule(node, schema)
    if rule is not None:
        return rule
    return Group(combinator=Combinator.NOT, children=(node,))


def _parse_bool(body: Any, path: str, schema: SchemaConfig | None) -> Rule | Group:
    if not isinstance(body, dict):
        raise TranslationError("'bool' clause must be an object", path=path)
    unknown = set(body) - _BOOL_KEYS
    if unknown:
        raise TranslationError(
            f"Unknown clause kind '{sorted(unknown)[0]}' in bool", path=path
        )

    must = _as_list(body.get("must")) + _as_list(body.get("filter"))
    should = _as_list(body.get("should"))
    must_not = _as_list(body.get("must_not"))
    min_should = body.get("minimum_should_match")
    if min_should is not None and str(min_should) != "1":
        raise TranslationError(
            f"minimum_should_match={min_should!r} is not supported", path=path
        )
    if should and must and min_should is None:
        # Alongside must/filter the should clauses only affect scoring.
        raise TranslationError(
            "'should' next to 'must' without minimum_should_match is ambiguous",
            path=path,
        )

    if not must and not should and len(must_not) == 1:
        return _parse_negated(must_not[0], f"{path}.must_not[0]", schema)

    children: list[Rule | Group] = [
        _parse_clause(c, f"{path}.must[{idx}]", schema) for idx, c in enumerate(must)
    ]
    if should:
        either = Group(
            combinator=Combinator.OR,
            children=tuple(
                _parse_clause(c, f"{path}.should[{idx}]", schema)
                for idx, c in enumerate(should)
            ),
        )
        if not must and not must_not:
            return either
        children.append(either)
    children.extend(
        _parse_negated(c, f"{path}.must_not[{idx}]", schema)
        for idx, c in enumerate(must_not)
    )
    return Group(combinator=Combinator.AND, children=tuple(children))


def _parse_clause(clause: Any, path: str, schema: SchemaConfig | None) -> Rule | Group:
    if is_match_all(clause):
        return Group()
    if not isinstance(clause, dict) or len(clause) != 1:
        raise TranslationError("Expected an object with one clause kind", path=path)
    ((kind, body),) = clause.items()
    if kind == "bool":
        return _parse_bool(body, path, schema)
    parser = _LEAF_PARSERS.get(kind)
    if parser is None:
        raise TranslationError(f"Unknown clause kind '{kind}'", path=path)
    return parser(body, path, schema)


def parse_filter(
    data: dict[str, Any], schema: SchemaConfig | None = None
) -> FilterTree:
    """Rebuild a tree from a clause (optionally wrapped in ``{"query": ...}``).

    With a *schema*, operators the schema does not allow for a field are
    avoided where an equivalent form exists.
    """
    if set(data) == {"query"}:
        data = data["query"]
    node = _parse_clause(data, "query", schema)
    if isinstance(node, Rule):
        return FilterTree.of(node)
    return FilterTree(root=node)
