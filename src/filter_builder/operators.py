from enum import Enum


class RuleOperator(str, Enum):
    """Operators a rule can apply to a field.

    The values double as the operator names of the logic-expression wire
    format, so they are part of the stored-filter contract.
    """

    # Comparison
    EQUAL = "equal"
    NOT_EQUAL = "not_equal"
    LESS = "less"
    LESS_OR_EQUAL = "less_or_equal"
    GREATER = "greater"
    GREATER_OR_EQUAL = "greater_or_equal"

    # Range
    BETWEEN = "between"
    NOT_BETWEEN = "not_between"

    # Set membership
    IN = "in"
    NOT_IN = "not_in"

    # Existence
    IS_EMPTY = "is_empty"
    IS_NOT_EMPTY = "is_not_empty"

    # String matching
    LIKE = "like"
    NOT_LIKE = "not_like"


class Combinator(str, Enum):
    """Boolean combinators of a group node."""

    AND = "and"
    OR = "or"
    NOT = "!"


class OperandArity(str, Enum):
    """Shape of the value a rule carries for its operator."""

    NONE = "none"
    SINGLE = "single"
    PAIR = "pair"
    LIST = "list"


_ARITY: dict[RuleOperator, OperandArity] = {
    RuleOperator.EQUAL: OperandArity.SINGLE,
    RuleOperator.NOT_EQUAL: OperandArity.SINGLE,
    RuleOperator.LESS: OperandArity.SINGLE,
    RuleOperator.LESS_OR_EQUAL: OperandArity.SINGLE,
    RuleOperator.GREATER: OperandArity.SINGLE,
    RuleOperator.GREATER_OR_EQUAL: OperandArity.SINGLE,
    RuleOperator.BETWEEN: OperandArity.PAIR,
    RuleOperator.NOT_BETWEEN: OperandArity.PAIR,
    RuleOperator.IN: OperandArity.LIST,
    RuleOperator.NOT_IN: OperandArity.LIST,
    RuleOperator.IS_EMPTY: OperandArity.NONE,
    RuleOperator.IS_NOT_EMPTY: OperandArity.NONE,
    RuleOperator.LIKE: OperandArity.SINGLE,
    RuleOperator.NOT_LIKE: OperandArity.SINGLE,
}


def arity_of(op: RuleOperator) -> OperandArity:
    """Return the operand shape expected by *op*."""
    return _ARITY[op]
