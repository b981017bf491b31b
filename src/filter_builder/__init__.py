from .controller import ControllerError, ControllerState, ErrorKind, SyncController
from .estimator import CountClient, CountEstimate, CountEstimator, CountQuery
from .exceptions import (
    CountFetchError,
    FilterBuilderError,
    LoadFailedError,
    SchemaMismatchError,
    TranslationError,
)
from .formats import OutputMode, WireFormat, get_format
from .links import LinkEncoder
from .operators import Combinator, OperandArity, RuleOperator, arity_of
from .schema import (
    FieldSchema,
    FieldType,
    SchemaConfig,
    collect_errors,
    validate_tree,
)
from .settings import FilterBuilderSettings
from .store import FilterTreeStore
from .translator import (
    from_logic_expression,
    from_search_filter,
    to_logic_expression,
    to_search_filter,
)
from .tree import FilterTree, Group, Rule

__all__ = [
    # Tree
    "FilterTree",
    "Group",
    "Rule",
    "FilterTreeStore",
    # Operators / schema
    "Combinator",
    "OperandArity",
    "RuleOperator",
    "arity_of",
    "FieldSchema",
    "FieldType",
    "SchemaConfig",
    "collect_errors",
    "validate_tree",
    # Translation
    "OutputMode",
    "WireFormat",
    "get_format",
    "to_search_filter",
    "from_search_filter",
    "to_logic_expression",
    "from_logic_expression",
    # Count / links / orchestration
    "CountClient",
    "CountEstimate",
    "CountEstimator",
    "CountQuery",
    "LinkEncoder",
    "SyncController",
    "ControllerState",
    "ControllerError",
    "ErrorKind",
    "FilterBuilderSettings",
    # Exceptions
    "FilterBuilderError",
    "SchemaMismatchError",
    "TranslationError",
    "LoadFailedError",
    "CountFetchError",
]
