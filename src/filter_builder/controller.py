"""
SyncController — keeps the tree, the persisted value, the count and the
deep link in step.

State machine::

    UNINITIALIZED --mount--> READY | ERROR(LOAD_FAILED)
    READY/ERROR  --apply--> TRANSLATING --> READY | ERROR(TRANSLATE_FAILED)

Only successfully translated values ever reach the sink; a failed edit
keeps the last valid persisted value and is reported through ``error``
instead of an exception.
"""

from __future__ import annotations

import logging
from enum import Enum
from typing import TYPE_CHECKING, Any, NamedTuple

from pydantic import ValidationError

from .exceptions import FilterBuilderError, SchemaMismatchError
from .formats import OutputMode, dumps, get_format
from .links import LinkEncoder
from .store import FilterTreeStore
from .tree import FilterTree

if TYPE_CHECKING:
    from collections.abc import Callable

    from .estimator import CountEstimator
    from .schema import SchemaConfig
    from .settings import FilterBuilderSettings
    from .tree import Group, Rule

logger = logging.getLogger("filter_builder.sync")


class ControllerState(str, Enum):
    UNINITIALIZED = "uninitialized"
    READY = "ready"
    TRANSLATING = "translating"
    ERROR = "error"


class ErrorKind(str, Enum):
    LOAD_FAILED = "load_failed"
    TRANSLATE_FAILED = "translate_failed"


class ControllerError(NamedTuple):
    """What went wrong, for display next to the editor."""

    kind: ErrorKind
    cause: FilterBuilderError

    def to_dict(self) -> dict[str, Any]:
        return {"kind": self.kind.value, **self.cause.to_dict()}


class SyncController:
    """Orchestrates edits, translation, persistence and derived outputs.

    Args:
        schema: Field/operator catalog of the hosting form.
        mode: Wire format produced and consumed by this instance.
        sink: Receives every successfully translated persisted value.
        estimator: Optional count estimator; only used in search mode.
        link_encoder: Deep-link builder (defaults to one built from settings).
        store: Tree holder (defaults to a fresh, empty store).
        settings: Shared configuration.
    """

    def __init__(
        self,
        schema: SchemaConfig,
        mode: OutputMode | str,
        sink: Callable[[str], None],
        *,
        estimator: CountEstimator | None = None,
        link_encoder: LinkEncoder | None = None,
        store: FilterTreeStore | None = None,
        settings: FilterBuilderSettings | None = None,
    ) -> None:
        self._schema = schema
        self._format = get_format(mode)
        self._sink = sink
        self._estimator = estimator
        self._links = link_encoder or LinkEncoder(settings)
        self._store = store or FilterTreeStore()

        self._state = ControllerState.UNINITIALIZED
        self._error: ControllerError | None = None
        self._persisted: str | None = None
        self._link = self._links.encode(self._store.get_current())

    # ── Read-only view ───────────────────────────────────────────────

    @property
    def mode(self) -> OutputMode:
        return self._format.mode

    @property
    def state(self) -> ControllerState:
        return self._state

    @property
    def error(self) -> ControllerError | None:
        return self._error

    @property
    def tree(self) -> FilterTree:
        return self._store.get_current()

    @property
    def persisted_value(self) -> str | None:
        """Last value handed to (or received from) the host."""
        return self._persisted

    @property
    def link(self) -> str:
        return self._link

    # ── Events ───────────────────────────────────────────────────────

    def mount(self, initial_value: str | None = None) -> None:
        """Seed the tree from a persisted value (or start empty)."""
        if self._state is not ControllerState.UNINITIALIZED:
            raise RuntimeError("SyncController is already mounted")

        tree = FilterTree.empty()
        if initial_value and initial_value.strip():
            try:
                tree = self._format.deserialize(initial_value, self._schema)
            except FilterBuilderError as exc:
                logger.warning("Could not load persisted filter: %s", exc)
                self._seed(FilterTree.empty())
                self._fail(ErrorKind.LOAD_FAILED, exc)
                return
            self._persisted = initial_value

        self._seed(tree)
        self._state = ControllerState.READY
        logger.debug("Mounted %s filter builder", self.mode.value)

    def apply(self, tree: FilterTree) -> None:
        """Replace the tree and propagate it to every derived output."""
        if self._state is ControllerState.UNINITIALIZED:
            raise RuntimeError("SyncController.apply() called before mount()")

        self._store.replace(tree)
        self._state = ControllerState.TRANSLATING
        try:
            wire = self._format.to_wire(tree, self._schema)
        except FilterBuilderError as exc:
            logger.warning("Filter not translated, keeping last value: %s", exc)
            self._fail(ErrorKind.TRANSLATE_FAILED, exc)
            return

        value = dumps(self._format.wrap(wire))
        self._persisted = value
        self._sink(value)

        if self._estimator is not None and self.mode is OutputMode.SEARCH_DSL:
            self._estimator.request(None if tree.is_empty else wire)

        self._link = self._links.encode(tree)
        self._error = None
        self._state = ControllerState.READY

    # Convenience edits built on the current tree. An unknown node id, a rule
    # used as parent or removing the root are caller bugs and raise.

    def add(self, node: Rule | Group, parent_id: str | None = None) -> None:
        self.apply(self.tree.add(node, parent_id))

    def remove(self, node_id: str) -> None:
        self.apply(self.tree.remove(node_id))

    def update(self, node_id: str, **changes: Any) -> None:
        """Change one node; invalid values end in Error(TRANSLATE_FAILED)."""
        if self._state is ControllerState.UNINITIALIZED:
            raise RuntimeError("SyncController.update() called before mount()")
        try:
            tree = self.tree.update(node_id, **changes)
        except ValidationError as exc:
            logger.warning("Edit of node %s rejected: %s", node_id, exc)
            node = self.tree.find(node_id)
            self._fail(
                ErrorKind.TRANSLATE_FAILED,
                SchemaMismatchError(
                    f"Invalid change to node '{node_id}': "
                    + "; ".join(str(e["msg"]) for e in exc.errors()),
                    field=getattr(node, "field", None),
                ),
            )
            return
        self.apply(tree)

    def _seed(self, tree: FilterTree) -> None:
        self._store.replace(tree)
        self._link = self._links.encode(tree)

    def _fail(self, kind: ErrorKind, cause: FilterBuilderError) -> None:
        self._error = ControllerError(kind, cause)
        self._state = ControllerState.ERROR
