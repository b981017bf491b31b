"""
Immutable filter tree.

A tree is a root :class:`Group` whose children are nested groups and
:class:`Rule` leaves. Every edit returns a new :class:`FilterTree`; the
nodes that are not on the path to the edited node are reused by identity,
so the previous tree stays valid for comparison and undo.

Example::

    tree = FilterTree.of(Rule(field="owner", operator="equal", value="alice"))
    tree = tree.add(Group(combinator="or"))
    # → AND(owner == "alice", OR())
"""

from __future__ import annotations

from typing import TYPE_CHECKING, Annotated, Any, Literal
from uuid import uuid4

from pydantic import BaseModel, ConfigDict, Field, field_validator

from .operators import Combinator, RuleOperator

if TYPE_CHECKING:
    from collections.abc import Callable, Iterator


def _new_id() -> str:
    return uuid4().hex


def freeze(value: Any) -> Any:
    """Recursively turn lists into tuples so rule values cannot be mutated."""
    if isinstance(value, list | tuple):
        return tuple(freeze(v) for v in value)
    return value


def thaw(value: Any) -> Any:
    """Inverse of :func:`freeze`, used when emitting JSON-shaped wire formats."""
    if isinstance(value, tuple):
        return [thaw(v) for v in value]
    return value


class Rule(BaseModel):
    """Leaf node: a single predicate over one field."""

    model_config = ConfigDict(frozen=True)

    type: Literal["rule"] = "rule"
    id: str = Field(default_factory=_new_id)
    field: str
    operator: RuleOperator
    value: Any = None

    @field_validator("value")
    @classmethod
    def _freeze_value(cls, v: Any) -> Any:
        return freeze(v)


class Group(BaseModel):
    """Internal node: a boolean combinator over an ordered list of children."""

    model_config = ConfigDict(frozen=True)

    type: Literal["group"] = "group"
    id: str = Field(default_factory=_new_id)
    combinator: Combinator = Combinator.AND
    children: tuple[Node, ...] = ()

    @property
    def is_vacuous(self) -> bool:
        """True when no rule exists anywhere below this group."""
        return all(isinstance(c, Group) and c.is_vacuous for c in self.children)


Node = Annotated[Rule | Group, Field(discriminator="type")]

Group.model_rebuild()


class FilterTree(BaseModel):
    """The user's boolean filter; a frozen wrapper around the root group."""

    model_config = ConfigDict(frozen=True)

    root: Group = Field(default_factory=Group)

    # -- construction --------------------------------------------------------

    @classmethod
    def empty(cls, combinator: Combinator = Combinator.AND) -> FilterTree:
        return cls(root=Group(combinator=combinator))

    @classmethod
    def of(
        cls,
        *nodes: Rule | Group,
        combinator: Combinator = Combinator.AND,
    ) -> FilterTree:
        """Build a tree whose root combines *nodes* with *combinator*."""
        return cls(root=Group(combinator=combinator, children=nodes))

    # -- inspection ----------------------------------------------------------

    @property
    def is_empty(self) -> bool:
        return self.root.is_vacuous

    def walk(self) -> Iterator[tuple[str, Rule | Group]]:
        """Yield ``(path, node)`` pairs depth-first, root first."""
        stack: list[tuple[str, Rule | Group]] = [("root", self.root)]
        while stack:
            path, node = stack.pop()
            yield path, node
            if isinstance(node, Group):
                stack.extend(
                    (f"{path}.children[{idx}]", child)
                    for idx, child in reversed(list(enumerate(node.children)))
                )

    def rules(self) -> Iterator[Rule]:
        for _, node in self.walk():
            if isinstance(node, Rule):
                yield node

    def find(self, node_id: str) -> Rule | Group | None:
        for _, node in self.walk():
            if node.id == node_id:
                return node
        return None

    # -- edits ---------------------------------------------------------------

    def add(self, node: Rule | Group, parent_id: str | None = None) -> FilterTree:
        """Append *node* to the group *parent_id* (the root by default)."""

        def append(parent: Rule | Group) -> Rule | Group:
            if not isinstance(parent, Group):
                raise TypeError(f"Node {parent.id!r} is a rule, not a group")
            return parent.model_copy(update={"children": (*parent.children, node)})

        if parent_id is None or parent_id == self.root.id:
            return FilterTree(root=append(self.root))  # type: ignore[arg-type]
        return self._edit(parent_id, append)

    def remove(self, node_id: str) -> FilterTree:
        if node_id == self.root.id:
            raise ValueError("Cannot remove the root group")
        return self._edit(node_id, lambda _: None)

    def update(self, node_id: str, **changes: Any) -> FilterTree:
        """Replace fields of one node, e.g. ``update(rule_id, value=42)``."""

        def revise(node: Rule | Group) -> Rule | Group:
            return type(node).model_validate({**dict(node), **changes})

        if node_id == self.root.id:
            return FilterTree(root=revise(self.root))  # type: ignore[arg-type]
        return self._edit(node_id, revise)

    def _edit(
        self,
        node_id: str,
        fn: Callable[[Rule | Group], Rule | Group | None],
    ) -> FilterTree:
        root = _rewrite(self.root, node_id, fn)
        if root is self.root:
            raise KeyError(f"Node {node_id!r} not found")
        return FilterTree(root=root)


def _rewrite(
    group: Group,
    node_id: str,
    fn: Callable[[Rule | Group], Rule | Group | None],
) -> Group:
    """Apply *fn* to the descendant *node_id*; untouched subtrees are shared."""
    children: list[Rule | Group] = []
    changed = False
    for child in group.children:
        if child.id == node_id:
            replacement = fn(child)
            changed = True
            if replacement is not None:
                children.append(replacement)
            continue
        if isinstance(child, Group):
            rewritten = _rewrite(child, node_id, fn)
            changed = changed or rewritten is not child
            children.append(rewritten)
        else:
            children.append(child)
    if not changed:
        return group
    return group.model_copy(update={"children": tuple(children)})
