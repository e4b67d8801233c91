"""Snapshot tree.

fibersnap.tree
~~~~~~~~~~~~~~

The output of one :meth:`~fibersnap.builder.SnapshotBuilder.build` call: an
n-ary tree of :class:`SnapshotNode` records, independent of the live tree it
was read from. Nodes accept children while the traversal runs and are sealed
(deeply) before the tree is handed out.
"""

from __future__ import annotations

import dataclasses
import types
import typing as t

from ._internal.frozen_dataclass_sealable import (
    Sealable,
    frozen_dataclass_sealable,
    mutable_field,
)
from .constants import ROOT

if t.TYPE_CHECKING:
    from collections.abc import Iterator, Sequence


class ComponentData(t.TypedDict, total=False):
    """Data recorded for one snapshot node.

    Optional keys are absent, not ``None``, when nothing was extracted.
    """

    actual_duration: float | None
    actual_start_time: float | None
    self_base_duration: float | None
    tree_base_duration: float | None
    props: dict[str, t.Any]
    context: dict[str, t.Any]
    #: Copy of the direct state (``None``/``False`` included)
    state: t.Any
    #: Chained state by variable name
    hooks_state: dict[str, t.Any]
    #: Record indices of the chained state holders, in chain order
    hooks_index: list[int]
    #: Record index of the direct state holder
    index: int


@frozen_dataclass_sealable
class SnapshotNode(Sealable):
    """A read-only node of a snapshot tree.

    Examples
    --------
    >>> root = SnapshotNode.root()
    >>> board = root.add_child("stateless", "Board", {"props": {}, "context": {}})
    >>> board.name, board.tag_id
    ('Board', None)
    >>> [node.name for node in root.walk()]
    ['root', 'Board']

    Node data is read-only from the start:

    >>> board.data["props"] = {"value": "X"}
    Traceback (most recent call last):
        ...
    TypeError: 'mappingproxy' object does not support item assignment

    Sealing freezes the whole tree:

    >>> root.seal(deep=True)
    >>> root.children
    (SnapshotNode(name='Board', state='stateless', tag_id=None, children=0),)
    >>> board.add_child("stateless", "Square", {})
    Traceback (most recent call last):
        ...
    AttributeError: SnapshotNode is sealed: cannot add child 'Square'
    """

    name: str
    state: t.Any
    data: ComponentData = dataclasses.field(default_factory=ComponentData)
    tag_id: str | None = None
    children: Sequence[SnapshotNode] = mutable_field(list)

    def __post_init__(self) -> None:
        # Data is complete once the node exists; only children keep growing
        self.data = t.cast("ComponentData", types.MappingProxyType(dict(self.data)))

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}(name={self.name!r}, state={self.state!r}, "
            f"tag_id={self.tag_id!r}, children={len(self.children)})"
        )

    @classmethod
    def root(cls) -> SnapshotNode:
        """Return a new synthetic root node."""
        return cls(name=ROOT, state=ROOT)

    def add_child(
        self,
        state: t.Any,
        name: str,
        data: ComponentData,
        tag_id: str | None = None,
    ) -> SnapshotNode:
        """Append a new child node and return it.

        Raises
        ------
        AttributeError
            If the node is sealed
        """
        if self._sealed:
            error_msg = f"{self.__class__.__name__} is sealed: cannot add child '{name}'"
            raise AttributeError(error_msg)
        child = SnapshotNode(name=name, state=state, data=data, tag_id=tag_id)
        t.cast("list[SnapshotNode]", self.children).append(child)
        return child

    def walk(self) -> Iterator[SnapshotNode]:
        """Yield this node and its descendants, depth-first, parents first."""
        stack: list[SnapshotNode] = [self]
        while stack:
            node = stack.pop()
            yield node
            stack.extend(reversed(node.children))

    def find(self, name: str) -> SnapshotNode | None:
        """Return the first node called *name*, in depth-first order."""
        for node in self.walk():
            if node.name == name:
                return node
        return None

    def to_dict(self) -> dict[str, t.Any]:
        """Convert the tree to plain dictionaries, see :func:`fibersnap.utils.tree_to_dict`."""
        from .utils import tree_to_dict

        return tree_to_dict(self)

    def filter(
        self,
        predicate: t.Callable[[SnapshotNode], bool],
    ) -> SnapshotNode | None:
        """Return a filtered copy, see :func:`fibersnap.utils.filter_tree`."""
        from .utils import filter_tree

        return filter_tree(self, predicate)
