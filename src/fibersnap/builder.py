"""Build snapshot trees from live component trees.

fibersnap.builder
~~~~~~~~~~~~~~~~~

Usage
-----
Build a snapshot of a live tree every time the host reports a commit:

.. code-block:: python

    from fibersnap import create_tree

    snapshot = create_tree(fiber_root.current)
    transport.send(snapshot.to_dict())

Every accepted node with state registers its state holders in a
:class:`~fibersnap.record.ComponentActionsRecord`; the indices end up in the
snapshot (``data["index"]`` and ``data["hooks_index"]``) so a later replay can
find the holders again.
"""

from __future__ import annotations

import logging
import typing as t

from . import classifier, exc
from .config import SnapshotConfig
from .constants import CONTEXT_NAME, PROVIDER_NAME, STATELESS
from .extractors import (
    filter_and_format_data,
    get_hooks_state_and_update_method,
    get_state_and_context_data,
    snapshot_value,
)
from .hook_names import resolve_names
from .live import (
    MISSING,
    get_source_text,
    has_tag_api,
    name_of,
    read,
    read_optional,
    rendered_handle,
    resolve_component_name,
)
from .record import component_actions_record
from .tree import ComponentData, SnapshotNode

if t.TYPE_CHECKING:
    from .hook_names import HooksNameResolver
    from .live import LiveNode
    from .record import ComponentActionsRecord

logger = logging.getLogger(__name__)


class SnapshotBuilder:
    """Turn a live component tree into a sealed :class:`~fibersnap.tree.SnapshotNode` tree.

    Parameters
    ----------
    record : ComponentActionsRecord, optional
        Where state holders are registered, by default the process-wide
        :data:`~fibersnap.record.component_actions_record`
    config : SnapshotConfig, optional
        Exclusion sets and limits, by default :class:`SnapshotConfig` defaults
    name_resolver : HooksNameResolver, optional
        Strategy naming chained state entries, by default
        :func:`~fibersnap.hook_names.resolve_names`

    Examples
    --------
    >>> from fibersnap.record import ComponentActionsRecord
    >>> class Board:
    ...     def __init__(self):
    ...         self.state = {"x_is_next": True}
    >>> live_root = {
    ...     "tag": 3,
    ...     "child": {"tag": 1, "element_type": Board, "state_node": Board()},
    ... }
    >>> builder = SnapshotBuilder(record=ComponentActionsRecord())
    >>> tree = builder.build(live_root)
    >>> board = tree.children[0]
    >>> board.name, board.state, board.data["index"]
    ('Board', {'x_is_next': True}, 0)
    """

    def __init__(
        self,
        record: ComponentActionsRecord | None = None,
        config: SnapshotConfig | None = None,
        name_resolver: HooksNameResolver | None = None,
    ) -> None:
        self.record = record if record is not None else component_actions_record
        self.config = config if config is not None else SnapshotConfig()
        self.name_resolver = name_resolver if name_resolver is not None else resolve_names

    def __repr__(self) -> str:
        return f"{self.__class__.__name__}(record={self.record!r})"

    def build(self, live_root: LiveNode) -> SnapshotNode:
        """Build a snapshot tree of *live_root* and its descendants.

        Parameters
        ----------
        live_root : LiveNode
            Root of the live tree; the tree must not change during the call

        Returns
        -------
        SnapshotNode
            Sealed synthetic root whose children are the accepted nodes

        Raises
        ------
        :exc:`fibersnap.exc.InvalidLiveRoot`
            If *live_root* is None
        """
        if live_root is None or live_root is MISSING:
            raise exc.InvalidLiveRoot

        traversal = _Traversal(self)
        root = SnapshotNode.root()
        traversal.visit(live_root, root)
        root.seal(deep=True)

        logger.debug(
            "snapshot tree built",
            extra={
                "visited": len(traversal.visited),
                "accepted": traversal.accepted,
            },
        )
        return root


class _Traversal:
    """State of one build: visited nodes and the tag counter."""

    def __init__(self, builder: SnapshotBuilder) -> None:
        self.record = builder.record
        self.config = builder.config
        self.name_resolver = builder.name_resolver
        self.visited: set[int] = set()
        self.tag_counter = 0
        self.accepted = 0

    def is_excluded(self, name: str) -> bool:
        return classifier.is_excluded(name, self.config)

    def visit(self, node: t.Any, parent: SnapshotNode) -> None:
        """Snapshot *node*, its descendants and its following siblings.

        Depth first, children before siblings. A node seen earlier in this
        build ends the sibling chain it appears in.
        """
        stack: list[tuple[t.Any, SnapshotNode]] = [(node, parent)]
        while stack:
            node, parent = stack.pop()
            if node is None or node is MISSING or id(node) in self.visited:
                continue
            self.visited.add(id(node))

            child_parent = self.snapshot(node, parent)

            # Pushed first, popped after the whole child subtree
            stack.append((read_optional(node, "sibling"), parent))
            stack.append((read_optional(node, "child"), child_parent))

    def snapshot(self, node: t.Any, parent: SnapshotNode) -> SnapshotNode:
        """Append *node* under *parent* when accepted.

        Returns the parent for *node*'s children: the new snapshot node, or
        *parent* itself when *node* is skipped.
        """
        element_type = read_optional(node, "element_type")
        name = resolve_component_name(element_type)
        data = ComponentData(
            actual_duration=read_optional(node, "actual_duration"),
            actual_start_time=read_optional(node, "actual_start_time"),
            self_base_duration=read_optional(node, "self_base_duration"),
            tree_base_duration=read_optional(node, "tree_base_duration"),
            props={},
            context={},
        )
        state: t.Any = None

        # Every gate checks the exclusion sets on its own; the name can change
        # on the way (anonymous providers become "Context")
        if not self.is_excluded(name) and classifier.has_props(node):
            shape = classifier.component_shape(name_of(element_type))
            data["props"] = shape.extract_props(
                read(node, "memoized_props"),
                max_depth=self.config.max_format_depth,
            )

        if not self.is_excluded(name) and classifier.has_store_context(node):
            try:
                data["context"].update(
                    get_state_and_context_data(
                        read(node, "memoized_state"),
                        PROVIDER_NAME,
                        read_optional(node, "debug_hook_types"),
                    ),
                )
            except exc.ExtractionError:
                logger.warning(
                    "Failed to read provider context of %s",
                    name,
                    exc_info=True,
                    extra={"component": name},
                )

        if not self.is_excluded(name) and classifier.is_anonymous_context_provider(
            node,
        ):
            data["context"] = filter_and_format_data(
                classifier.context_value(node),
                max_depth=self.config.max_format_depth,
            )
            name = CONTEXT_NAME

        kind = classifier.classify(node, name, self.config)
        if kind is classifier.Classification.STATEFUL_CHAINED:
            hooks = self.extract_hooks(node, element_type, name)
            if hooks is not None:
                state, data["hooks_state"], data["hooks_index"] = hooks
            elif classifier.is_component(node):
                kind = classifier.Classification.STATELESS
            else:
                kind = classifier.Classification.PASS_THROUGH

        if kind in (
            classifier.Classification.EXCLUDED,
            classifier.Classification.PASS_THROUGH,
        ):
            return parent

        if kind is classifier.Classification.STATEFUL_DIRECT:
            holder = read(node, "state_node")
            state = snapshot_value(
                read(holder, "state"),
                max_depth=self.config.max_format_depth,
            )
            data["index"] = self.record.save_new(holder)
            data["state"] = state
        elif kind is classifier.Classification.STATELESS:
            state = STATELESS

        tag_id = self.tag(node)
        self.accepted += 1
        return parent.add_child(state, name, data, tag_id)

    def extract_hooks(
        self,
        node: t.Any,
        element_type: t.Any,
        name: str,
    ) -> tuple[list[dict[str, t.Any]], dict[str, t.Any], list[int]] | None:
        """Return chained state, state by name and record indices of *node*.

        Nothing is registered unless the whole chain could be read; failures
        are logged and yield None.
        """
        try:
            entries = get_hooks_state_and_update_method(
                read(node, "memoized_state"),
                max_entries=self.config.max_hook_entries,
            )
            names = self.name_resolver(get_source_text(element_type), len(entries))
            if len(names) != len(entries):
                msg = f"{len(names)} names for {len(entries)} hook entries"
                raise exc.ExtractionError(msg, name)
            if len(set(names)) != len(names):
                msg = f"duplicate hook names {names!r}"
                raise exc.ExtractionError(msg, name)
        except Exception:
            logger.warning(
                "Failed to extract hook state of %s",
                name,
                exc_info=True,
                extra={"component": name},
            )
            return None

        hooks_list: list[dict[str, t.Any]] = []
        hooks_state: dict[str, t.Any] = {}
        hooks_index: list[int] = []
        for var_name, entry in zip(names, entries):
            value = snapshot_value(entry.state, max_depth=self.config.max_format_depth)
            hooks_index.append(self.record.save_new(entry.component))
            hooks_list.append({var_name: value})
            hooks_state[var_name] = value
        return hooks_list, hooks_state, hooks_index

    def tag(self, node: t.Any) -> str | None:
        """Tag the rendered handle of *node*'s first child.

        The counter advances for every accepted node, tagged or not.
        """
        tag_id = None
        handle = rendered_handle(node)
        if has_tag_api(handle):
            prefix = self.config.tag_prefix
            tag_id = f"{prefix}{self.tag_counter}"
            class_list = handle.class_list
            stale = [
                token
                for token in class_list
                if isinstance(token, str) and token.startswith(prefix)
            ]
            for token in stale:
                class_list.remove(token)
            class_list.add(tag_id)
        self.tag_counter += 1
        return tag_id


def create_tree(
    live_root: LiveNode,
    *,
    record: ComponentActionsRecord | None = None,
    config: SnapshotConfig | None = None,
    name_resolver: HooksNameResolver | None = None,
) -> SnapshotNode:
    """Build a snapshot tree of *live_root*.

    Shortcut for ``SnapshotBuilder(record, config, name_resolver).build(live_root)``.

    Parameters
    ----------
    live_root : LiveNode
        Root of the live tree
    record : ComponentActionsRecord, optional
        Where state holders are registered
    config : SnapshotConfig, optional
        Exclusion sets and limits
    name_resolver : HooksNameResolver, optional
        Strategy naming chained state entries

    Returns
    -------
    SnapshotNode
        Sealed synthetic root of the snapshot tree
    """
    builder = SnapshotBuilder(
        record=record,
        config=config,
        name_resolver=name_resolver,
    )
    return builder.build(live_root)
