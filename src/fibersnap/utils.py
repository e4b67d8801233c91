"""Utility functions for working with snapshot trees.

This module provides utility functions for filtering and serializing snapshot
trees before they are handed to a transport.
"""

from __future__ import annotations

import typing as t

from .tree import SnapshotNode


def tree_to_dict(node: SnapshotNode) -> dict[str, t.Any]:
    """Convert a snapshot tree to nested dictionaries.

    The result holds only ``dict``, ``list`` and the values extracted from the
    live tree, so it can be serialized to JSON when those values can.

    Parameters
    ----------
    node : SnapshotNode
        The tree (or subtree) to convert

    Returns
    -------
    dict
        ``name``, ``state``, ``tag_id``, ``data`` and ``children`` of every node

    Examples
    --------
    >>> root = SnapshotNode.root()
    >>> _ = root.add_child({"count": 0}, "Counter", {"props": {}}, "fromLinkFiber0")
    >>> tree_to_dict(root)["children"][0]
    {'name': 'Counter', 'state': {'count': 0}, 'tag_id': 'fromLinkFiber0', 'data': {'props': {}}, 'children': []}
    """
    result = _node_dict(node)
    stack = [(node, result)]
    while stack:
        current, current_dict = stack.pop()
        for child in current.children:
            child_dict = _node_dict(child)
            current_dict["children"].append(child_dict)
            stack.append((child, child_dict))
    return result


def _node_dict(node: SnapshotNode) -> dict[str, t.Any]:
    return {
        "name": node.name,
        "state": node.state,
        "tag_id": node.tag_id,
        "data": dict(node.data),
        "children": [],
    }


def filter_tree(
    node: SnapshotNode,
    predicate: t.Callable[[SnapshotNode], bool],
) -> SnapshotNode | None:
    """Return a sealed copy of *node* keeping nodes that match *predicate*.

    A node that fails *predicate* is kept anyway when one of its descendants
    matches, so parent-child relationships survive filtering.

    Parameters
    ----------
    node : SnapshotNode
        The tree to filter
    predicate : Callable
        Returns True for nodes to keep

    Returns
    -------
    SnapshotNode | None
        The filtered copy, or None if nothing matched

    Examples
    --------
    >>> root = SnapshotNode.root()
    >>> board = root.add_child("stateless", "Board", {})
    >>> _ = board.add_child({"value": "X"}, "Square", {})
    >>> _ = root.add_child("stateless", "Footer", {})
    >>> stateful = filter_tree(root, lambda n: isinstance(n.state, dict))
    >>> [n.name for n in stateful.walk()]
    ['root', 'Board', 'Square']
    """
    # Reversed pre-order visits every child before its parent
    copies: dict[int, SnapshotNode] = {}
    for current in reversed(list(node.walk())):
        children = [
            copies[id(child)] for child in current.children if id(child) in copies
        ]
        if not children and not predicate(current):
            continue
        filtered = SnapshotNode(
            name=current.name,
            state=current.state,
            data=current.data,
            tag_id=current.tag_id,
            children=children,
        )
        # Children are sealed already
        filtered.seal()
        copies[id(current)] = filtered
    return copies.get(id(node))


def count_nodes(node: SnapshotNode) -> int:
    """Return the number of nodes in the tree, *node* included."""
    return sum(1 for _ in node.walk())


def tag_ids(node: SnapshotNode) -> list[str]:
    """Return the tag ids of the tree in traversal order."""
    return [n.tag_id for n in node.walk() if n.tag_id is not None]
