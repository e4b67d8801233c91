"""Classify live nodes for snapshotting.

fibersnap.classifier
~~~~~~~~~~~~~~~~~~~~

Pure predicates over a live node, its resolved name and a
:class:`~fibersnap.config.SnapshotConfig`. Nothing here is cached; the
builder asks again for every node and every extraction gate.
"""

from __future__ import annotations

import enum
import typing as t

from .constants import (
    CHAINED_STATE_TAGS,
    COMPONENT_TAGS,
    CONTEXT_VALUE_KEY,
    DIRECT_STATE_TAGS,
    MAX_FORMAT_DEPTH,
    PROVIDER_CONTEXT_TAGS,
    PROVIDER_NAME,
    WorkTag,
)
from .extractors import filter_and_format_data
from .live import MISSING, name_of, read, read_optional, wrapper_target

if t.TYPE_CHECKING:
    from .config import SnapshotConfig


class Classification(enum.Enum):
    """How a live node takes part in a snapshot."""

    #: Framework-internal unit: skipped, children still visited
    EXCLUDED = "excluded"
    #: Class-like unit with a state holder owning ``state``
    STATEFUL_DIRECT = "stateful_direct"
    #: Hook unit with a chained state structure
    STATEFUL_CHAINED = "stateful_chained"
    #: Component-like unit without state
    STATELESS = "stateless"
    #: Structural node (host element, text, fragment, ...)
    PASS_THROUGH = "pass_through"


def _pathname(props: t.Any, key: str) -> dict[str, t.Any]:
    return {"pathname": read_optional(read(props, key), "pathname")}


class ComponentShape(enum.Enum):
    """Components whose props are reduced to a known field.

    >>> ComponentShape.for_name("Router").extract_props(
    ...     {"location": {"pathname": "/about"}, "navigator": object()}
    ... )
    {'pathname': '/about'}
    >>> ComponentShape.for_name("Board") is ComponentShape.GENERIC
    True
    """

    ROUTER = "Router"
    RENDERED_ROUTE = "RenderedRoute"
    GENERIC = "*"

    @classmethod
    def for_name(cls, name: str | None) -> ComponentShape:
        """Return the shape of the unit called *name*."""
        for shape in (cls.ROUTER, cls.RENDERED_ROUTE):
            if shape.value == name:
                return shape
        return cls.GENERIC

    def extract_props(
        self,
        props: t.Any,
        *,
        max_depth: int = MAX_FORMAT_DEPTH,
    ) -> dict[str, t.Any]:
        """Return the displayable props of a unit of this shape."""
        return _PROPS_STRATEGIES[self](props, max_depth)


_PROPS_STRATEGIES: dict[ComponentShape, t.Callable[[t.Any, int], dict[str, t.Any]]] = {
    ComponentShape.ROUTER: lambda props, _: _pathname(props, "location"),
    ComponentShape.RENDERED_ROUTE: lambda props, _: _pathname(props, "match"),
    ComponentShape.GENERIC: lambda props, max_depth: filter_and_format_data(
        props,
        max_depth=max_depth,
    ),
}


def node_tag(node: t.Any) -> int | None:
    """Return the kind tag of *node* as an int, ``None`` when absent."""
    tag = read(node, "tag")
    if isinstance(tag, bool) or not isinstance(tag, int):
        return None
    return int(tag)


def component_shape(name: str | None) -> ComponentShape:
    """Return the props shape of the unit called *name*."""
    return ComponentShape.for_name(name)


def is_excluded(name: str, config: SnapshotConfig) -> bool:
    """Return True if *name* is a framework-internal unit."""
    return config.is_excluded(name)


def is_component(node: t.Any) -> bool:
    """Return True for function, class, indeterminate and provider nodes."""
    return node_tag(node) in COMPONENT_TAGS


def has_props(node: t.Any) -> bool:
    """Return True if *node* is component-like and carries props."""
    return is_component(node) and bool(read_optional(node, "memoized_props"))


def has_store_context(node: t.Any) -> bool:
    """Return True if *node* is a store-backed provider with chained state.

    The inner value is checked for definedness only, so ``None`` and
    ``False`` still count.
    """
    if node_tag(node) not in PROVIDER_CONTEXT_TAGS:
        return False
    if name_of(read(node, "element_type")) != PROVIDER_NAME:
        return False
    return read(read(node, "memoized_state"), "memoized_state") is not MISSING


def is_anonymous_context_provider(node: t.Any) -> bool:
    """Return True for context providers whose context has no display name."""
    if node_tag(node) != WorkTag.CONTEXT_PROVIDER:
        return False
    context = wrapper_target(read(node, "element_type"), "context")
    return not read_optional(context, "display_name")


def context_value(node: t.Any) -> t.Any:
    """Return the value a context provider passes down.

    Values that are not containers are wrapped as ``{"CONTEXT": value}``.

    >>> context_value({"memoized_props": {"value": "dark"}})
    {'CONTEXT': 'dark'}
    """
    value = read_optional(read(node, "memoized_props"), "value")
    if value is None or isinstance(value, (str, int, float, bool)):
        return {CONTEXT_VALUE_KEY: value}
    return value


def has_direct_state(node: t.Any) -> bool:
    """Return True if *node*'s state holder defines a ``state`` field.

    Presence is checked, not truthiness: a holder whose state is ``None`` or
    ``False`` still has direct state.
    """
    if node_tag(node) not in DIRECT_STATE_TAGS:
        return False
    holder = read(node, "state_node")
    return read(holder, "state") is not MISSING


def has_chained_state(node: t.Any) -> bool:
    """Return True if *node*'s state is a chain headed by an entry with a queue."""
    if node_tag(node) not in CHAINED_STATE_TAGS:
        return False
    head = read_optional(node, "memoized_state")
    if head is None:
        return False
    return bool(read_optional(head, "queue"))


def classify(node: t.Any, name: str, config: SnapshotConfig) -> Classification:
    """Classify *node* for snapshotting.

    Parameters
    ----------
    node : LiveNode
        Live node to classify
    name : str
        Declared name, see :func:`fibersnap.live.resolve_component_name`
    config : SnapshotConfig
        Exclusion sets

    Returns
    -------
    Classification

    Examples
    --------
    >>> from fibersnap.config import SnapshotConfig
    >>> config = SnapshotConfig()
    >>> classify({"tag": 5}, "div", config)
    <Classification.PASS_THROUGH: 'pass_through'>
    >>> classify({"tag": 0}, "AppRouter", config)
    <Classification.EXCLUDED: 'excluded'>
    >>> classify({"tag": 1, "state_node": {"state": None}}, "Board", config)
    <Classification.STATEFUL_DIRECT: 'stateful_direct'>
    >>> classify({"tag": 0}, "Square", config)
    <Classification.STATELESS: 'stateless'>
    """
    if is_excluded(name, config):
        return Classification.EXCLUDED
    if has_direct_state(node):
        return Classification.STATEFUL_DIRECT
    if has_chained_state(node):
        return Classification.STATEFUL_CHAINED
    if is_component(node):
        return Classification.STATELESS
    return Classification.PASS_THROUGH
