"""Constant variables for fibersnap."""

from __future__ import annotations

import enum


class WorkTag(enum.IntEnum):
    """Kind tag carried by every live node.

    Values follow the host runtime's numbering, so a raw ``int`` read from a
    live node can be compared against members directly.

    >>> WorkTag(1)
    <WorkTag.CLASS_COMPONENT: 1>
    >>> WorkTag.CONTEXT_PROVIDER == 10
    True
    """

    FUNCTION_COMPONENT = 0
    CLASS_COMPONENT = 1
    #: Before it is known whether the unit is a function or a class
    INDETERMINATE_COMPONENT = 2
    #: Root of a host tree, may be nested inside another one
    HOST_ROOT = 3
    #: Subtree that may be an entry point to a different renderer
    HOST_PORTAL = 4
    #: Native rendered element, its ``state_node`` is the rendered handle
    HOST_COMPONENT = 5
    HOST_TEXT = 6
    FRAGMENT = 7
    MODE = 8
    CONTEXT_CONSUMER = 9
    CONTEXT_PROVIDER = 10
    FORWARD_REF = 11
    PROFILER = 12
    SUSPENSE_COMPONENT = 13
    MEMO_COMPONENT = 14
    SIMPLE_MEMO_COMPONENT = 15
    LAZY_COMPONENT = 16
    INCOMPLETE_CLASS_COMPONENT = 17
    DEHYDRATED_FRAGMENT = 18
    SUSPENSE_LIST_COMPONENT = 19
    FUNDAMENTAL_COMPONENT = 20
    SCOPE_COMPONENT = 21
    BLOCK = 22
    OFFSCREEN_COMPONENT = 23
    LEGACY_HIDDEN_COMPONENT = 24


#: Kinds whose props are extracted and which become "stateless" when no state
#: is found
COMPONENT_TAGS: frozenset[int] = frozenset(
    {
        WorkTag.FUNCTION_COMPONENT,
        WorkTag.CLASS_COMPONENT,
        WorkTag.INDETERMINATE_COMPONENT,
        WorkTag.CONTEXT_PROVIDER,
    },
)

#: Kinds that may expose a state holder with a ``state`` field directly
DIRECT_STATE_TAGS: frozenset[int] = frozenset(
    {
        WorkTag.FUNCTION_COMPONENT,
        WorkTag.CLASS_COMPONENT,
        WorkTag.INDETERMINATE_COMPONENT,
    },
)

#: Kinds whose ``memoized_state`` may be a hook chain
CHAINED_STATE_TAGS: frozenset[int] = frozenset(
    {
        WorkTag.FUNCTION_COMPONENT,
        WorkTag.INDETERMINATE_COMPONENT,
        WorkTag.CONTEXT_PROVIDER,
    },
)

#: Kinds checked for store-backed provider context
PROVIDER_CONTEXT_TAGS: frozenset[int] = frozenset(
    {
        WorkTag.FUNCTION_COMPONENT,
        WorkTag.CLASS_COMPONENT,
    },
)

#: State marker for accepted nodes without state
STATELESS = "stateless"

#: Name given to nodes no name source could be resolved for
NAMELESS = "nameless"

#: Name and state of the synthetic output root
ROOT = "root"

#: Name given to anonymous context providers
CONTEXT_NAME = "Context"

#: Key that primitive context values are wrapped under
CONTEXT_VALUE_KEY = "CONTEXT"

#: Name of store-backed provider units
PROVIDER_NAME = "Provider"

#: Prefix of the traversal-order tags attached to rendered handles
TAG_ID_PREFIX = "fromLinkFiber"

#: Prefix of the synthetic names given to unnamed state entries
DEFAULT_STATE_LABEL = "No label"

#: Upper bound on hook chain entries walked for one node
MAX_HOOK_ENTRIES = 1000

#: Upper bound on nesting kept by :func:`fibersnap.extractors.filter_and_format_data`
MAX_FORMAT_DEPTH = 10

#: Placeholder for a value that refers back to one of its own containers
CIRCULAR_PLACEHOLDER = "[Circular]"

#: Placeholder for values nested deeper than the format depth
MAX_DEPTH_PLACEHOLDER = "[MaxDepth]"
