"""Read access to live component trees.

fibersnap.live
~~~~~~~~~~~~~~

Live nodes belong to the host runtime. fibersnap never stores anything on
them; it reads attributes through :func:`read` (absent attributes are
:data:`MISSING`, never errors) and touches only the tag list of rendered
handles. The protocols below document the attributes that are read.
"""

from __future__ import annotations

import inspect
import logging
import typing as t
from collections.abc import Mapping

from .constants import NAMELESS

if t.TYPE_CHECKING:
    from collections.abc import Iterator, Sequence

logger = logging.getLogger(__name__)


class _Missing:
    """Marker for attributes a live object does not define."""

    _instance: _Missing | None = None

    def __new__(cls) -> _Missing:
        if cls._instance is None:
            cls._instance = super().__new__(cls)
        return cls._instance

    def __repr__(self) -> str:
        return "MISSING"

    def __bool__(self) -> bool:
        return False


#: Sentinel distinguishing "not defined" from falsy values such as ``None``
MISSING: t.Final = _Missing()


class ClassList(t.Protocol):
    """List-like tag API of a rendered handle."""

    def add(self, token: str) -> None: ...

    def remove(self, token: str) -> None: ...

    def __len__(self) -> int: ...

    def __iter__(self) -> Iterator[str]: ...


class RenderedHandle(t.Protocol):
    """Concrete rendered output of a host node."""

    class_list: ClassList


class StateHolder(t.Protocol):
    """Class instance owning a ``state`` field and a way to set it."""

    state: t.Any

    def set_state(self, state: t.Any) -> None: ...


class HookRecord(t.Protocol):
    """One entry of a chained (linked-list) state structure."""

    memoized_state: t.Any
    queue: t.Any
    next: HookRecord | None


class LiveNode(t.Protocol):
    """Node of the host runtime's first-child/next-sibling tree."""

    tag: int
    child: LiveNode | None
    sibling: LiveNode | None
    memoized_state: t.Any
    memoized_props: t.Any
    state_node: t.Any
    element_type: t.Any
    actual_duration: float | None
    actual_start_time: float | None
    self_base_duration: float | None
    tree_base_duration: float | None
    debug_hook_types: Sequence[str] | None


def read(obj: t.Any, name: str) -> t.Any:
    """Return attribute *name* of *obj*, or :data:`MISSING` when undefined.

    Mappings are read by key, so payloads can be plain dicts.

    Examples
    --------
    >>> read({"pathname": "/"}, "pathname")
    '/'
    >>> read(None, "state") is MISSING
    True
    >>> class Holder:
    ...     state = None
    >>> read(Holder(), "state") is None
    True
    """
    if obj is None or obj is MISSING:
        return MISSING
    if isinstance(obj, Mapping):
        return obj.get(name, MISSING)
    return getattr(obj, name, MISSING)


def read_optional(obj: t.Any, name: str) -> t.Any:
    """Return attribute *name* of *obj*, or ``None`` when undefined."""
    value = read(obj, name)
    return None if value is MISSING else value


def name_of(obj: t.Any) -> str | None:
    """Return the ``name`` (or ``__name__``) of *obj* when it is a non-empty str."""
    if obj is None or obj is MISSING:
        return None
    name = read(obj, "name")
    if not isinstance(name, str) or not name:
        name = getattr(obj, "__name__", None)
    return name if isinstance(name, str) and name else None


def wrapper_target(element_type: t.Any, name: str) -> t.Any:
    """Return wrapper attribute *name* of a unit, or :data:`MISSING`.

    Class units are never wrappers; their ``render`` is an ordinary method.
    """
    if inspect.isclass(element_type):
        return MISSING
    return read(element_type, name)


def resolve_component_name(element_type: t.Any) -> str:
    """Resolve the declared name of a live node's unit.

    Sources are tried in order: named context wrapper, lazily resolved target,
    render function, the unit itself.

    Examples
    --------
    >>> def Board():
    ...     pass
    >>> resolve_component_name(Board)
    'Board'
    >>> resolve_component_name({"render": Board})
    'Board'
    >>> resolve_component_name(None)
    'nameless'
    """
    context = wrapper_target(element_type, "context")
    display_name = read(context, "display_name")
    if isinstance(display_name, str) and display_name:
        return display_name

    for candidate in (
        wrapper_target(element_type, "result"),
        wrapper_target(element_type, "render"),
        element_type,
    ):
        name = name_of(candidate)
        if name is not None:
            return name
    return NAMELESS


def get_source_text(element_type: t.Any) -> str:
    """Return the declared source of a unit, or ``""`` when unavailable."""
    if isinstance(element_type, str):
        return element_type
    target = wrapper_target(element_type, "render")
    if not callable(target):
        target = element_type
    try:
        return inspect.getsource(target)
    except (OSError, TypeError):
        logger.debug("No source text for %r", element_type)
        return ""


def rendered_handle(node: t.Any) -> t.Any:
    """Return the rendered handle of *node*'s first child, or ``None``."""
    child = read_optional(node, "child")
    return read_optional(child, "state_node")


def has_tag_api(handle: t.Any) -> bool:
    """Return True if *handle* exposes a usable ``class_list``.

    Examples
    --------
    >>> has_tag_api(None)
    False
    >>> class Handle:
    ...     class_list = set()
    >>> has_tag_api(Handle())
    True
    """
    class_list = read(handle, "class_list")
    if class_list is MISSING or class_list is None:
        return False
    return all(
        callable(getattr(class_list, method, None))
        for method in ("add", "remove", "__iter__", "__len__")
    )
