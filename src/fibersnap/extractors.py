"""State, props and context extraction.

fibersnap.extractors
~~~~~~~~~~~~~~~~~~~~

Pure functions turning raw live-node payloads into display-safe data:

- :func:`filter_and_format_data` copies props and state into plain
  ``dict``/``list``/scalar structures.
- :func:`get_state_and_context_data` reads the context of store-backed
  providers.
- :func:`get_hooks_state_and_update_method` walks a chained state structure.
- :func:`~fibersnap.hook_names.get_hooks_names` recovers the variable names
  of chained state entries.
"""

from __future__ import annotations

import copy
import dataclasses
import enum
import logging
import typing as t
from collections.abc import Mapping

from . import exc
from .constants import (
    CIRCULAR_PLACEHOLDER,
    DEFAULT_STATE_LABEL,
    MAX_DEPTH_PLACEHOLDER,
    MAX_FORMAT_DEPTH,
    MAX_HOOK_ENTRIES,
    PROVIDER_NAME,
)
from .hook_names import get_hooks_names
from .live import MISSING, read

if t.TYPE_CHECKING:
    from collections.abc import Iterable, Sequence

logger = logging.getLogger(__name__)

__all__ = (
    "HookEntry",
    "filter_and_format_data",
    "get_hooks_names",
    "get_hooks_state_and_update_method",
    "get_state_and_context_data",
    "snapshot_value",
)

#: Keys holding host-runtime back-references rather than user data
INTERNAL_KEY_PREFIXES: tuple[str, ...] = ("__", "_react", "_owner")
INTERNAL_KEYS: frozenset[str] = frozenset({"$$typeof", "_store", "_self", "_source"})

STATE_HOOK_TYPES = frozenset({"useState", "use_state", "useReducer", "use_reducer"})
CONTEXT_HOOK_TYPES = frozenset({"useContext", "use_context"})
MEMO_HOOK_TYPES = frozenset({"useMemo", "use_memo"})

_SCALARS = (str, int, float, bool, type(None))


class _Drop:
    """Marker for values omitted from formatted data."""


_DROP = _Drop()


@dataclasses.dataclass(frozen=True)
class HookEntry:
    """Value of one chained state entry and the holder able to change it."""

    state: t.Any
    component: t.Any


def _is_internal_key(key: t.Any) -> bool:
    if not isinstance(key, str):
        return False
    return key in INTERNAL_KEYS or key.startswith(INTERNAL_KEY_PREFIXES)


def _safe_repr(value: t.Any) -> str:
    try:
        return repr(value)
    except Exception:
        return f"<unrepresentable {type(value).__name__}>"


def _format_mapping(
    items: Iterable[tuple[t.Any, t.Any]],
    depth: int,
    max_depth: int,
    ancestors: set[int],
) -> dict[str, t.Any]:
    formatted: dict[str, t.Any] = {}
    for key, value in items:
        if _is_internal_key(key):
            continue
        item = _format_value(value, depth + 1, max_depth, ancestors)
        if item is not _DROP:
            formatted[key if isinstance(key, str) else _safe_repr(key)] = item
    return formatted


def _format_value(
    value: t.Any,
    depth: int,
    max_depth: int,
    ancestors: set[int],
) -> t.Any:
    if isinstance(value, _SCALARS):
        return value
    if isinstance(value, enum.Enum):
        return _format_value(value.value, depth, max_depth, ancestors)
    if callable(value):
        return _DROP
    if depth > max_depth:
        return MAX_DEPTH_PLACEHOLDER
    if id(value) in ancestors:
        return CIRCULAR_PLACEHOLDER

    ancestors.add(id(value))
    try:
        if isinstance(value, Mapping):
            return _format_mapping(value.items(), depth, max_depth, ancestors)
        if dataclasses.is_dataclass(value):
            return _format_mapping(
                (
                    (f.name, getattr(value, f.name, None))
                    for f in dataclasses.fields(value)
                ),
                depth,
                max_depth,
                ancestors,
            )
        if isinstance(value, (list, tuple, set, frozenset)):
            items = [
                _format_value(item, depth + 1, max_depth, ancestors) for item in value
            ]
            return [item for item in items if item is not _DROP]
        return _safe_repr(value)
    finally:
        ancestors.discard(id(value))


def filter_and_format_data(
    payload: t.Any,
    *,
    max_depth: int = MAX_FORMAT_DEPTH,
) -> dict[str, t.Any]:
    """Copy a props or state payload into a display-safe dictionary.

    Callables and host-runtime internals are dropped, cycles are replaced by
    ``"[Circular]"`` and anything nested deeper than *max_depth* by
    ``"[MaxDepth]"``. Never raises.

    Parameters
    ----------
    payload : Any
        Mapping, dataclass instance or plain object to copy
    max_depth : int, optional
        Nesting depth to keep

    Returns
    -------
    dict[str, Any]
        Formatted copy; empty when *payload* holds no data

    Examples
    --------
    >>> props = {"title": "Board", "on_click": print, "squares": [None, "X"]}
    >>> filter_and_format_data(props)
    {'title': 'Board', 'squares': [None, 'X']}

    >>> loop = {"name": "loop"}
    >>> loop["self"] = loop
    >>> filter_and_format_data(loop)
    {'name': 'loop', 'self': '[Circular]'}

    >>> filter_and_format_data({"a": {"b": {"c": 1}}}, max_depth=1)
    {'a': {'b': '[MaxDepth]'}}
    """
    if payload is None or payload is MISSING:
        return {}
    ancestors: set[int] = set()
    try:
        if isinstance(payload, Mapping) or dataclasses.is_dataclass(payload):
            formatted = _format_value(payload, 0, max_depth, ancestors)
        elif hasattr(payload, "__dict__") and not callable(payload):
            formatted = _format_value(vars(payload), 0, max_depth, ancestors)
        else:
            return {}
    except Exception:
        logger.debug("Cannot format payload %s", _safe_repr(payload), exc_info=True)
        return {}
    return formatted if isinstance(formatted, dict) else {}


def snapshot_value(value: t.Any, *, max_depth: int = MAX_FORMAT_DEPTH) -> t.Any:
    """Return a copy of a state value that later live updates cannot reach.

    Values that cannot be deep-copied are formatted like props instead.

    Examples
    --------
    >>> state = {"squares": [None, "X"]}
    >>> copied = snapshot_value(state)
    >>> state["squares"][0] = "O"
    >>> copied
    {'squares': [None, 'X']}
    """
    try:
        return copy.deepcopy(value)
    except Exception:
        logger.debug("Cannot copy state %s", _safe_repr(value), exc_info=True)
    formatted = _format_value(value, 0, max_depth, set())
    return None if formatted is _DROP else formatted


def get_state_and_context_data(
    memoized_state: t.Any,
    component_name: str,
    debug_hook_types: Sequence[str] | None,
) -> dict[str, t.Any]:
    """Read state and provider context from a chained state structure.

    *debug_hook_types* names the hook behind each chain entry; context hooks
    occupy no chain entry. State hooks are labelled ``"No label N"``. For
    :data:`~fibersnap.constants.PROVIDER_NAME` units, the memoized value
    carrying a ``store`` supplies the context through the store's
    ``get_state()`` (or ``getState()``).

    Returns
    -------
    dict[str, Any]
        The context for providers, the labelled state otherwise

    Raises
    ------
    :exc:`fibersnap.exc.ExtractionError`
        If a provider's store cannot report its state

    Examples
    --------
    >>> class Store:
    ...     def get_state(self):
    ...         return {"todos": ["write docs"]}
    >>> memo = {"memoized_state": ({"store": Store()}, []), "next": None}
    >>> get_state_and_context_data(memo, "Provider", ["useMemo"])
    {'todos': ['write docs']}

    >>> chain = {"memoized_state": 3, "next": {"memoized_state": "on", "next": None}}
    >>> get_state_and_context_data(chain, "Toggle", ["useState", "useContext", "useState"])
    {'No label 1': 3, 'No label 2': 'on'}
    """
    state: dict[str, t.Any] = {}
    context: dict[str, t.Any] = {}
    is_provider = component_name == PROVIDER_NAME
    entry = memoized_state
    seen: set[int] = set()
    state_counter = 1

    for hook_type in debug_hook_types or ():
        if hook_type in CONTEXT_HOOK_TYPES:
            continue
        if entry is None or entry is MISSING or id(entry) in seen:
            break
        seen.add(id(entry))
        value = read(entry, "memoized_state")

        if hook_type in STATE_HOOK_TYPES:
            state[f"{DEFAULT_STATE_LABEL} {state_counter}"] = value
            state_counter += 1
        elif hook_type in MEMO_HOOK_TYPES and is_provider:
            context.update(_store_context(value, component_name))

        entry = read(entry, "next")

    if is_provider:
        return context
    return filter_and_format_data(state)


def _store_context(memoized: t.Any, component_name: str) -> dict[str, t.Any]:
    # Memo entries hold (value, dependencies)
    if isinstance(memoized, (list, tuple)) and memoized:
        memoized = memoized[0]
    store = read(memoized, "store")
    if store is MISSING or store is None:
        return {}
    get_state = read(store, "get_state")
    if not callable(get_state):
        get_state = read(store, "getState")
    if not callable(get_state):
        return {}
    try:
        return filter_and_format_data(get_state())
    except Exception as e:
        raise exc.ExtractionError("store state unavailable", component_name) from e


def get_hooks_state_and_update_method(
    memoized_state: t.Any,
    *,
    max_entries: int = MAX_HOOK_ENTRIES,
) -> list[HookEntry]:
    """Walk a chained state structure front to back.

    Entries with a ``queue`` are returned with their value; the queue is the
    holder a replay dispatches to. The walk stops at the end of the chain, at
    an entry seen before, or after *max_entries* entries.

    Raises
    ------
    :exc:`fibersnap.exc.ExtractionError`
        If an entry with a queue carries no value

    Examples
    --------
    >>> queue = object()
    >>> chain = {"memoized_state": 0, "queue": queue, "next": None}
    >>> [entry.state for entry in get_hooks_state_and_update_method(chain)]
    [0]
    """
    entries: list[HookEntry] = []
    seen: set[int] = set()
    entry = memoized_state
    walked = 0

    while entry is not None and entry is not MISSING:
        if id(entry) in seen:
            logger.debug("hook chain loops back after %d entries", walked)
            break
        if walked >= max_entries:
            logger.warning("hook chain truncated at %d entries", max_entries)
            break
        seen.add(id(entry))
        walked += 1

        queue = read(entry, "queue")
        if queue is not None and queue is not MISSING:
            value = read(entry, "memoized_state")
            if value is MISSING:
                msg = f"hook entry {walked} has a queue but no value"
                raise exc.ExtractionError(msg)
            entries.append(HookEntry(state=value, component=queue))

        entry = read(entry, "next")

    return entries
