"""Recover the variable names bound to chained state entries.

fibersnap.hook_names
~~~~~~~~~~~~~~~~~~~~

Hook units only hand their values to the host runtime, never the names of the
variables they are bound to. The names are recovered from the unit's source
text: every unpacking assignment from a ``use*`` call, in source order, is
taken to correspond to the next entry of the unit's state chain.

>>> source = '''
... def Counter(props):
...     count, set_count = use_state(0)
...     [label, set_label] = use_state("clicks")
...     return count
... '''
>>> [hook.var_name for hook in get_hooks_names(source)]
['count', 'label']
>>> resolve_names(source, 3)
['count', 'label', 'No label 3']
"""

from __future__ import annotations

import ast
import dataclasses
import logging
import re
import textwrap
import typing as t

from . import exc
from .constants import DEFAULT_STATE_LABEL

logger = logging.getLogger(__name__)

HOOK_CALL_RE = re.compile(r"^use(_|[A-Z]|$)")


@dataclasses.dataclass(frozen=True)
class HookName:
    """Hook call found in a unit's source and the variable it is bound to."""

    hook_name: str
    var_name: str


class HooksNameResolver(t.Protocol):
    """Strategy aligning source-derived names with *count* chain entries."""

    def __call__(self, source_text: str, count: int) -> list[str]: ...


def _callee_name(call: ast.Call) -> str | None:
    func = call.func
    if isinstance(func, ast.Name):
        return func.id
    if isinstance(func, ast.Attribute):
        return func.attr
    return None


class _HookAssignmentVisitor(ast.NodeVisitor):
    """Collect ``a, set_a = use_x(...)`` assignments of the outermost unit."""

    def __init__(self) -> None:
        self.hooks: list[HookName] = []
        self._unit_depth = 0

    def _visit_unit(self, node: ast.AST) -> None:
        # Assignments inside nested callbacks do not belong to the unit's chain
        if self._unit_depth > 0:
            return
        self._unit_depth += 1
        self.generic_visit(node)
        self._unit_depth -= 1

    visit_FunctionDef = _visit_unit
    visit_AsyncFunctionDef = _visit_unit

    def visit_Lambda(self, node: ast.Lambda) -> None:
        return

    def visit_Assign(self, node: ast.Assign) -> None:
        value = node.value
        if not isinstance(value, ast.Call):
            return
        hook_name = _callee_name(value)
        if hook_name is None or not HOOK_CALL_RE.match(hook_name):
            return
        for target in node.targets:
            if not isinstance(target, (ast.Tuple, ast.List)) or not target.elts:
                continue
            first = target.elts[0]
            if isinstance(first, ast.Name):
                self.hooks.append(HookName(hook_name=hook_name, var_name=first.id))
                return


def get_hooks_names(source_text: str) -> list[HookName]:
    """Return the hook assignments of a unit's source, in source order.

    Parameters
    ----------
    source_text : str
        Source of the unit, as returned by :func:`inspect.getsource`

    Returns
    -------
    list[HookName]
        One entry per ``use*`` call unpacked into a tuple or list

    Raises
    ------
    :exc:`fibersnap.exc.HooksParseError`
        If the source cannot be parsed
    """
    if not source_text.strip():
        return []
    try:
        module = ast.parse(textwrap.dedent(source_text))
    except (SyntaxError, ValueError) as e:
        msg = f"cannot parse unit source: {e}"
        raise exc.HooksParseError(msg) from e

    visitor = _HookAssignmentVisitor()
    visitor.visit(module)
    return visitor.hooks


def fallback_name(position: int) -> str:
    """Return the synthetic name of the chain entry at *position* (0-based)."""
    return f"{DEFAULT_STATE_LABEL} {position + 1}"


def resolve_names(source_text: str, count: int) -> list[str]:
    """Return exactly *count* distinct names for a unit's chain entries.

    Names missing from the source are replaced by :func:`fallback_name`;
    surplus names are dropped. A name bound twice gets its 1-based position
    appended from the second binding on.

    Examples
    --------
    >>> source = '''
    ... def Feed(props):
    ...     data, loading = use_fetch("/a")
    ...     data, loading = use_fetch("/b")
    ... '''
    >>> resolve_names(source, 3)
    ['data', 'data_2', 'No label 3']
    """
    names = [hook.var_name for hook in get_hooks_names(source_text)]
    if len(names) != count:
        logger.debug(
            "hook name count mismatch",
            extra={"found": len(names), "expected": count},
        )
    resolved: list[str] = []
    seen: set[str] = set()
    for position in range(count):
        name = names[position] if position < len(names) else fallback_name(position)
        if name in seen:
            name = f"{name}_{position + 1}"
        while name in seen:
            name = f"{name}_"
        seen.add(name)
        resolved.append(name)
    return resolved
