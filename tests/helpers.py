"""Fake live trees for snapshot tests."""

from __future__ import annotations

import dataclasses
import typing as t

from fibersnap.constants import WorkTag


def use_state(initial: t.Any) -> tuple[t.Any, t.Callable[[t.Any], None]]:
    """Stand-in state hook; the units below are inspected, never rendered."""
    return initial, lambda value: None


def Counter(props: t.Any) -> None:
    count, set_count = use_state(0)
    label, set_label = use_state("clicks")
    step, set_step = use_state(1)


def Toggle(props: t.Any) -> None:
    on, set_on = use_state(False)


def use_fetch(url: str) -> tuple[t.Any, bool]:
    return None, True


def Feed(props: t.Any) -> None:
    data, loading = use_fetch("/news")
    data, loading = use_fetch("/weather")


def Square(props: t.Any) -> None:
    pass


class ClassList:
    """Ordered tag list with the ``add``/``remove`` API of rendered elements."""

    def __init__(self, *tokens: str) -> None:
        self.tokens = list(tokens)

    def add(self, token: str) -> None:
        if token not in self.tokens:
            self.tokens.append(token)

    def remove(self, token: str) -> None:
        self.tokens.remove(token)

    def __iter__(self) -> t.Iterator[str]:
        return iter(list(self.tokens))

    def __len__(self) -> int:
        return len(self.tokens)


@dataclasses.dataclass(eq=False)
class Element:
    """Rendered handle of a host element."""

    class_list: ClassList = dataclasses.field(default_factory=ClassList)


class Holder:
    """Class-component instance owning direct state."""

    def __init__(self, state: t.Any) -> None:
        self.state = state
        self.updates: list[t.Any] = []

    def set_state(self, state: t.Any) -> None:
        self.updates.append(state)
        self.state = state


@dataclasses.dataclass(eq=False)
class Queue:
    """Update queue of one hook entry."""

    dispatched: list[t.Any] = dataclasses.field(default_factory=list)

    def dispatch(self, value: t.Any) -> None:
        self.dispatched.append(value)


@dataclasses.dataclass(eq=False)
class HookState:
    """One entry of a chained state structure."""

    memoized_state: t.Any
    queue: t.Any = None
    next: HookState | None = None


@dataclasses.dataclass(eq=False)
class Fiber:
    """Live node with every attribute the builder reads."""

    tag: int
    element_type: t.Any = None
    child: Fiber | None = None
    sibling: Fiber | None = None
    memoized_state: t.Any = None
    memoized_props: t.Any = None
    state_node: t.Any = None
    actual_duration: float | None = None
    actual_start_time: float | None = None
    self_base_duration: float | None = None
    tree_base_duration: float | None = None
    debug_hook_types: list[str] | None = None


def link(parent: Fiber, *children: Fiber) -> Fiber:
    """Attach *children* to *parent* through child and sibling links."""
    parent.child = children[0] if children else None
    for current, following in zip(children, children[1:]):
        current.sibling = following
    return parent


def hook_chain(*values: t.Any, queued: bool = True) -> HookState | None:
    """Return the head of a chain holding *values*, each with its own queue."""
    head: HookState | None = None
    for value in reversed(values):
        head = HookState(
            memoized_state=value,
            queue=Queue() if queued else None,
            next=head,
        )
    return head


def host_root(*children: Fiber) -> Fiber:
    return link(Fiber(tag=WorkTag.HOST_ROOT), *children)


def host_element(name: str = "div", *children: Fiber) -> Fiber:
    """Return a host element fiber whose rendered handle can carry tags."""
    return link(
        Fiber(tag=WorkTag.HOST_COMPONENT, element_type=name, state_node=Element()),
        *children,
    )


def class_component(
    name: str,
    state: t.Any,
    *children: Fiber,
    props: t.Any = None,
) -> Fiber:
    unit = type(name, (), {})
    return link(
        Fiber(
            tag=WorkTag.CLASS_COMPONENT,
            element_type=unit,
            state_node=Holder(state),
            memoized_props=props,
        ),
        *children,
    )


def function_component(
    unit: t.Any,
    *children: Fiber,
    hooks: HookState | None = None,
    props: t.Any = None,
) -> Fiber:
    return link(
        Fiber(
            tag=WorkTag.FUNCTION_COMPONENT,
            element_type=unit,
            memoized_state=hooks,
            memoized_props=props,
        ),
        *children,
    )


def named(name: str) -> t.Callable[..., None]:
    """Return a stateless unit called *name*."""

    def unit(props: t.Any) -> None:
        pass

    unit.__name__ = name
    return unit
