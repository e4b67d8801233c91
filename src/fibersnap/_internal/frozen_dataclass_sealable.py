"""Frozen dataclasses with a two-phase, sealable lifecycle.

Snapshot trees are assembled incrementally: a node is created, children are
appended to it while the traversal runs, and only then does the whole tree
become read-only. This module supports that lifecycle:

1. Field-level mutability control:

   Fields carrying ``metadata={"mutable_during_init": True}`` (see
   :func:`mutable_field`) can be reassigned until the object is sealed. All
   other fields are frozen as soon as ``__init__`` returns.

2. Explicit sealing:

   :meth:`seal` blocks any further assignment. With ``deep=True`` it also seals
   nested sealable values, including sealables held inside lists and tuples.

3. Frozen containers:

   When an object is sealed, list values of its mutable fields are replaced by
   tuples, so sealed trees cannot grow through ``children.append``.

Classes without any mutable field are sealed automatically at the end of
``__init__``.
"""

from __future__ import annotations

import dataclasses
import typing as t

from typing_extensions import dataclass_transform

_T = t.TypeVar("_T")


@t.runtime_checkable
class SealableProtocol(t.Protocol):
    """Protocol defining the interface for sealable objects."""

    _sealed: bool

    def seal(self, deep: bool = False) -> None:
        """Seal the object to prevent further modifications."""
        ...


class Sealable:
    """Base class for sealable objects.

    Attributes
    ----------
    _sealed : bool
        Whether the object is sealed or not
    """

    _sealed: bool = False

    def seal(self, deep: bool = False) -> None:
        """Seal the object to prevent further modifications.

        Parameters
        ----------
        deep : bool, optional
            If True, recursively seal any nested sealable objects, by default False
        """
        object.__setattr__(self, "_sealed", True)

    @classmethod
    def is_sealable(cls) -> bool:
        """Return True, subclasses of :class:`Sealable` are always sealable."""
        return True


def mutable_field(
    factory: t.Callable[[], t.Any] = list,
) -> t.Any:
    """Create a field that stays assignable until the object is sealed.

    Parameters
    ----------
    factory : callable, optional
        A callable that returns the default value for the field, by default list

    Returns
    -------
    dataclasses.Field
        A dataclass Field with metadata indicating it's mutable during initialization
    """
    return dataclasses.field(
        default_factory=factory,
        metadata={"mutable_during_init": True},
    )


def is_sealable(cls_or_obj: t.Any) -> bool:
    """Check if a class or object is sealable.

    Examples
    --------
    >>> from dataclasses import dataclass
    >>> @dataclass
    ... class Regular:
    ...     value: int
    >>> is_sealable(Regular)
    False
    >>> is_sealable(Regular(value=42))
    False
    >>> is_sealable("string")
    False

    >>> @frozen_dataclass_sealable
    ... class Decorated:
    ...     value: int
    >>> is_sealable(Decorated)
    True
    >>> is_sealable(Decorated(value=42))
    True
    """
    if isinstance(cls_or_obj, type):
        if issubclass(cls_or_obj, Sealable):
            return True
        return callable(getattr(cls_or_obj, "seal", None)) and callable(
            getattr(cls_or_obj, "is_sealable", None),
        )
    return isinstance(cls_or_obj, SealableProtocol)


def _field_values(obj: t.Any) -> list[t.Any]:
    return [getattr(obj, f.name, None) for f in dataclasses.fields(obj)]


def _seal_nested(values: list[t.Any]) -> None:
    """Seal every sealable reachable from *values*.

    Walks with an explicit stack, so arbitrarily deep trees seal without
    growing the Python call stack.
    """
    stack = list(values)
    while stack:
        value = stack.pop()
        if isinstance(value, (list, tuple)):
            stack.extend(value)
        elif isinstance(value, type) or not is_sealable(value):
            continue
        elif getattr(value, "_sealed", False):
            continue
        elif dataclasses.is_dataclass(value):
            value.seal()
            stack.extend(_field_values(value))
        else:
            value.seal(deep=True)


@dataclass_transform(frozen_default=True)
def frozen_dataclass_sealable(cls: type[_T]) -> type[_T]:
    """Create a dataclass that is immutable, with field-level mutability control.

    Parameters
    ----------
    cls : type
        The class to decorate

    Returns
    -------
    type
        The decorated class with immutability features

    Examples
    --------
    >>> @frozen_dataclass_sealable
    ... class Node:
    ...     name: str
    ...     children: list = mutable_field()

    >>> node = Node(name="parent")
    >>> node.name = "renamed"
    Traceback (most recent call last):
        ...
    AttributeError: Node is immutable: cannot modify field 'name'

    Mutable fields can change until the node is sealed:

    >>> node.children.append(Node(name="child"))
    >>> node.seal(deep=True)
    >>> node.children[0]._sealed
    True

    Sealing freezes list fields into tuples:

    >>> type(node.children).__name__
    'tuple'
    >>> node.children = []
    Traceback (most recent call last):
        ...
    AttributeError: Node is sealed: cannot modify field 'children'
    """
    if not isinstance(cls, type):
        err_msg = "Expected a class when calling frozen_dataclass_sealable directly"
        raise TypeError(err_msg)

    class_name = cls.__name__

    # Immutability is enforced by the __setattr__ below, not by dataclasses
    if not dataclasses.is_dataclass(cls):
        cls = dataclasses.dataclass(frozen=False)(cls)

    mutable_fields = frozenset(
        f.name
        for f in dataclasses.fields(cls)  # type: ignore[arg-type]
        if f.metadata.get("mutable_during_init", False)
    )
    original_init = cls.__init__

    def custom_setattr(self: t.Any, name: str, value: t.Any) -> None:
        if name.startswith("_"):
            object.__setattr__(self, name, value)
            return

        if getattr(self, "_sealed", False):
            error_msg = f"{class_name} is sealed: cannot modify field '{name}'"
            raise AttributeError(error_msg)

        if getattr(self, "_initializing", False) or name in mutable_fields:
            object.__setattr__(self, name, value)
            return

        error_msg = f"{class_name} is immutable: cannot modify field '{name}'"
        raise AttributeError(error_msg)

    def custom_delattr(self: t.Any, name: str) -> None:
        if name.startswith("_"):
            object.__delattr__(self, name)
            return

        state = "sealed" if getattr(self, "_sealed", False) else "immutable"
        error_msg = f"{class_name} is {state}: cannot delete field '{name}'"
        raise AttributeError(error_msg)

    def custom_init(self: t.Any, *args: t.Any, **kwargs: t.Any) -> None:
        object.__setattr__(self, "_sealed", False)
        object.__setattr__(self, "_initializing", True)
        try:
            original_init(self, *args, **kwargs)
        finally:
            object.__setattr__(self, "_initializing", False)

        if not mutable_fields:
            self.seal()

    def seal_method(self: t.Any, deep: bool = False) -> None:
        """Seal the object to prevent further modifications.

        Parameters
        ----------
        deep : bool, optional
            If True, recursively seal any nested sealable objects, by default False
        """
        for name in mutable_fields:
            value = getattr(self, name, None)
            if isinstance(value, list):
                object.__setattr__(self, name, tuple(value))

        object.__setattr__(self, "_sealed", True)

        if deep:
            _seal_nested(_field_values(self))

    def is_sealable_class_method(cls_param: type) -> bool:
        return True

    cls.__setattr__ = custom_setattr  # type: ignore[assignment,method-assign]
    cls.__delattr__ = custom_delattr  # type: ignore[assignment,method-assign]
    cls.__init__ = custom_init  # type: ignore[method-assign]
    cls.seal = seal_method  # type: ignore[attr-defined]
    cls.is_sealable = classmethod(is_sealable_class_method)  # type: ignore[attr-defined]

    return cls
