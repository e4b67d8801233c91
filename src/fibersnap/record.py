"""Component actions record.

fibersnap.record
~~~~~~~~~~~~~~~~

Append-only table of the mutable state holders discovered while building
snapshots. Every holder gets a stable integer index; snapshot nodes carry
those indices (``index`` / ``hooks_index``) so a later replay can look the
holders up again and push old state back into them.

Indices are only meaningful for the record that issued them and only until
that record is cleared (a full host reload). :attr:`ComponentActionsRecord.generation`
changes on every :meth:`ComponentActionsRecord.clear`.
"""

from __future__ import annotations

import logging
import threading
import typing as t

from . import exc

if t.TYPE_CHECKING:
    from collections.abc import Iterable, Iterator

logger = logging.getLogger(__name__)


class ComponentActionsRecord:
    """Process-wide store of mutator handles, keyed by monotonic index.

    Appends are serialized by a lock, so concurrent builds never receive
    duplicate or skipped indices.

    Examples
    --------
    >>> record = ComponentActionsRecord()
    >>> record.save_new("first holder")
    0
    >>> record.save_new("second holder")
    1
    >>> record.get(1)
    'second holder'
    >>> record.get_many([1, 0])
    ['second holder', 'first holder']
    >>> len(record)
    2

    Clearing starts a new generation and invalidates earlier indices:

    >>> record.clear()
    >>> record.generation
    1
    >>> record.get(0)
    Traceback (most recent call last):
        ...
    fibersnap.exc.RecordDoesNotExist: No component action recorded at index 0 (record generation 1)
    """

    def __init__(self) -> None:
        self._lock = threading.Lock()
        self._handles: list[t.Any] = []
        self._generation = 0

    def __len__(self) -> int:
        return len(self._handles)

    def __iter__(self) -> Iterator[tuple[int, t.Any]]:
        with self._lock:
            handles = list(self._handles)
        return iter(enumerate(handles))

    def __repr__(self) -> str:
        return (
            f"{self.__class__.__name__}"
            f"(size={len(self._handles)}, generation={self._generation})"
        )

    @property
    def generation(self) -> int:
        """Number of times this record has been cleared."""
        return self._generation

    def save_new(self, handle: t.Any) -> int:
        """Append *handle* and return its index.

        Parameters
        ----------
        handle : Any
            Mutable state holder (class instance or hook queue)

        Returns
        -------
        int
            Index of *handle*, one greater than the previously issued index
        """
        with self._lock:
            self._handles.append(handle)
            return len(self._handles) - 1

    def get(self, index: int) -> t.Any:
        """Return the handle saved at *index*.

        Raises
        ------
        :exc:`fibersnap.exc.RecordDoesNotExist`
            If *index* was not issued in the current generation
        """
        if isinstance(index, bool) or not isinstance(index, int) or index < 0:
            raise exc.RecordDoesNotExist(index, self._generation)
        try:
            return self._handles[index]
        except IndexError:
            raise exc.RecordDoesNotExist(index, self._generation) from None

    def get_many(self, indices: Iterable[int]) -> list[t.Any]:
        """Return the handles saved at *indices*, in the given order."""
        return [self.get(index) for index in indices]

    def clear(self) -> None:
        """Drop every handle and start a new generation of indices."""
        with self._lock:
            dropped = len(self._handles)
            self._handles = []
            self._generation += 1
        logger.debug(
            "component actions record cleared",
            extra={"dropped": dropped, "generation": self._generation},
        )


#: Default record shared by builders that are not given one explicitly
component_actions_record = ComponentActionsRecord()
