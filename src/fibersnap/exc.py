"""Provide exceptions used by fibersnap.

fibersnap.exc
~~~~~~~~~~~~~

Notes
-----
Exceptions in this module inherit from :exc:`FibersnapException`. Extraction
errors are raised by the extractors and recovered by the builder, which logs
them and degrades the offending node instead of aborting the traversal.
"""

from __future__ import annotations


class FibersnapException(Exception):
    """Base exception for all fibersnap errors."""


class InvalidLiveRoot(FibersnapException, ValueError):
    """Raised when a snapshot is requested without a live root node."""

    def __init__(self, *args: object) -> None:
        super().__init__("Cannot build a snapshot tree without a live root node")


class ExtractionError(FibersnapException):
    """Raised when state or props cannot be extracted from a live node."""

    def __init__(
        self,
        reason: str,
        component_name: str | None = None,
        *args: object,
    ) -> None:
        msg = f"Extraction failed: {reason}"
        if component_name is not None:
            msg += f" (component: {component_name})"
        self.component_name = component_name
        super().__init__(msg)


class HooksParseError(ExtractionError):
    """Raised when a unit's source text cannot be parsed for hook names."""


class RecordDoesNotExist(FibersnapException, LookupError):
    """Raised when an index was never issued by the component actions record."""

    def __init__(self, index: int, generation: int | None = None, *args: object) -> None:
        msg = f"No component action recorded at index {index}"
        if generation is not None:
            msg += f" (record generation {generation})"
        self.index = index
        super().__init__(msg)
