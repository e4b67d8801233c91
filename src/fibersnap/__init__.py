"""fibersnap, immutable snapshot trees of live component trees."""

from .__about__ import (
    __author__,
    __copyright__,
    __description__,
    __email__,
    __license__,
    __package_name__,
    __title__,
    __version__,
)
from .builder import SnapshotBuilder, create_tree
from .config import SnapshotConfig
from .record import ComponentActionsRecord, component_actions_record
from .tree import ComponentData, SnapshotNode

__all__ = (
    "ComponentActionsRecord",
    "ComponentData",
    "SnapshotBuilder",
    "SnapshotConfig",
    "SnapshotNode",
    "__author__",
    "__copyright__",
    "__description__",
    "__email__",
    "__license__",
    "__package_name__",
    "__title__",
    "__version__",
    "component_actions_record",
    "create_tree",
)
