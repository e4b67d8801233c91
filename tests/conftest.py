"""Fixtures for the fibersnap test suite."""

from __future__ import annotations

import logging
import os

import pytest

from fibersnap.builder import SnapshotBuilder
from fibersnap.config import SnapshotConfig
from fibersnap.record import ComponentActionsRecord

logger = logging.getLogger(__name__)


@pytest.fixture(autouse=True)
def clear_env(monkeypatch: pytest.MonkeyPatch) -> None:
    """Remove ``FIBERSNAP_*`` variables of the developer's shell."""
    for key in list(os.environ):
        if key.startswith("FIBERSNAP_"):
            monkeypatch.delenv(key)


@pytest.fixture
def record() -> ComponentActionsRecord:
    """Fresh component actions record, isolated from the process-wide one."""
    return ComponentActionsRecord()


@pytest.fixture
def config() -> SnapshotConfig:
    return SnapshotConfig()


@pytest.fixture
def builder(
    record: ComponentActionsRecord,
    config: SnapshotConfig,
) -> SnapshotBuilder:
    return SnapshotBuilder(record=record, config=config)
