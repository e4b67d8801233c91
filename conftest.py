"""Conftest.py (root-level).

We keep this in root so fixtures are available to pytest's doctest plugin
(``pytest --doctest-modules src``) and so ``tests.helpers`` is importable
from the test modules.
"""

from __future__ import annotations

import typing as t

import pytest
from _pytest.doctest import DoctestItem

from fibersnap.config import SnapshotConfig
from fibersnap.record import ComponentActionsRecord
from fibersnap.tree import SnapshotNode


@pytest.fixture(autouse=True)
def add_doctest_fixtures(
    request: pytest.FixtureRequest,
    doctest_namespace: dict[str, t.Any],
) -> None:
    """Configure doctest fixtures for pytest-doctest."""
    if isinstance(request._pyfuncitem, DoctestItem):
        doctest_namespace["ComponentActionsRecord"] = ComponentActionsRecord
        doctest_namespace["SnapshotConfig"] = SnapshotConfig
        doctest_namespace["SnapshotNode"] = SnapshotNode
