"""Metadata package."""

from __future__ import annotations

__title__ = "fibersnap"
__package_name__ = "fibersnap"
__version__ = "0.1.0"
__description__ = "Immutable snapshot trees of live component fibers for state inspection"
__email__ = "fibersnap@users.noreply.github.com"
__author__ = "fibersnap contributors"
__github__ = "https://github.com/fibersnap/fibersnap"
__docs__ = "https://github.com/fibersnap/fibersnap#readme"
__tracker__ = "https://github.com/fibersnap/fibersnap/issues"
__changes__ = "https://github.com/fibersnap/fibersnap/blob/master/CHANGES"
__pypi__ = "https://pypi.org/project/fibersnap/"
__license__ = "MIT"
__copyright__ = "Copyright 2026- fibersnap contributors"
