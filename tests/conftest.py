"""Shared pytest fixtures for the asciisvg test suite.

Fixtures:
    settings: Default Settings (8x16 cells, optimisation on)
    raw_settings: Settings with deduplication and line merging switched off
    wide_settings: 10x20 cells, optimisation off, for checking geometry ratios
"""

import logging
import sys
from pathlib import Path

import pytest

# Allow running the suite from a checkout without installing the package
sys.path.insert(0, str(Path(__file__).parent.parent))

from asciisvg import Settings  # noqa: E402


@pytest.fixture
def settings():
    return Settings()


@pytest.fixture
def raw_settings():
    return Settings(optimize=False, compactPath=False)


@pytest.fixture
def wide_settings():
    return Settings(cellWidth=10, cellHeight=20, optimize=False, compactPath=False)


@pytest.fixture(autouse=True)
def reset_logger():
    """Drop handlers the CLI attaches so they never outlive a captured stream."""
    yield
    logger = logging.getLogger("asciisvg")
    logger.handlers.clear()
    logger.setLevel(logging.NOTSET)
