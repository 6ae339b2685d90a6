"""Pytest configuration and shared fixtures.

This module contains fixtures used across all test modules.
"""

import logging
from collections.abc import Iterator

import pytest


@pytest.fixture(autouse=True)
def restore_root_logger() -> Iterator[None]:
    """Undo handler and level changes made by setup_logging()."""
    root = logging.getLogger()
    handlers = list(root.handlers)
    level = root.level
    yield
    root.handlers[:] = handlers
    root.setLevel(level)


@pytest.fixture
def mock_installed_output() -> bytes:
    """Sample pacman -Q output for testing."""
    return b"""bash 5.1.0-1
glibc 2.35-1
linux 5.10-1
vim 9.0.1-2
"""


@pytest.fixture
def mock_upgrade_output() -> bytes:
    """Sample pacman -Qu output for testing."""
    return b"""glibc 2.35-1 -> 2.36-1
linux 5.10-1 -> 5.15-1 [ignored]
vim 9.0.1-2 -> 9.0.2-1
"""


@pytest.fixture
def mock_malformed_upgrade_output() -> bytes:
    """pacman -Qu output mixing valid and malformed lines."""
    return b"""foo 1.0 => 2.0
glibc 2.35-1 -> 2.36-1
short
bar 1.0 -> 2.0 [held]
"""
