"""Shared test fixtures for whiskers-lang.

Fixtures defined here are available to all tests in the suite without
needing an explicit import. Add project-wide fixtures here; keep
domain-specific fixtures close to the tests that use them.
"""
from __future__ import annotations

import pytest


@pytest.fixture()
def package_name() -> str:
    """Return the importable package name for assertions."""
    return "whiskers"


@pytest.fixture()
def expected_version() -> str:
    """Return the current expected version string.

    Update this fixture when cutting a release so that the version
    test immediately catches stale ``__version__`` values.
    """
    return "0.1.0"


@pytest.fixture()
def flag_script() -> str:
    """A small valid sprite: one green-flag script with a loop."""
    return (
        "when flag clicked\n"
        "    repeat 3\n"
        "        move 10 steps\n"
    )
