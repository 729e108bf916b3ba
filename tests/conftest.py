"""Shared test fixtures for vecdiff.

Every ``VECDIFF_*`` variable is removed before each test so results do not
depend on the developer's shell.  Builders for results sets live in
``helpers.py``.
"""

from __future__ import annotations

import pytest

_ENV_VARS = (
    "VECDIFF_LOG_LEVEL",
    "VECDIFF_LOG_VERBOSE",
    "VECDIFF_SHOW_HEX",
    "VECDIFF_DEFAULT_PRECISION",
    "VECDIFF_REFERENCE_ARCH",
)


@pytest.fixture(autouse=True)
def _clean_environment(monkeypatch):
    """Ensure no vecdiff setting leaks in from the environment."""
    for name in _ENV_VARS:
        monkeypatch.delenv(name, raising=False)
    yield
