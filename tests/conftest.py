"""Pytest configuration for cpuidb tests."""

from __future__ import annotations

import pytest

from cpuidb import dogelog, helpers


@pytest.fixture(autouse=True)
def reset_global_state():
    """Logging and the host CPU cache are module globals."""
    dogelog.init()
    dogelog.progress = None
    helpers._cached_cpu = 0
    yield
    dogelog.init()
    dogelog.progress = None
    helpers._cached_cpu = 0


@pytest.fixture
def source_dir(tmp_path):
    directory = tmp_path / "source"
    directory.mkdir()
    return directory
