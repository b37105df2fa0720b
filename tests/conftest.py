"""
Shared pytest fixtures for brew-pkg tests.

This module provides:
- A fake Homebrew prefix under ``tmp_path`` that doubles as metadata provider
- An active ``StagingPlan`` whose root lives under ``tmp_path``
- structlog reset between tests

Usage:
    def test_something(brew, plan):
        record = brew.install("wget", "1.21.4", files=["bin/wget"])
        TreeStager(brew.layout(), plan).stage(record)
"""

import sys
from pathlib import Path
from typing import Generator

import pytest
import structlog

# Ensure brewpkg package is importable
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from brewpkg.core import settings as settings_module
from brewpkg.staging.plan import StagingPlan
from tests._support.homebrew import FakeHomebrew


@pytest.fixture(autouse=True)
def reset_structlog() -> Generator[None, None, None]:
    """Keep structlog configuration from leaking between tests."""
    structlog.reset_defaults()
    structlog.contextvars.clear_contextvars()
    yield
    structlog.reset_defaults()
    structlog.contextvars.clear_contextvars()


@pytest.fixture(autouse=True)
def reset_settings_cache() -> Generator[None, None, None]:
    """Drop cached settings so environment changes never leak between tests."""
    settings_module._cached_settings.cache_clear()
    yield
    settings_module._cached_settings.cache_clear()


@pytest.fixture
def brew(tmp_path: Path) -> FakeHomebrew:
    """Empty fake Homebrew installation rooted at ``tmp_path/homebrew``."""
    return FakeHomebrew(tmp_path / "homebrew")


@pytest.fixture
def staging_parent(tmp_path: Path) -> Path:
    """Parent directory for staging roots, so tests can assert it ends up empty."""
    path = tmp_path / "staging"
    path.mkdir()
    return path


@pytest.fixture
def plan(brew: FakeHomebrew, staging_parent: Path) -> Generator[StagingPlan, None, None]:
    """An active staging plan over the fake prefix."""
    with StagingPlan(brew.layout(), tmp_dir=staging_parent) as active:
        yield active
