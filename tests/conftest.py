"""
Pytest configuration and shared fixtures for ReelVault tests.

This module provides common fixtures and configuration that can be used
across all test modules in the project.
"""

from __future__ import annotations

from collections.abc import Generator
from pathlib import Path
from typing import Any

import pytest

from reelvault.config import Settings
from reelvault.core.collection import Collection
from reelvault.core.entities import SearchResult
from reelvault.services.cache import FileCache, reset_cache_state


@pytest.fixture(autouse=True)
def fresh_cache_state() -> Generator[None, None, None]:
    """Reset the process-wide codec detection and pruning latch around each test."""
    reset_cache_state()
    yield
    reset_cache_state()


@pytest.fixture
def cache_dir(tmp_path: Path) -> Path:
    """Directory for cache files (not created yet)."""
    return tmp_path / "cache"


@pytest.fixture
def file_cache(cache_dir: Path) -> FileCache:
    """FileCache rooted in a temporary directory."""
    return FileCache(cache_dir)


@pytest.fixture
def settings(tmp_path: Path) -> Settings:
    """Settings with the cache pointed at a temporary directory."""
    return Settings(cache={"enabled": True, "directory": str(tmp_path / "client-cache")})


def make_candidates(*rows: dict[str, Any]) -> Collection[SearchResult]:
    """Build a Collection of SearchResult from raw rows."""
    return Collection(SearchResult.from_dict(row) for row in rows)


@pytest.fixture
def candidates_factory():
    """Factory fixture returning :func:`make_candidates`."""
    return make_candidates
