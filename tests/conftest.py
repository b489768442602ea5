"""Pytest configuration for repository test runs."""

from __future__ import annotations

import sys
from pathlib import Path

import pytest


def pytest_sessionstart() -> None:
    """Add src directory to sys.path for test imports."""
    project_root = Path(__file__).resolve().parent.parent
    src_path = project_root / "src"
    if str(src_path) not in sys.path:
        sys.path.insert(0, str(src_path))


@pytest.fixture
def config():
    """Config pointing at unreachable services so no test talks to the network."""
    from core.config import ChirpConfig

    return ChirpConfig(
        api_base_url="https://feed.invalid/1.1/",
        mongo_uri="mongodb://store.invalid:27017",
        database_name="test_chirp",
    )


@pytest.fixture
def store():
    """Empty in-memory document store."""
    from tests.fakes import InMemoryStore

    return InMemoryStore()
