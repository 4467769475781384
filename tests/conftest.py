"""Pytest configuration and shared fixtures."""

import sys
from pathlib import Path

import pytest

# Ensure src directory is in Python path for all tests
sys.path.insert(0, str(Path(__file__).parent.parent / "src"))

from taskline.config import Config  # noqa: E402
from taskline.engine import Engine  # noqa: E402
from taskline.storage import Storage  # noqa: E402


@pytest.fixture(autouse=True)
def reset_config():
    """Drop the cached configuration between tests."""
    Config._instance = None
    yield
    Config._instance = None


@pytest.fixture()
def data_file(tmp_path: Path) -> Path:
    """Task file path inside a not-yet-existing directory."""
    return tmp_path / "data" / "tasks.txt"


@pytest.fixture()
def storage(data_file: Path) -> Storage:
    return Storage(data_file)


@pytest.fixture()
def engine(storage: Storage) -> Engine:
    """Engine backed by an empty task file in a temp directory."""
    return Engine(storage)
