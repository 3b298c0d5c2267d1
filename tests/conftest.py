"""Shared pytest configuration and fixtures."""

import os
import pytest
from pathlib import Path

from watch_exporter.config.models import WatchSpec
from watch_exporter.utils.logger import setup_logger


def write_file(path: Path, mtime: float, content: str = "x") -> Path:
    """Create a file (and its parents) with a fixed modification time."""
    path.parent.mkdir(parents=True, exist_ok=True)
    path.write_text(content)
    os.utime(path, (mtime, mtime))
    return path


@pytest.fixture
def logger():
    """Create logger for tests."""
    return setup_logger("test", "DEBUG")


@pytest.fixture
def make_spec():
    """Factory for WatchSpec objects with test-friendly defaults."""
    def _make_spec(path, name="test-watch", recursive=False, file_regex=None, labels=None):
        return WatchSpec(
            name=name,
            path=path,
            recursive=recursive,
            file_regex=file_regex,
            labels=labels or {},
        )
    return _make_spec


@pytest.fixture
def sample_tree(tmp_path):
    """
    Tree used by the walk scenarios:

        w/a.txt      mtime 100
        w/b.txt      mtime 300
        w/c/d.txt    mtime 900
    """
    root = tmp_path / "w"
    write_file(root / "a.txt", 100)
    write_file(root / "b.txt", 300)
    write_file(root / "c" / "d.txt", 900)
    return root


@pytest.fixture
def config_file(tmp_path):
    """Write a YAML config file and return its path."""
    def _config_file(content: str) -> str:
        path = tmp_path / "config.yaml"
        path.write_text(content)
        return str(path)
    return _config_file


@pytest.fixture
def touch():
    """Return the write_file helper for tests building their own trees."""
    return write_file
