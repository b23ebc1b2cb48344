"""Root pytest configuration for all tests."""

from __future__ import annotations

from collections.abc import Iterator

import pytest

from polyconfig.filesystem import MemoryFileSystem
from polyconfig.logging import reset_logging


class FailingFileSystem(MemoryFileSystem):
    """Memory filesystem whose writes always fail."""

    def write_text(self, path: str, content: str) -> None:
        raise OSError(f"disk full: {path}")

    def write_bytes(self, path: str, content: bytes) -> None:
        raise OSError(f"disk full: {path}")


@pytest.fixture
def memfs() -> MemoryFileSystem:
    """An empty in-memory filesystem."""
    return MemoryFileSystem()


@pytest.fixture
def failing_fs() -> FailingFileSystem:
    """A filesystem that refuses every write."""
    return FailingFileSystem()


@pytest.fixture(autouse=True)
def clean_logging() -> Iterator[None]:
    """Leave the polyconfig logger unconfigured around each test."""
    reset_logging()
    yield
    reset_logging()
