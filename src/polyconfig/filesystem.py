"""Filesystem collaborators used by the configuration store.

The store only needs whole-file reads, whole-file writes and an existence
check. ``LocalFileSystem`` is the default; ``MemoryFileSystem`` keeps files
in a dict, which is handy for tests and for embedders that persist
configuration somewhere other than local disk.
"""

from __future__ import annotations

from pathlib import Path
from typing import Protocol


class FileSystem(Protocol):
    """Protocol for the file operations the store performs."""

    def exists(self, path: str) -> bool:
        """Return True if a file exists at path."""
        ...

    def read_text(self, path: str) -> str:
        """Read a whole file as UTF-8 text, line endings untouched."""
        ...

    def read_bytes(self, path: str) -> bytes:
        """Read a whole file as bytes."""
        ...

    def write_text(self, path: str, content: str) -> None:
        """Replace a file with UTF-8 text, line endings untouched."""
        ...

    def write_bytes(self, path: str, content: bytes) -> None:
        """Replace a file with bytes."""
        ...


class LocalFileSystem:
    """Local disk access via pathlib.

    Writes go to a sibling ``.tmp`` file first and are renamed into place,
    so a failed encode never leaves a truncated config behind.
    """

    def exists(self, path: str) -> bool:
        return Path(path).exists()

    def read_text(self, path: str) -> str:
        # newline="" keeps CRLF intact for codecs that care about it
        with open(path, encoding="utf-8", newline="") as f:
            return f.read()

    def read_bytes(self, path: str) -> bytes:
        return Path(path).read_bytes()

    def write_text(self, path: str, content: str) -> None:
        self.write_bytes(path, content.encode("utf-8"))

    def write_bytes(self, path: str, content: bytes) -> None:
        target = Path(path)
        if target.parent and not target.parent.exists():
            target.parent.mkdir(parents=True, exist_ok=True)
        temp_path = target.with_name(target.name + ".tmp")
        try:
            temp_path.write_bytes(content)
            temp_path.replace(target)
        except OSError:
            if temp_path.exists():
                temp_path.unlink()
            raise


class MemoryFileSystem:
    """In-memory file store keyed by path string."""

    def __init__(self, files: dict[str, bytes | str] | None = None) -> None:
        self.files: dict[str, bytes] = {}
        for path, content in (files or {}).items():
            self.files[path] = content.encode("utf-8") if isinstance(content, str) else content

    def exists(self, path: str) -> bool:
        return path in self.files

    def read_text(self, path: str) -> str:
        return self.read_bytes(path).decode("utf-8")

    def read_bytes(self, path: str) -> bytes:
        try:
            return self.files[path]
        except KeyError:
            raise FileNotFoundError(path) from None

    def write_text(self, path: str, content: str) -> None:
        self.files[path] = content.encode("utf-8")

    def write_bytes(self, path: str, content: bytes) -> None:
        self.files[path] = content
