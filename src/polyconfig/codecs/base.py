"""Codec base class and the encoding -> codec registry."""

from __future__ import annotations

from abc import ABC, abstractmethod
import logging
from typing import Any

from polyconfig.encoding import Encoding


class Codec(ABC):
    """Paired decode/encode routine for one encoding.

    Subclasses set ``encoding`` and, for formats that are not text,
    ``binary = True`` so the store reads and writes bytes.
    """

    encoding: Encoding
    binary: bool = False

    @abstractmethod
    def decode(
        self,
        content: str | bytes,
        *,
        source: str = "<memory>",
        log: logging.Logger | None = None,
    ) -> Any:
        """Decode raw file content.

        Args:
            content: File content (str, or bytes when ``binary``).
            source: Name of the file, used only in diagnostics.
            log: Logger for decode warnings (the codec module logger if None).

        Returns:
            The decoded value. Usually a dict, but callers must not rely
            on that: a scalar or None means "no usable document".

        Raises:
            CodecError: If the content is malformed.
        """
        ...

    @abstractmethod
    def encode(self, document: dict[str, Any], **options: Any) -> str | bytes:
        """Encode a document to file content.

        Args:
            document: The document to encode.
            **options: Codec-specific output options.

        Raises:
            CodecError: If the document cannot be represented.
        """
        ...

    def __repr__(self) -> str:
        return f"<{type(self).__name__} {self.encoding}>"


_registry: dict[Encoding, Codec] = {}


def register_codec(codec: Codec) -> None:
    """Register (or replace) the codec for ``codec.encoding``."""
    _registry[codec.encoding] = codec


def unregister_codec(encoding: Encoding) -> None:
    """Remove the codec for an encoding, if any."""
    _registry.pop(encoding, None)


def get_codec(encoding: Encoding | None) -> Codec | None:
    """Return the registered codec for an encoding, or None."""
    if encoding is None:
        return None
    return _registry.get(encoding)


def registered_encodings() -> list[Encoding]:
    """List encodings that currently have a codec."""
    return list(_registry)
