"""On-disk encodings and extension-based detection.

The numeric values match the tags historically written into callers'
own configuration, so ``Encoding.coerce(2)`` still means YAML.
"""

from __future__ import annotations

from enum import Enum
from pathlib import PurePath
from types import MappingProxyType
from typing import Union


class Encoding(Enum):
    """Encoding of a configuration file.

    DETECT is the "unresolved" selector: the store resolves it from the
    file extension at load time. EXPORT is reserved and has no codec.
    """

    DETECT = -1
    PROPERTIES = 0
    CNF = 0  # alias of PROPERTIES
    JSON = 1
    YAML = 2
    EXPORT = 3
    SERIALIZED = 4
    ENUM = 5
    ENUMERATION = 5  # alias of ENUM

    def __str__(self) -> str:
        return self.name.lower()

    @classmethod
    def coerce(cls, value: EncodingSelector) -> Encoding:
        """Turn a selector (enum, integer tag, name or extension) into an Encoding.

        Raises:
            ValueError: If the selector names no encoding.
        """
        if isinstance(value, Encoding):
            return value
        if isinstance(value, bool):
            raise ValueError(f"Not an encoding selector: {value!r}")
        if isinstance(value, int):
            return cls(value)
        if isinstance(value, str):
            name = value.strip()
            try:
                return cls[name.upper()]
            except KeyError:
                pass
            detected = FORMATS.get(name.lower().lstrip("."))
            if detected is not None:
                return detected
        raise ValueError(f"Not an encoding selector: {value!r}")


EncodingSelector = Union[Encoding, int, str]

# Extension (lowercase, no dot) -> encoding
FORMATS: MappingProxyType[str, Encoding] = MappingProxyType(
    {
        "properties": Encoding.PROPERTIES,
        "cnf": Encoding.CNF,
        "conf": Encoding.CNF,
        "config": Encoding.CNF,
        "json": Encoding.JSON,
        "js": Encoding.JSON,
        "yml": Encoding.YAML,
        "yaml": Encoding.YAML,
        "sl": Encoding.SERIALIZED,
        "serialize": Encoding.SERIALIZED,
        "txt": Encoding.ENUM,
        "list": Encoding.ENUM,
        "enum": Encoding.ENUM,
    }
)


def file_extension(path: str | PurePath) -> str:
    """Return the lowercased, trimmed text after the last dot of the basename.

    A name without a dot yields the whole basename, so ``"json"`` detects
    as JSON just like ``"x.json"``.
    """
    name = PurePath(path).name
    return name.rsplit(".", 1)[-1].strip().lower()


def detect_encoding(path: str | PurePath) -> Encoding | None:
    """Look up the encoding for a path by its extension.

    Returns:
        The encoding, or None when the extension is not in FORMATS.
    """
    return FORMATS.get(file_extension(path))


def resolve_encoding(requested: EncodingSelector, path: str | PurePath) -> Encoding | None:
    """Resolve a requested encoding against a path.

    An explicit encoding is used verbatim, even if the extension disagrees.
    DETECT falls back to the extension table.
    """
    encoding = Encoding.coerce(requested)
    if encoding is Encoding.DETECT:
        return detect_encoding(path)
    return encoding
