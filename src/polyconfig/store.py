"""The configuration store.

A ConfigStore loads one file in one of the supported encodings, fills in
caller-supplied defaults, serves flat and dotted-path lookups, and writes
the document back in the same encoding.

Example usage:
    from polyconfig import ConfigStore, Encoding

    store = ConfigStore("server.yml", defaults={"port": 8080, "tls": {"enabled": False}})
    if not store.valid:
        ...  # unknown extension: store holds an empty document

    port = store.get("port")
    store.set_nested("tls.enabled", True)
    store.save()

Failure policy:
- An unresolvable encoding makes ``load`` return False and ``valid`` False
- A file that decodes to something other than a mapping (or fails to
  decode) is replaced by the defaults, silently
- ``save`` never raises by default; failures are logged and kept in
  ``last_error``. Pass ``strict=True`` to get a SaveError instead.

A caller that ignores ``valid`` keeps working on an empty or default
document. The store is not thread-safe and takes no file locks.
"""

from __future__ import annotations

import logging
from collections.abc import Iterator, Mapping
from pathlib import PurePath
from typing import Any

from polyconfig.codecs import get_codec
from polyconfig.encoding import (
    Encoding,
    EncodingSelector,
    file_extension,
    resolve_encoding,
)
from polyconfig.errors import CodecError, EncodingUnresolvedError, SaveError
from polyconfig.filesystem import FileSystem, LocalFileSystem
from polyconfig.logging import TRACE, VERBOSE, get_logger
from polyconfig.merge import fill_defaults

log = get_logger("store")


class ConfigStore:
    """A configuration file loaded into memory.

    Attributes:
        document: The loaded key/value tree.
        path: File path the store reads from and saves to.
        requested_encoding: Encoding selector passed to the last load.
        encoding: Resolved encoding, or None while unresolved.
        valid: True once a load (or default bootstrap) succeeded.
        nested_cache: Dotted path -> last resolved value. Memoization only.
        last_error: Exception swallowed by the most recent load or save.
    """

    def __init__(
        self,
        path: str | PurePath,
        encoding: EncodingSelector = Encoding.DETECT,
        defaults: Mapping[str, Any] | None = None,
        *,
        filesystem: FileSystem | None = None,
        logger: logging.Logger | None = None,
    ) -> None:
        """Create a store and load ``path`` immediately.

        Args:
            path: Config file path. Created with ``defaults`` if missing.
            encoding: Explicit encoding, or DETECT to use the extension.
            defaults: Values written for keys the file does not have.
            filesystem: File access collaborator (local disk by default).
            logger: Logger for diagnostics (``polyconfig.store`` by default).
        """
        self.document: dict[str, Any] = {}
        self.nested_cache: dict[str, Any] = {}
        self.path = str(path)
        self.requested_encoding = Encoding.DETECT
        self.encoding: Encoding | None = None
        self.valid = False
        self.last_error: Exception | None = None
        self._fs: FileSystem = filesystem or LocalFileSystem()
        self._log = logger or log

        self.load(path, encoding, defaults)

    # --- Loading ---

    def load(
        self,
        path: str | PurePath,
        encoding: EncodingSelector = Encoding.DETECT,
        defaults: Mapping[str, Any] | None = None,
    ) -> bool:
        """Load a file into the store, replacing the current document.

        Returns:
            False if the encoding could not be resolved or has no codec,
            True otherwise (including when decoding fell back to defaults).
        """
        requested = Encoding.coerce(encoding)
        self.valid = True
        self.last_error = None
        self.path = str(path)
        self.requested_encoding = requested
        self.encoding = None
        defaults = defaults if isinstance(defaults, Mapping) else {}

        if not self._fs.exists(self.path):
            self.document = {}
            fill_defaults(defaults, self.document)
            self._resolve_encoding()
            self._log.debug("Config %s not found, writing defaults", self.path)
            self.save()
            return True

        if not self._resolve_encoding():
            return False

        codec = get_codec(self.encoding)
        if codec is None:
            self.valid = False
            self.last_error = EncodingUnresolvedError(self.path, f"no codec for {self.encoding}")
            self._log.warning("No codec for encoding %s of %s", self.encoding, self.path)
            return False

        data: Any = None
        try:
            if codec.binary:
                content: str | bytes = self._fs.read_bytes(self.path)
            else:
                content = self._fs.read_text(self.path)
            data = codec.decode(content, source=self.path, log=self._log)
        except (OSError, UnicodeDecodeError, CodecError) as e:
            self.last_error = e
            self._log.debug("Could not decode %s, using defaults: %s", self.path, e)

        self.document = data if isinstance(data, dict) else {}

        filled = fill_defaults(defaults, self.document)
        if filled and isinstance(data, dict):
            self._log.debug("Filled %d defaults into %s", filled, self.path)
            self.save()

        self._log.log(
            VERBOSE, "Loaded %s as %s, %d keys", self.path, self.encoding, len(self.document)
        )
        return True

    def _resolve_encoding(self) -> bool:
        """Resolve ``requested_encoding`` for ``path``; mark invalid on failure."""
        resolved = resolve_encoding(self.requested_encoding, self.path)
        if resolved is None:
            self.valid = False
            extension = file_extension(self.path)
            self.last_error = EncodingUnresolvedError(
                self.path, f"unknown extension {extension!r}"
            )
            self._log.warning("Unknown config format %r for %s", extension, self.path)
            return False
        self.encoding = resolved
        return True

    def reload(self) -> bool:
        """Discard in-memory changes and load the file again.

        Defaults given to the first load are not reapplied.
        """
        self.document = {}
        self.nested_cache = {}
        self.valid = False
        return self.load(self.path, self.requested_encoding)

    def check(self) -> bool:
        """Return True if the store loaded correctly."""
        return self.valid

    # --- Saving ---

    def save(self, options: Mapping[str, Any] | None = None, *, strict: bool = False) -> bool:
        """Write the document back to ``path`` in the resolved encoding.

        Args:
            options: Codec-specific output options (e.g. ``{"indent": 2}``
                for JSON, ``{"protocol": 4}`` for serialized files).
            strict: Raise SaveError instead of logging the failure.

        Returns:
            False if the store is invalid. Otherwise True, even when the
            write failed; check ``last_error`` or use ``strict``.

        Raises:
            SaveError: Only with ``strict=True``, when encoding or writing fails.
        """
        if not self.valid:
            return False

        try:
            codec = get_codec(self.encoding)
            if codec is None:
                raise EncodingUnresolvedError(self.path, f"no codec for {self.encoding}")
            content = codec.encode(self.document, **dict(options or {}))
            if isinstance(content, bytes):
                self._fs.write_bytes(self.path, content)
            else:
                self._fs.write_text(self.path, content)
        except Exception as e:
            self.last_error = e
            self._log.error("Could not save config %s: %s", self.path, e)
            self._log.debug("Save failure details for %s", self.path, exc_info=True)
            if strict:
                raise SaveError(self.path, e) from e
        else:
            self._log.log(VERBOSE, "Saved %s as %s", self.path, self.encoding)
        return True

    # --- Flat keys ---

    def get(self, key: str, default: Any = False) -> Any:
        """Return a top-level value, or ``default`` if missing or the store is invalid."""
        if self.valid and key in self.document:
            return self.document[key]
        return default

    def set(self, key: str, value: Any = True) -> None:
        """Set a top-level value and drop cached nested lookups beneath it."""
        self.document[key] = value
        prefix = key + "."
        for cached_key in [k for k in self.nested_cache if k.startswith(prefix)]:
            del self.nested_cache[cached_key]

    def exists(self, key: str, case_insensitive: bool = False) -> bool:
        """Check for a top-level key, optionally ignoring case."""
        if case_insensitive:
            wanted = key.lower()
            return any(str(k).lower() == wanted for k in self.document)
        return key in self.document

    def remove(self, key: str) -> None:
        """Delete a top-level key. Cached nested lookups are left alone."""
        self.document.pop(key, None)

    def get_all(self, keys_only: bool = False) -> dict[str, Any] | list[str]:
        """Return a shallow copy of the document, or just its top-level keys.

        Nested mappings are shared with the store; change them through
        ``set_nested`` so cached lookups stay coherent.
        """
        if keys_only:
            return list(self.document)
        return dict(self.document)

    def set_all(self, document: Mapping[str, Any]) -> None:
        """Replace the whole document."""
        self.document = dict(document)

    def set_defaults(self, defaults: Mapping[str, Any]) -> int:
        """Fill missing keys from ``defaults`` without saving.

        Returns:
            Number of values inserted.
        """
        return fill_defaults(defaults, self.document)

    # --- Dotted paths ---

    def get_nested(self, key: str, default: Any = None) -> Any:
        """Resolve a dotted path such as ``"db.primary.host"``.

        Successful lookups are cached; misses return ``default`` uncached.
        """
        if key in self.nested_cache:
            self._log.log(TRACE, "Cache hit for %s", key)
            return self.nested_cache[key]

        node: Any = self.document
        for part in key.split("."):
            if isinstance(node, dict) and part in node:
                node = node[part]
            else:
                self._log.log(TRACE, "No value at %s", key)
                return default

        self._log.log(TRACE, "Cache miss for %s", key)
        self.nested_cache[key] = node
        return node

    def set_nested(self, key: str, value: Any) -> None:
        """Set a dotted path, creating intermediate mappings as needed.

        Only the cache entry for ``key`` itself is updated.
        """
        parts = key.split(".")
        node = self.document
        for part in parts[:-1]:
            child = node.get(part)
            if not isinstance(child, dict):
                child = {}
                node[part] = child
            node = child
        node[parts[-1]] = value
        self.nested_cache[key] = value

    def remove_nested(self, key: str) -> bool:
        """Delete the value at a dotted path.

        Drops the cache entries for ``key`` and anything beneath it.

        Returns:
            True if a value was removed.
        """
        parts = key.split(".")
        node: Any = self.document
        for part in parts[:-1]:
            if not isinstance(node, dict) or part not in node:
                return False
            node = node[part]
        if not isinstance(node, dict) or parts[-1] not in node:
            return False

        del node[parts[-1]]
        prefix = key + "."
        for cached_key in [k for k in self.nested_cache if k == key or k.startswith(prefix)]:
            del self.nested_cache[cached_key]
        return True

    # --- Mapping sugar ---

    def __getitem__(self, key: str) -> Any:
        if not self.valid or key not in self.document:
            raise KeyError(key)
        return self.document[key]

    def __setitem__(self, key: str, value: Any) -> None:
        self.set(key, value)

    def __delitem__(self, key: str) -> None:
        if key not in self.document:
            raise KeyError(key)
        self.remove(key)

    def __contains__(self, key: object) -> bool:
        return isinstance(key, str) and self.exists(key)

    def __iter__(self) -> Iterator[str]:
        return iter(self.document)

    def __len__(self) -> int:
        return len(self.document)

    def __repr__(self) -> str:
        state = "valid" if self.valid else "invalid"
        return f"<ConfigStore {self.path!r} {self.encoding or 'unresolved'} {state}, {len(self)} keys>"


def load_config(
    path: str | PurePath,
    encoding: EncodingSelector = Encoding.DETECT,
    defaults: Mapping[str, Any] | None = None,
    **kwargs: Any,
) -> ConfigStore:
    """Open a config file as a ConfigStore.

    Shorthand for ``ConfigStore(path, encoding, defaults, **kwargs)``;
    check ``store.valid`` for the load result.
    """
    return ConfigStore(path, encoding, defaults, **kwargs)
