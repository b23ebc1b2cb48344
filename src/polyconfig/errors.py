"""Exceptions raised by the configuration store and its codecs."""

from __future__ import annotations


class ConfigStoreError(Exception):
    """Base class for all polyconfig errors."""

    pass


class EncodingUnresolvedError(ConfigStoreError):
    """No encoding could be resolved for a file.

    Raised (and recorded on the store) when:
    - The file extension is not in the detection table
    - The requested encoding has no registered codec
    """

    def __init__(self, path: str, detail: str) -> None:
        self.path = path
        super().__init__(f"Cannot resolve encoding for {path}: {detail}")


class CodecError(ConfigStoreError):
    """A codec failed to decode or encode a document."""

    pass


class SaveError(ConfigStoreError):
    """Persisting a document failed.

    Only raised from ``ConfigStore.save(strict=True)``; the default save
    policy logs the failure and reports success.
    """

    def __init__(self, path: str, cause: BaseException) -> None:
        self.path = path
        self.cause = cause
        super().__init__(f"Could not save config {path}: {cause}")
