"""JSON codec."""

from __future__ import annotations

import json
import logging
from typing import Any

from polyconfig.codecs.base import Codec
from polyconfig.encoding import Encoding
from polyconfig.errors import CodecError

# Pretty-printed, non-ASCII kept as-is, key order preserved
DEFAULT_DUMP_OPTIONS: dict[str, Any] = {
    "indent": 4,
    "ensure_ascii": False,
    "sort_keys": False,
}


class JsonCodec(Codec):
    """Codec for .json / .js files.

    Integers decode to Python ints, which have arbitrary precision, so
    large values are written back with the exact digits they were read with.
    """

    encoding = Encoding.JSON

    def decode(
        self,
        content: str | bytes,
        *,
        source: str = "<memory>",
        log: logging.Logger | None = None,
    ) -> Any:
        try:
            return json.loads(content)
        except (json.JSONDecodeError, UnicodeDecodeError) as e:
            raise CodecError(f"Invalid JSON in {source}: {e}") from e

    def encode(self, document: dict[str, Any], **options: Any) -> str:
        dump_options = {**DEFAULT_DUMP_OPTIONS, **options}
        try:
            return json.dumps(document, **dump_options)
        except (TypeError, ValueError) as e:
            raise CodecError(f"Cannot encode document as JSON: {e}") from e
