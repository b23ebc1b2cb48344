"""Native Python serialization codec (pickle).

The format is opaque and not meant for hand editing. Unpickling runs
arbitrary code, so only load .sl files the application wrote itself.
"""

from __future__ import annotations

import logging
import pickle
from typing import Any

from polyconfig.codecs.base import Codec
from polyconfig.encoding import Encoding
from polyconfig.errors import CodecError


class SerializedCodec(Codec):
    """Codec for .sl / .serialize files."""

    encoding = Encoding.SERIALIZED
    binary = True

    def decode(
        self,
        content: str | bytes,
        *,
        source: str = "<memory>",
        log: logging.Logger | None = None,
    ) -> Any:
        try:
            if isinstance(content, str):
                content = content.encode("latin-1")
            return pickle.loads(content)
        except Exception as e:
            # pickle can fail with almost anything on corrupt input
            raise CodecError(f"Cannot unserialize {source}: {e}") from e

    def encode(self, document: dict[str, Any], **options: Any) -> bytes:
        protocol = options.get("protocol", pickle.DEFAULT_PROTOCOL)
        try:
            return pickle.dumps(document, protocol=protocol)
        except (pickle.PicklingError, TypeError, AttributeError) as e:
            raise CodecError(f"Cannot serialize document: {e}") from e
