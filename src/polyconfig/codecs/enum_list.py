"""Newline-separated list codec (.txt / .list / .enum).

Each non-blank line is a key whose value is True. Values are dropped on
encode, so anything but the key set is lost on a round trip.
"""

from __future__ import annotations

import logging
from typing import Any

from polyconfig.codecs.base import Codec
from polyconfig.encoding import Encoding

LINE_END = "\r\n"


class EnumListCodec(Codec):
    """Codec for enumeration files."""

    encoding = Encoding.ENUM

    def decode(
        self,
        content: str | bytes,
        *,
        source: str = "<memory>",
        log: logging.Logger | None = None,
    ) -> dict[str, bool]:
        if isinstance(content, bytes):
            content = content.decode("utf-8")
        data: dict[str, bool] = {}
        for line in content.replace("\r\n", "\n").strip().split("\n"):
            token = line.strip()
            if token:
                data[token] = True
        return data

    def encode(self, document: dict[str, Any], **options: Any) -> str:
        return LINE_END.join(str(key) for key in document)
