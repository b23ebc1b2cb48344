"""YAML codec backed by PyYAML."""

from __future__ import annotations

import logging
import re
from typing import Any

import yaml

from polyconfig.codecs.base import Codec
from polyconfig.encoding import Encoding
from polyconfig.errors import CodecError

# "<indent><bareword>:" alone on a line, i.e. a key that opens a block
_BARE_KEY_RE = re.compile(r"^( *)([a-zA-Z_][a-zA-Z0-9_]*) *:$", re.MULTILINE)

DEFAULT_DUMP_OPTIONS: dict[str, Any] = {
    "allow_unicode": True,
    "default_flow_style": False,
    "sort_keys": False,
}


def normalize_yaml_keys(text: str) -> str:
    """Quote bareword block keys so YAML reads them as strings.

    ``on:``, ``no:`` or ``y:`` opening a nested block would otherwise
    resolve to booleans under YAML 1.1 and lose their key name.
    """
    return _BARE_KEY_RE.sub(r'\1"\2":', text)


class YamlCodec(Codec):
    """Codec for .yml / .yaml files."""

    encoding = Encoding.YAML

    def decode(
        self,
        content: str | bytes,
        *,
        source: str = "<memory>",
        log: logging.Logger | None = None,
    ) -> Any:
        if isinstance(content, bytes):
            content = content.decode("utf-8")
        # CRLF files would never match the $ anchor
        text = normalize_yaml_keys(content.replace("\r\n", "\n"))
        try:
            return yaml.safe_load(text)
        except yaml.YAMLError as e:
            raise CodecError(f"Invalid YAML in {source}: {e}") from e

    def encode(self, document: dict[str, Any], **options: Any) -> str:
        dump_options = {**DEFAULT_DUMP_OPTIONS, **options}
        try:
            return yaml.safe_dump(document, **dump_options)
        except yaml.YAMLError as e:
            raise CodecError(f"Cannot encode document as YAML: {e}") from e
