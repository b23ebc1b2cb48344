"""Java-style ``key=value`` properties codec.

Decoding is deliberately lenient: every ``key=value`` run anywhere in the
text is picked up, keys are limited to ``[A-Za-z0-9-_.]`` and anything
that is not a key=value pair (comments, blank lines) is skipped.

Values are one line each. On encode, CR and LF inside a value are written
as the two-character escapes ``\\r`` and ``\\n`` so a value can never
start a new pair; decode does not unescape them.
"""

from __future__ import annotations

import logging
import re
from collections.abc import Mapping
from datetime import datetime
from typing import Any

from polyconfig.codecs.base import Codec
from polyconfig.encoding import Encoding
from polyconfig.logging import get_logger

_log = get_logger("codecs.properties")

_PAIR_RE = re.compile(r"([a-zA-Z0-9\-_.]*)=([^\r\n]*)")

_TRUE_WORDS = frozenset({"on", "true", "yes"})
_FALSE_WORDS = frozenset({"off", "false", "no"})

_LINE_BREAKS = str.maketrans({"\r": "\\r", "\n": "\\n"})

LINE_END = "\r\n"
HEADER = "#Properties Config file"


def _now() -> datetime:
    return datetime.now().astimezone()


def coerce_value(raw: str) -> str | bool:
    """Trim a raw value and map boolean words to bools."""
    value = raw.strip()
    lowered = value.lower()
    if lowered in _TRUE_WORDS:
        return True
    if lowered in _FALSE_WORDS:
        return False
    return value


def format_value(value: Any) -> str:
    """Render one value for a properties line.

    Booleans become on/off, None is empty, and lists (or dicts) are
    flattened by joining their values with ';'. Line breaks are escaped.
    """
    if isinstance(value, bool):
        return "on" if value else "off"
    if value is None:
        return ""
    if isinstance(value, Mapping):
        return ";".join(format_value(v) for v in value.values())
    if isinstance(value, (list, tuple, set)):
        return ";".join(format_value(v) for v in value)
    return str(value).translate(_LINE_BREAKS)


def timestamp(now: datetime | None = None) -> str:
    """Header timestamp, e.g. ``Sat Oct 17 09:05:00 UTC 2026``.

    A naive ``now`` is taken as local time.
    """
    if now is None:
        now = _now()
    elif now.tzinfo is None:
        now = now.astimezone()
    return f"{now:%a %b} {now.day} {now:%H:%M:%S} {now:%Z} {now.year}"


class PropertiesCodec(Codec):
    """Codec for .properties / .cnf / .conf / .config files."""

    encoding = Encoding.PROPERTIES

    def decode(
        self,
        content: str | bytes,
        *,
        source: str = "<memory>",
        log: logging.Logger | None = None,
    ) -> dict[str, Any]:
        if isinstance(content, bytes):
            content = content.decode("utf-8")
        log = log or _log

        data: dict[str, Any] = {}
        for match in _PAIR_RE.finditer(content):
            key = match.group(1)
            if key in data:
                log.warning("Repeated property %s in %s", key, source)
            data[key] = coerce_value(match.group(2))
        return data

    def encode(self, document: dict[str, Any], **options: Any) -> str:
        lines = [HEADER, "#" + timestamp()]
        for key, value in document.items():
            lines.append(f"{key}={format_value(value)}")
        return LINE_END.join(lines) + LINE_END
