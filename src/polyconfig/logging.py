"""Logging for polyconfig.

Every module logs through a child of the ``polyconfig`` logger obtained
with ``get_logger()``. Two extra levels sit between the standard ones:

    VERBOSE (15)  load and save summaries
    TRACE (5)     nested-key cache hits and misses

Applications that configure the ``polyconfig`` logger themselves can
ignore ``setup_logging``. Otherwise call it once with a LoggingConfig;
without a file it logs to stderr when stderr is a terminal, and
``POLYCONFIG_LOG`` names a log file when the config does not.
"""

from __future__ import annotations

import logging
import os
import sys
from typing import TYPE_CHECKING

if TYPE_CHECKING:
    from polyconfig.schema import LoggingConfig

TRACE = 5
VERBOSE = 15

logging.addLevelName(TRACE, "TRACE")
logging.addLevelName(VERBOSE, "VERBOSE")

LOG_ENV_VAR = "POLYCONFIG_LOG"

logger = logging.getLogger("polyconfig")

_initialized = False

# verbose=0 shows errors only, verbose=4 shows cache traffic
_VERBOSITY_LEVELS = (logging.ERROR, logging.WARNING, logging.INFO, VERBOSE, TRACE)


class _LowercaseLevelFormatter(logging.Formatter):
    def format(self, record: logging.LogRecord) -> str:
        record.levelname = record.levelname.lower()
        return super().format(record)


def resolve_level(config: LoggingConfig | None) -> int:
    """Pick the effective log level for a config.

    ``verbose`` wins over ``level``. Verbosity beyond 4 means TRACE, and
    unknown level names fall back to INFO.
    """
    if config is None:
        return logging.INFO
    if config.verbose is not None:
        return _VERBOSITY_LEVELS[max(0, min(config.verbose, len(_VERBOSITY_LEVELS) - 1))]
    if config.level:
        name = config.level.upper()
        level = logging.getLevelName("WARNING" if name == "WARN" else name)
        if isinstance(level, int):
            return level
    return logging.INFO


def _open_handler(config: LoggingConfig | None) -> logging.Handler | None:
    """File handler if a log file is configured, else stderr on a terminal."""
    path = (config.file if config else None) or os.environ.get(LOG_ENV_VAR)
    if path:
        try:
            return logging.FileHandler(os.path.expanduser(path), mode="a", encoding="utf-8")
        except OSError as e:
            if not sys.stderr.isatty():
                return None
            print(f"[polyconfig] Failed to open log file: {e}", file=sys.stderr)
    if sys.stderr.isatty():
        return logging.StreamHandler(sys.stderr)
    return None


def setup_logging(config: LoggingConfig | None = None) -> None:
    """Install a handler on the ``polyconfig`` logger.

    Only the first call has an effect; use ``reset_logging`` to start over.
    """
    global _initialized
    if _initialized:
        return
    _initialized = True

    level = resolve_level(config)
    logger.setLevel(level)

    handler = _open_handler(config)
    if handler is None:
        return
    handler.setLevel(level)
    handler.setFormatter(
        _LowercaseLevelFormatter("%(asctime)s %(levelname)s: %(message)s", datefmt="%H:%M:%S")
    )
    logger.addHandler(handler)


def reset_logging() -> None:
    """Remove installed handlers and allow ``setup_logging`` to run again."""
    global _initialized
    for handler in list(logger.handlers):
        logger.removeHandler(handler)
        handler.close()
    logger.setLevel(logging.NOTSET)
    _initialized = False


def get_logger(name: str | None = None) -> logging.Logger:
    """Return the package logger, or its child ``polyconfig.<name>``."""
    if name:
        return logger.getChild(name)
    return logger
