"""Configuration dataclasses for polyconfig's own ambient settings."""

from __future__ import annotations

from dataclasses import dataclass


@dataclass
class LoggingConfig:
    """Settings for ``setup_logging``.

    Example:
        setup_logging(LoggingConfig(verbose=4, file="~/.polyconfig/polyconfig.log"))
    """

    level: str | None = None  # DEBUG, INFO, WARNING, ERROR
    verbose: int | None = None  # 0-4, overrides level when set
    file: str | None = None  # Log file path (expands ~)
