"""
Runtime settings for the scoring service and command line.

Values come from THREATSCORE_* environment variables, falling back to the
defaults below.
"""

# src/threatscore/settings.py
import logging
import os
import pathlib
from dataclasses import dataclass, field

from .log_writer import DETECTION_LOG


def _env_int(name: str, default: int) -> int:
    value = os.getenv(name)
    if value is None or not value.strip():
        return default
    try:
        return int(value)
    except ValueError:
        raise ValueError(f"{name} must be an integer, got {value!r}") from None


@dataclass(frozen=True)
class Settings:
    """
    Attributes:
        log_dir: Directory holding run.log and the detection log
        host: Interface the API server binds to
        port: Port the API server listens on
        log_level: Level name for run.log and uvicorn ("debug", "info", ...)
    """
    log_dir: str = field(default_factory=lambda: os.getenv("THREATSCORE_LOG_DIR", "logs"))
    host: str = field(default_factory=lambda: os.getenv("THREATSCORE_HOST", "0.0.0.0"))
    port: int = field(default_factory=lambda: _env_int("THREATSCORE_PORT", 8000))
    log_level: str = field(
        default_factory=lambda: os.getenv("THREATSCORE_LOG_LEVEL", "info").lower())

    @property
    def detection_log(self) -> str:
        return str(pathlib.Path(self.log_dir) / DETECTION_LOG)

    @property
    def logging_level(self) -> int:
        level = logging.getLevelName(self.log_level.upper())
        return level if isinstance(level, int) else logging.INFO
