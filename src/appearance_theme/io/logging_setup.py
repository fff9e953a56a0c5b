"""Logging bootstrap for appearance-theme.

// [LAW:single-enforcer] Only configure() attaches handlers to the package logger.
// [LAW:one-source-of-truth] Level and log file come from the environment, resolved once.

Environment:
  APPEARANCE_THEME_LOG_LEVEL  console level (default WARNING)
  APPEARANCE_THEME_LOG_FILE   explicit log file
  APPEARANCE_THEME_LOG_DIR    directory for the daily log file
"""

from __future__ import annotations

import logging
import os
from dataclasses import dataclass
from datetime import date
from logging.handlers import RotatingFileHandler
from pathlib import Path

ROOT_LOGGER = "appearance_theme"
DEFAULT_LEVEL = "WARNING"
LOG_FORMAT_CONSOLE = "[%(name)s] %(levelname)s %(message)s"
LOG_FORMAT_FILE = "%(asctime)s %(levelname)s %(name)s %(message)s"


@dataclass(frozen=True)
class LoggingRuntime:
    level_name: str
    level: int
    file_path: str


_RUNTIME: LoggingRuntime | None = None


def _parse_level(raw: str) -> tuple[str, int]:
    """Map a level name to (name, number). Unknown names fall back to WARNING."""
    level = logging.getLevelName((raw or DEFAULT_LEVEL).strip().upper())
    if not isinstance(level, int):
        level = logging.getLevelName(DEFAULT_LEVEL)
    return logging.getLevelName(level), level


def _resolve_log_path() -> Path:
    explicit = os.environ.get("APPEARANCE_THEME_LOG_FILE")
    if explicit:
        return Path(explicit)
    log_dir = os.environ.get("APPEARANCE_THEME_LOG_DIR") or os.path.expanduser(
        "~/.local/share/appearance-theme/logs"
    )
    return Path(log_dir) / f"appearance-theme-{date.today():%Y%m%d}.log"


def _build_handlers(runtime: LoggingRuntime) -> list[logging.Handler]:
    console = logging.StreamHandler()
    console.setLevel(runtime.level)
    console.setFormatter(logging.Formatter(LOG_FORMAT_CONSOLE))

    logfile = RotatingFileHandler(
        runtime.file_path, maxBytes=1024 * 1024, backupCount=3, encoding="utf-8"
    )
    # INFO and up always reach the file, whatever the console level.
    logfile.setLevel(min(runtime.level, logging.INFO))
    logfile.setFormatter(logging.Formatter(LOG_FORMAT_FILE, datefmt="%Y-%m-%dT%H:%M:%S"))
    return [console, logfile]


def configure() -> LoggingRuntime:
    """Attach console and rotating file handlers to the appearance_theme logger.

    Safe to call more than once: later calls return the first runtime.
    """
    global _RUNTIME
    if _RUNTIME is not None:
        return _RUNTIME

    level_name, level = _parse_level(os.environ.get("APPEARANCE_THEME_LOG_LEVEL", DEFAULT_LEVEL))
    path = _resolve_log_path()
    path.parent.mkdir(parents=True, exist_ok=True)
    runtime = LoggingRuntime(level_name=level_name, level=level, file_path=str(path))

    logger = logging.getLogger(ROOT_LOGGER)
    logger.handlers.clear()
    for handler in _build_handlers(runtime):
        logger.addHandler(handler)
    logger.setLevel(min(level, logging.INFO))
    logger.propagate = False
    logging.captureWarnings(True)

    _RUNTIME = runtime
    return runtime


def reset_for_tests() -> None:
    """Drop handlers and forget the runtime so configure() can run again."""
    global _RUNTIME
    logger = logging.getLogger(ROOT_LOGGER)
    for handler in list(logger.handlers):
        handler.close()
    logger.handlers.clear()
    logger.propagate = True
    logger.setLevel(logging.NOTSET)
    _RUNTIME = None
