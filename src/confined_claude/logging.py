"""Diagnostic logging for confined-claude.

User-facing output goes through rich consoles in the cli package. This module
only carries diagnostics (docker/git commands, copies, removals) on stderr,
silent unless asked for:

    - confined-claude --debug
    - CONFINED_CLAUDE_DEBUG=1

Usage:
    from confined_claude.logging import get_logger
    logger = get_logger(__name__)
"""

from __future__ import annotations

import logging
import os
import sys

ROOT_LOGGER = "confined_claude"
DEBUG_ENV = "CONFINED_CLAUDE_DEBUG"

LOG_FORMAT = "%(asctime)s [%(levelname)s] %(name)s: %(message)s"
LOG_FORMAT_DEBUG = "%(asctime)s [%(levelname)s] %(name)s:%(lineno)d: %(message)s"
DATE_FORMAT = "%Y-%m-%d %H:%M:%S"

_loggers: dict[str, logging.Logger] = {}
_initialized = False


def _get_log_level() -> int:
    """Determine log level from CONFINED_CLAUDE_DEBUG."""
    if os.environ.get(DEBUG_ENV, "").lower() in ("1", "true", "yes"):
        return logging.DEBUG
    return logging.WARNING


def _formatter(level: int) -> logging.Formatter:
    # Line numbers only help when debugging
    fmt = LOG_FORMAT_DEBUG if level == logging.DEBUG else LOG_FORMAT
    return logging.Formatter(fmt, datefmt=DATE_FORMAT)


def _apply_level(level: int) -> None:
    root_logger = logging.getLogger(ROOT_LOGGER)
    root_logger.setLevel(level)
    for handler in root_logger.handlers:
        handler.setLevel(level)
        handler.setFormatter(_formatter(level))


def _init_logging() -> None:
    """Attach the stderr handler to the confined_claude logger (once)."""
    global _initialized
    if _initialized:
        return

    root_logger = logging.getLogger(ROOT_LOGGER)
    if not root_logger.handlers:
        root_logger.addHandler(logging.StreamHandler(sys.stderr))
    _apply_level(_get_log_level())
    _initialized = True


def get_logger(name: str) -> logging.Logger:
    """Get a logger under the confined_claude namespace.

    Args:
        name: Module name (typically __name__).
    """
    _init_logging()

    if not name.startswith(ROOT_LOGGER):
        name = f"{ROOT_LOGGER}.{name}"

    if name not in _loggers:
        _loggers[name] = logging.getLogger(name)

    return _loggers[name]


def set_debug(enabled: bool = True) -> None:
    """Switch diagnostics between DEBUG and WARNING (the --debug flag)."""
    _init_logging()
    _apply_level(logging.DEBUG if enabled else logging.WARNING)
