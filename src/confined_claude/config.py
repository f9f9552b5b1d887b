"""Configuration for confined-claude.

There is no configuration file: every location is fixed relative to the
invoking user's home directory, except the Host Configuration Root which may
be overridden with CLAUDE_CONFIG_DIR. Paths are resolved at call time.
"""

from __future__ import annotations

import os
from enum import Enum
from pathlib import Path

from .constants import HOST_CLAUDE_DIR, HOST_CLAUDE_DIR_ENV, HOST_GITCONFIG, INSTALL_DIR
from .logging import get_logger

logger = get_logger(__name__)


class Command(str, Enum):
    """Every action the CLI can take, decoded once from the command-line flags."""

    LAUNCH = "launch"  # Default interactive entry point
    YOLO = "yolo"  # Claude Code with permissions checks skipped
    SHELL = "shell"  # Plain bash instead of Claude Code
    STATUS = "status"
    CLEAN = "clean"
    CLEAN_GLOBAL = "clean-global"
    REBUILD = "rebuild"

    @property
    def launches_container(self) -> bool:
        return self in LAUNCH_COMMANDS


# Entry point run inside the container for each launching command
LAUNCH_COMMANDS: dict[Command, list[str]] = {
    Command.LAUNCH: ["claude"],
    Command.YOLO: ["claude", "--dangerously-skip-permissions"],
    Command.SHELL: ["bash"],
}


def _expand(path: str) -> Path:
    return Path(os.path.expanduser(path))


def get_install_dir() -> Path:
    """Get the install root (~/.local/share/confined-claude)."""
    return _expand(INSTALL_DIR)


def get_host_claude_dir() -> Path:
    """Get the Host Configuration Root.

    CLAUDE_CONFIG_DIR wins when set and non-empty, otherwise ~/.claude.
    The directory is only ever read from.
    """
    override = os.environ.get(HOST_CLAUDE_DIR_ENV, "")
    path = _expand(override) if override else _expand(HOST_CLAUDE_DIR)
    logger.debug("Host Claude config dir: %s", path)
    return path


def get_host_gitconfig() -> Path | None:
    """Get the host's git identity file, or None if it does not exist."""
    gitconfig = _expand(HOST_GITCONFIG)
    return gitconfig if gitconfig.is_file() else None
