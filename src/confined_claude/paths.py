"""Filesystem layout for confined-claude.

Two trees are managed here:

    <project>/.confined-claude/          Project Data Directory (per project path)
        venvs/
        local-bin/

    ~/.local/share/confined-claude/      Install root
        Dockerfile                       Generated build context
        shared/                          Shared by every instance
            pip-cache/
            npm-cache/
            claude-config/               Container's own ~/.claude

The shared tree is unsynchronized: concurrent instances append to the caches
and the last writer wins for files in claude-config.
"""

from __future__ import annotations

import os
import re
from dataclasses import dataclass
from pathlib import Path

from .config import get_install_dir
from .constants import (
    CLAUDE_CONFIG_DIRNAME,
    CONTAINER_PREFIX,
    LOCAL_BIN_DIRNAME,
    LOCAL_DIR,
    NPM_CACHE_DIRNAME,
    PIP_CACHE_DIRNAME,
    SHARED_DIRNAME,
    STATUS_SEARCH_DEPTH,
    VENVS_DIRNAME,
)
from .logging import get_logger

logger = get_logger(__name__)

_SLUG_INVALID = re.compile(r"[^a-z0-9._-]")


def project_slug(name: str) -> str:
    """Normalize a project directory name for use in a container name.

    Lower-cases the name and replaces every character outside [a-z0-9._-]
    with '-'. Distinct names may collapse to the same slug.

    Examples:
        >>> project_slug("MyApp 2.0")
        'myapp-2.0'
    """
    return _SLUG_INVALID.sub("-", name.lower())


def get_container_name(project_name: str) -> str:
    """Get the deterministic instance name for a project directory name."""
    return f"{CONTAINER_PREFIX}{project_slug(project_name)}"


@dataclass(frozen=True)
class SharedLayout:
    """Paths of the shared tree under the install root."""

    install_dir: Path

    @property
    def root(self) -> Path:
        return self.install_dir / SHARED_DIRNAME

    @property
    def pip_cache(self) -> Path:
        return self.root / PIP_CACHE_DIRNAME

    @property
    def npm_cache(self) -> Path:
        return self.root / NPM_CACHE_DIRNAME

    @property
    def claude_config(self) -> Path:
        """Shared Configuration Directory (the container's ~/.claude)."""
        return self.root / CLAUDE_CONFIG_DIRNAME

    @property
    def cache_dirs(self) -> list[Path]:
        return [self.pip_cache, self.npm_cache]

    @property
    def skeleton(self) -> list[Path]:
        """Every directory a launch expects to exist."""
        return [*self.cache_dirs, self.claude_config]

    def ensure(self) -> None:
        ensure_dirs(self.skeleton)


@dataclass(frozen=True)
class ProjectLayout:
    """Paths derived from one project directory.

    The Project Data Directory lives inside the project directory itself, so
    two projects with the same base name in different parents never share it.
    """

    project_dir: Path

    @property
    def name(self) -> str:
        return self.project_dir.name

    @property
    def container_name(self) -> str:
        return get_container_name(self.name)

    @property
    def data_dir(self) -> Path:
        return self.project_dir / LOCAL_DIR

    @property
    def venvs(self) -> Path:
        return self.data_dir / VENVS_DIRNAME

    @property
    def local_bin(self) -> Path:
        return self.data_dir / LOCAL_BIN_DIRNAME

    def ensure(self) -> None:
        ensure_dirs([self.venvs, self.local_bin])


def get_shared_layout() -> SharedLayout:
    return SharedLayout(get_install_dir())


def get_project_layout(project_dir: str | Path = ".") -> ProjectLayout:
    """Build the layout for a project directory (resolved to an absolute path)."""
    return ProjectLayout(Path(project_dir).resolve())


def ensure_dirs(paths: list[Path]) -> None:
    """Create directories (with parents); existing ones are left untouched."""
    for path in paths:
        path.mkdir(parents=True, exist_ok=True)
        logger.debug("Ensured directory: %s", path)


def dir_size(path: Path) -> int:
    """Total size in bytes of all files below path (symlinks not followed)."""
    total = 0
    for dirpath, _dirnames, filenames in os.walk(path):
        for filename in filenames:
            try:
                total += os.lstat(os.path.join(dirpath, filename)).st_size
            except OSError:
                # File vanished or unreadable while walking
                continue
    return total


def format_size(num_bytes: int) -> str:
    """Render a byte count the way `du -h` does (0B, 4.0K, 12M, 1.5G).

    Examples:
        >>> format_size(0)
        '0B'
        >>> format_size(1536)
        '1.5K'
        >>> format_size(50 * 1024 * 1024)
        '50M'
    """
    if num_bytes < 1024:
        return f"{num_bytes}B"

    size = num_bytes / 1024
    for unit in ("K", "M", "G"):
        if size < 1024:
            break
        size /= 1024
    else:
        unit = "T"
    return f"{size:.1f}{unit}" if size < 10 else f"{size:.0f}{unit}"


def find_project_data_dirs(root: Path, max_depth: int = STATUS_SEARCH_DEPTH) -> list[Path]:
    """Find Project Data Directories below root.

    Mirrors `find root -maxdepth N -type d -name .confined-claude`: the match
    itself may sit at depth max_depth, matches are not descended into,
    symlinks are not followed and unreadable directories are skipped.

    Returns:
        Sorted list of matching directories.
    """
    found: list[Path] = []
    root_depth = len(root.parts)

    for dirpath, dirnames, _filenames in os.walk(root):
        current = Path(dirpath)
        depth = len(current.parts) - root_depth
        if LOCAL_DIR in dirnames:
            found.append(current / LOCAL_DIR)
            dirnames.remove(LOCAL_DIR)
        if depth + 1 >= max_depth:
            dirnames.clear()

    return sorted(found)
