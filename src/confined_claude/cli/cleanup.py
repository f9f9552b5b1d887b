"""Cleanup operations for confined-claude.

Both commands show what will be deleted and ask before touching anything.
Project cleanup only ever deletes the current project's data directory;
global cleanup only ever deletes the shared tree.
"""

from __future__ import annotations

import shutil
from pathlib import Path

from rich.console import Console
from rich.markup import escape

from ..constants import LOCAL_DIR
from ..errors import CleanupError
from ..logging import get_logger
from ..paths import ProjectLayout, SharedLayout, dir_size, ensure_dirs, format_size
from .utils import confirm

console = Console(highlight=False, soft_wrap=True)
logger = get_logger(__name__)


def _remove_tree(path: Path) -> None:
    logger.debug("Removing %s", path)
    try:
        shutil.rmtree(path)
    except OSError as e:
        raise CleanupError(f"Could not delete {path}: {e}") from e


def clean_project(project: ProjectLayout) -> bool:
    """Delete the Project Data Directory of one project after confirmation.

    Returns:
        True if the directory was deleted.
    """
    target = project.data_dir
    if not target.is_dir():
        console.print(f"No {LOCAL_DIR}/ found in the current directory, nothing to clean.")
        return False

    size = format_size(dir_size(target))
    console.print(f"About to delete: {escape(str(target))} ({size})")
    if not confirm():
        console.print("Cancelled.")
        return False

    _remove_tree(target)
    console.print("[green]Deleted.[/green]")
    return True


def clean_global(shared: SharedLayout) -> bool:
    """Delete the shared tree after confirmation, then recreate its skeleton.

    Project Data Directories live inside the projects and are never touched.

    Returns:
        True if the shared data was deleted.
    """
    target = shared.root
    if not target.is_dir():
        console.print("No shared data found, nothing to clean.")
        return False

    size = format_size(dir_size(target))
    console.print(f"About to delete all shared container data ({size}):")
    console.print(f"   {escape(str(target))}")
    console.print("   This includes: pip/npm cache, container's Claude config and plugins.")
    console.print("   (Your host ~/.claude/ is NOT affected.)")
    if not confirm():
        console.print("Cancelled.")
        return False

    _remove_tree(target)
    try:
        ensure_dirs(shared.skeleton)
    except OSError as e:
        raise CleanupError(f"Could not recreate {target}: {e}") from e
    console.print("[green]Cleared.[/green] You'll need to re-install plugins inside the container.")
    return True
