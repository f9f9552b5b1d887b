"""Keep the per-project data directory out of version control."""

from __future__ import annotations

import subprocess
from enum import Enum
from pathlib import Path

from .constants import GIT_COMMAND_TIMEOUT, LOCAL_DIR
from .logging import get_logger

logger = get_logger(__name__)

GITIGNORE_COMMENT = "# Confined Claude - per-project container data"


class GitignoreResult(str, Enum):
    """What ensure_gitignore did."""

    NOT_A_REPO = "not-a-repo"
    ALREADY_IGNORED = "already-ignored"
    APPENDED = "appended"
    CREATED = "created"


def _git(project_dir: Path, *args: str) -> bool:
    """Run a git command in project_dir; True on exit code 0."""
    try:
        result = subprocess.run(
            ["git", "-C", str(project_dir), *args],
            capture_output=True,
            text=True,
            check=False,
            timeout=GIT_COMMAND_TIMEOUT,
        )
    except FileNotFoundError:
        logger.debug("git not found in PATH")
        return False
    except subprocess.TimeoutExpired:
        logger.debug("git %s timed out", args[0])
        return False
    return result.returncode == 0


def is_git_work_tree(project_dir: Path) -> bool:
    return _git(project_dir, "rev-parse", "--is-inside-work-tree")


def is_ignored(project_dir: Path, entry: str = LOCAL_DIR) -> bool:
    return _git(project_dir, "check-ignore", "-q", entry)


def ensure_gitignore(project_dir: Path, entry: str = LOCAL_DIR) -> GitignoreResult:
    """Add `entry/` to project_dir/.gitignore unless git already ignores it.

    Does nothing outside a git work tree.
    """
    if not is_git_work_tree(project_dir):
        return GitignoreResult.NOT_A_REPO

    if is_ignored(project_dir, entry):
        return GitignoreResult.ALREADY_IGNORED

    gitignore = project_dir / ".gitignore"
    lines = f"{GITIGNORE_COMMENT}\n{entry}/\n"

    if gitignore.exists():
        with open(gitignore, "a", encoding="utf-8") as f:
            f.write(f"\n{lines}")
        logger.debug("Appended %s/ to %s", entry, gitignore)
        return GitignoreResult.APPENDED

    gitignore.write_text(lines, encoding="utf-8")
    logger.debug("Created %s", gitignore)
    return GitignoreResult.CREATED
